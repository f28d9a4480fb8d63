"""Settings for grid generation."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any, ClassVar

from hexsphere.errors import SettingsError
from hexsphere.geodesic.mesh import DEFAULT_MERGE_TOLERANCE
from hexsphere.geodesic.validation import DEFAULT_UNIT_TOLERANCE

if TYPE_CHECKING:
    from hexsphere.geodesic.generator import GridGenerator


def _positive_number(value) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool) and value > 0


class GridSettings(MutableMapping):
    """Parameters of a generation run.

    Attributes:
        generator : the generator these settings are bound to, if any

    Known keys:
        merge_tolerance (float): distance under which vertices and boundary points coincide
        unit_length_tolerance (float): allowed deviation of cell positions from unit length
        brute_force_neighbors (bool): compare all pairs of cells when resolving neighbors
        spatial_index (bool): build a KD-tree on the finished grid

    Notes:
        in essence, this is a mutable mapping with
        protection, so it cannot be mutated while
        its generator is running. Unknown keys are
        accepted and carried along.

    """

    defaults: ClassVar[dict[str, Any]] = {
        "merge_tolerance": DEFAULT_MERGE_TOLERANCE,
        "unit_length_tolerance": DEFAULT_UNIT_TOLERANCE,
        "brute_force_neighbors": False,
        "spatial_index": False,
    }

    _validators: ClassVar[dict[str, tuple]] = {
        "merge_tolerance": (_positive_number, "must be a positive number"),
        "unit_length_tolerance": (_positive_number, "must be a positive number"),
        "brute_force_neighbors": (lambda v: isinstance(v, bool), "must be a boolean"),
        "spatial_index": (lambda v: isinstance(v, bool), "must be a boolean"),
    }

    __slots__ = ("__dict__", "generator")

    def __init__(self, **kwargs):
        """Initialize the settings.

        Args:
            kwargs: setting values overriding the defaults
        """
        self.generator: GridGenerator | None = None
        for key, value in {**self.defaults, **kwargs}.items():
            self._check(key, value)
            self.__dict__[key] = value

    def _check(self, key, value):
        if key in self._validators:
            is_valid, reason = self._validators[key]
            if not is_valid(value):
                raise SettingsError(key, f"{reason}, got {value!r}")

    def __setitem__(self, key, value):  # noqa: D105
        if self.generator is not None and self.generator.running:
            raise SettingsError("Cannot mutate settings while a grid is being generated")
        self._check(key, value)
        self.__dict__[key] = value

    def __getitem__(self, key):  # noqa: D105
        return self.__dict__[key]

    def __delitem__(self, key):  # noqa: D105
        if key in self.defaults:
            raise SettingsError(key, "cannot remove a known setting")
        del self.__dict__[key]

    def __iter__(self):  # noqa: D105
        return iter(self.__dict__)

    def __len__(self):  # noqa: D105
        return len(self.__dict__)

    def __setattr__(self, key, value):  # noqa: D105
        if key not in self.__slots__:
            self.__setitem__(key, value)
        else:
            super().__setattr__(key, value)

    def __getattr__(self, key):  # noqa: D105
        # only reached for names missing from __dict__
        raise AttributeError(f"{type(self).__name__} has no setting {key!r}")

    def __delattr__(self, key):  # noqa: D105
        if key not in self.__slots__:
            self.__delitem__(key)
        else:
            super().__delattr__(key)

    def __repr__(self):  # noqa: D105
        return f"GridSettings({self.__dict__!r})"

    def to_dict(self):
        """Return a dict representation of the settings."""
        return self.__dict__.copy()
