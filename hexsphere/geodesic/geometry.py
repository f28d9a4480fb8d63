"""Small vector helpers for points on the unit sphere."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from hexsphere.errors import InvalidDirectionError

Vector = np.ndarray | Sequence[float]


def as_vector(value: Vector) -> np.ndarray:
    """Convert a 3-sequence into a float64 array of shape (3,)."""
    array = np.asarray(value, dtype=float)
    if array.shape != (3,):
        raise ValueError(f"Expected a 3D vector, got shape {array.shape}.")
    return array


def try_normalize(value: Vector) -> np.ndarray | None:
    """Return the unit vector pointing along value, or None if it has no direction."""
    array = as_vector(value)
    length = np.linalg.norm(array)
    if not np.isfinite(length) or length == 0.0:
        return None
    return array / length


def normalize(value: Vector) -> np.ndarray:
    """Return the unit vector pointing along value.

    Raises:
        InvalidDirectionError: if value is zero-length or not finite
    """
    unit = try_normalize(value)
    if unit is None:
        raise InvalidDirectionError(tuple(np.asarray(value, dtype=float).tolist()))
    return unit


def midpoint_on_sphere(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Midpoint of the chord between a and b, projected back onto the sphere."""
    return normalize((a + b) * 0.5)


def centroid_on_sphere(points: np.ndarray) -> np.ndarray:
    """Mean of points, projected back onto the sphere."""
    return normalize(np.mean(points, axis=0))


def read_only(array: np.ndarray) -> np.ndarray:
    """Mark an array as read-only and return it."""
    array.flags.writeable = False
    return array
