"""Tests for GridSettings."""

import pytest

from hexsphere.errors import SettingsError
from hexsphere.geodesic.settings import GridSettings


class TestGridSettings:
    """Tests for GridSettings."""

    def test_defaults(self):
        """Known settings start at their defaults."""
        settings = GridSettings()
        assert settings["merge_tolerance"] == 1e-4
        assert settings["unit_length_tolerance"] == 1e-3
        assert settings["brute_force_neighbors"] is False
        assert settings["spatial_index"] is False
        assert settings.generator is None

    def test_overrides(self):
        """Keyword arguments override defaults."""
        settings = GridSettings(merge_tolerance=1e-5, spatial_index=True)
        assert settings.merge_tolerance == 1e-5
        assert settings.spatial_index is True

    def test_attribute_and_item_access(self):
        """Settings can be read and written as items or attributes."""
        settings = GridSettings()
        settings.merge_tolerance = 2e-4
        assert settings["merge_tolerance"] == 2e-4
        settings["unit_length_tolerance"] = 5e-3
        assert settings.unit_length_tolerance == 5e-3

    def test_extra_keys(self):
        """Unknown keys are carried along."""
        settings = GridSettings(label="moon")
        assert settings.label == "moon"
        assert "label" in settings
        del settings.label
        assert "label" not in settings

    def test_missing_attribute(self):
        """Reading an unknown setting raises AttributeError."""
        with pytest.raises(AttributeError):
            GridSettings().nonexistent  # noqa: B018

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("merge_tolerance", 0),
            ("merge_tolerance", -1e-4),
            ("merge_tolerance", "small"),
            ("unit_length_tolerance", True),
            ("brute_force_neighbors", 1),
            ("spatial_index", "yes"),
        ],
    )
    def test_invalid_values(self, key, value):
        """Known settings are type and range checked."""
        with pytest.raises(SettingsError):
            GridSettings(**{key: value})
        settings = GridSettings()
        with pytest.raises(SettingsError):
            settings[key] = value

    def test_known_keys_not_removable(self):
        """Known settings cannot be deleted."""
        settings = GridSettings()
        with pytest.raises(SettingsError):
            del settings["merge_tolerance"]

    def test_mapping_protocol(self):
        """Settings behave like a mapping."""
        settings = GridSettings(label="x")
        assert len(settings) == 5
        assert set(settings) == {
            "merge_tolerance",
            "unit_length_tolerance",
            "brute_force_neighbors",
            "spatial_index",
            "label",
        }

    def test_to_dict(self):
        """to_dict returns a copy of the values."""
        settings = GridSettings()
        data = settings.to_dict()
        data["merge_tolerance"] = 1.0
        assert settings.merge_tolerance == 1e-4
        assert "generator" not in data
