"""Tests for the cell area statistics."""

import math

import pytest

from hexsphere.geodesic.cell import Cell
from hexsphere.geodesic.generator import generate
from hexsphere.geodesic.statistics import (
    GridStatistics,
    calculate_statistics,
    cell_area,
    cell_areas,
)


@pytest.fixture(scope="module")
def level3_grid():
    """A level 3 grid shared by the tests of this module."""
    grid, _ = generate(3)
    return grid


class TestGridStatistics:
    """Tests for GridStatistics."""

    def test_defaults(self):
        """Empty statistics are all zero."""
        stats = GridStatistics()
        assert stats.min_area == stats.max_area == stats.mean_area == stats.std_area == 0.0
        assert stats.uniformity == 0.0

    def test_uniformity(self):
        """Uniformity is 100 minus the coefficient of variation in percent."""
        assert GridStatistics(1.0, 1.0, 1.0, 0.0).uniformity == pytest.approx(100.0)
        assert GridStatistics(1.0, 3.0, 2.0, 0.5).uniformity == pytest.approx(75.0)
        assert GridStatistics(0.0, 9.0, 1.0, 4.0).uniformity == pytest.approx(0.0)

    def test_to_dict(self):
        """to_dict includes the derived uniformity."""
        data = GridStatistics(1.0, 3.0, 2.0, 0.5).to_dict()
        assert data == {
            "min_area": 1.0,
            "max_area": 3.0,
            "mean_area": 2.0,
            "std_area": 0.5,
            "uniformity": pytest.approx(75.0),
        }

    def test_frozen(self):
        """Statistics cannot be modified."""
        stats = GridStatistics()
        with pytest.raises(AttributeError):
            stats.min_area = 1.0


class TestCalculateStatistics:
    """Tests for calculate_statistics."""

    def test_empty(self):
        """No cells give zero statistics."""
        assert calculate_statistics([]) == GridStatistics()

    def test_known_areas(self):
        """Aggregates use the population standard deviation."""
        square = [(1.0, 0.0, 1.0), (0.0, 1.0, 1.0), (-1.0, 0.0, 1.0), (0.0, -1.0, 1.0)]
        small = Cell(0, position=(0.0, 0.0, 1.0), boundary=square)
        large = Cell(1, position=(0.0, 0.0, 1.0), boundary=[(2 * x, 2 * y, 1.0) for x, y, _ in square])
        stats = calculate_statistics([small, large])
        assert stats.min_area == pytest.approx(2.0)
        assert stats.max_area == pytest.approx(8.0)
        assert stats.mean_area == pytest.approx(5.0)
        assert stats.std_area == pytest.approx(3.0)

    def test_ordering_of_aggregates(self, level3_grid):
        """min <= mean <= max and std >= 0."""
        stats = calculate_statistics(level3_grid.cells)
        assert stats.min_area <= stats.mean_area <= stats.max_area
        assert stats.std_area >= 0.0

    def test_total_area_close_to_sphere(self, level3_grid):
        """The fan areas add up to slightly less than the sphere's surface."""
        total = cell_areas(level3_grid.cells).sum()
        assert 0.98 * 4 * math.pi < total < 4 * math.pi

    def test_level_zero_uniform(self):
        """All twelve pentagons of level 0 have the same area."""
        grid, _ = generate(0)
        assert grid.statistics.std_area == pytest.approx(0.0, abs=1e-9)
        assert grid.statistics.uniformity == pytest.approx(100.0)

    def test_cell_area_matches_method(self, level3_grid):
        """cell_area delegates to Cell.area."""
        cell = level3_grid.cell(100)
        assert cell_area(cell, 2.0) == cell.area(2.0)
