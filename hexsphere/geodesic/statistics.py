"""Cell area statistics for a grid."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass

import numpy as np

from hexsphere.geodesic.cell import Cell

__all__ = ["GridStatistics", "calculate_statistics", "cell_area", "cell_areas"]


@dataclass(frozen=True)
class GridStatistics:
    """Aggregate cell areas on the unit sphere.

    Attributes:
        min_area: smallest cell area
        max_area: largest cell area
        mean_area: arithmetic mean of the cell areas
        std_area: population standard deviation of the cell areas
    """

    min_area: float = 0.0
    max_area: float = 0.0
    mean_area: float = 0.0
    std_area: float = 0.0

    @property
    def uniformity(self) -> float:
        """Percentage where 100 means all cells have the same area."""
        if self.mean_area <= 0.0:
            return 0.0
        return (1.0 - min(self.std_area / self.mean_area, 1.0)) * 100.0

    def to_dict(self) -> dict[str, float]:
        """Return the statistics as a plain dict."""
        return {**asdict(self), "uniformity": self.uniformity}


def cell_area(cell: Cell, radius: float = 1.0) -> float:
    """Fan-triangulated area of a cell on a sphere of the given radius."""
    return cell.area(radius)


def cell_areas(cells: Sequence[Cell], radius: float = 1.0) -> np.ndarray:
    """Return the area of every cell as an array indexed by cell id."""
    return np.array([cell_area(cell, radius) for cell in cells], dtype=float)


def calculate_statistics(cells: Sequence[Cell]) -> GridStatistics:
    """Compute min, max, mean and population standard deviation of the cell areas."""
    if len(cells) == 0:
        return GridStatistics()

    areas = cell_areas(cells)
    min_area = float(areas.min())
    max_area = float(areas.max())
    # clamp rounding drift when all areas are (nearly) equal
    mean_area = min(max(float(areas.mean()), min_area), max_area)
    std_area = float(areas.std(ddof=0))
    return GridStatistics(min_area, max_area, mean_area, std_area)
