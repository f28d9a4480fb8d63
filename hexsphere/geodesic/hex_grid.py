"""The spherical hexagonal grid and its spatial queries.

A HexGrid owns an ordered, immutable sequence of cells where a cell's id is
its index. Queries take a direction (any non-zero 3D vector, normalized on the
way in) and compare it against cell centers on the unit sphere.

Nearest and radius queries scan all cell centers by default. Calling
:meth:`HexGrid.build_spatial_index` switches them to a KD-tree with the
same results.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any, Literal

import networkx as nx
import numpy as np
import pandas as pd
from scipy.spatial import KDTree

from hexsphere.errors import InvalidLevelError
from hexsphere.geodesic.cell import Cell, CellType
from hexsphere.geodesic.geometry import try_normalize
from hexsphere.geodesic.statistics import GridStatistics, calculate_statistics, cell_areas
from hexsphere.geodesic.validation import DEFAULT_UNIT_TOLERANCE, validate_grid

RadiusMode = Literal["chord", "geodesic"]


class HexGrid:
    """A geodesic grid of hexagonal and pentagonal cells on the unit sphere.

    Attributes:
        level (int): subdivision level the grid was built at
        total_cell_count (int): number of cells
        hexagon_count (int): number of hexagon cells
        pentagon_count (int): number of pentagon cells
        pentagon_ids (tuple[int, ...]): ids of the pentagon cells
        statistics (GridStatistics): cell area statistics

    Notes:
        Grids are produced by :func:`hexsphere.geodesic.generate`. Constructing
        one directly is useful to wrap cells restored from plain data; call
        :meth:`validate` afterwards.

    """

    def __init__(
        self,
        cells: Sequence[Cell],
        level: int,
        statistics: GridStatistics | None = None,
    ) -> None:
        """Wrap a list of cells.

        Args:
            cells: the cells, where cell ``i`` should have id ``i``
            level: subdivision level the cells were built at
            statistics: precomputed area statistics, computed when omitted
        """
        self.level = level
        self._cells: tuple[Cell, ...] = tuple(cells)
        self.total_cell_count = len(self._cells)
        self.pentagon_ids: tuple[int, ...] = tuple(
            cell.cell_id for cell in self._cells if cell.is_pentagon
        )
        self.pentagon_count = len(self.pentagon_ids)
        self.hexagon_count = sum(1 for cell in self._cells if cell.is_hexagon)
        self.statistics = (
            statistics if statistics is not None else calculate_statistics(self._cells)
        )

        self._positions = np.array([cell.position for cell in self._cells]).reshape(-1, 3)
        self._positions.flags.writeable = False
        self._kdtree: KDTree | None = None

    @staticmethod
    def expected_cell_count(level: int) -> int:
        """Number of cells of a grid at the given level: ``10 * 4**level + 2``.

        Raises:
            InvalidLevelError: if level is not a non-negative integer
        """
        if (
            isinstance(level, bool)
            or not isinstance(level, int | np.integer)
            or level < 0
        ):
            raise InvalidLevelError(level)
        return 10 * 4 ** int(level) + 2

    @property
    def cells(self) -> tuple[Cell, ...]:
        """All cells, indexed by id."""
        return self._cells

    @property
    def positions(self) -> np.ndarray:
        """Read-only (n, 3) array of cell centers, indexed by id."""
        return self._positions

    @property
    def has_spatial_index(self) -> bool:
        """Whether queries go through the KD-tree."""
        return self._kdtree is not None

    def __len__(self) -> int:  # noqa: D105
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:  # noqa: D105
        return iter(self._cells)

    def __getitem__(self, cell_id: int) -> Cell:  # noqa: D105
        return self._cells[cell_id]

    def __repr__(self):  # noqa: D105
        return (
            f"HexGrid(level={self.level}, cells={self.total_cell_count}, "
            f"hexagons={self.hexagon_count}, pentagons={self.pentagon_count})"
        )

    def _has_cell(self, cell_id) -> bool:
        return (
            isinstance(cell_id, int | np.integer)
            and not isinstance(cell_id, bool)
            and 0 <= cell_id < len(self._cells)
        )

    def cell(self, cell_id: int) -> Cell:
        """Return the cell with the given id, or an invalid sentinel cell if there is none."""
        if self._has_cell(cell_id):
            return self._cells[cell_id]
        return Cell.invalid()

    def neighbors(self, cell_id: int) -> list[int]:
        """Return the neighbor ids of a cell, empty if the id is out of range."""
        if self._has_cell(cell_id):
            return list(self._cells[cell_id].neighbor_ids)
        return []

    def build_spatial_index(self) -> KDTree | None:
        """Build the KD-tree used by the nearest and radius queries."""
        if len(self._cells) and self._kdtree is None:
            self._kdtree = KDTree(self._positions)
        return self._kdtree

    def _squared_distances(self, direction: np.ndarray) -> np.ndarray:
        return ((self._positions - direction) ** 2).sum(axis=1)

    def nearest_cell(self, direction) -> int | None:
        """Return the id of the cell whose center is closest to direction.

        Returns:
            the cell id, or None for an empty grid or a zero direction
        """
        unit = try_normalize(direction)
        if unit is None or not self._cells:
            return None

        if self._kdtree is not None:
            _, index = self._kdtree.query(unit)
            return int(index)
        return int(np.argmin(self._squared_distances(unit)))

    def nearest_cells(self, direction, k: int = 3) -> list[int]:
        """Return the ids of the k cells closest to direction, nearest first.

        All cells are returned when the grid has fewer than k cells; an empty
        list is returned for ``k <= 0``, an empty grid or a zero direction.
        """
        unit = try_normalize(direction)
        if unit is None or not self._cells or k <= 0:
            return []

        count = min(k, len(self._cells))
        if self._kdtree is not None:
            _, indices = self._kdtree.query(unit, k=count)
            return [int(i) for i in np.atleast_1d(indices)]

        order = np.argsort(self._squared_distances(unit), kind="stable")
        return [int(i) for i in order[:count]]

    def cells_within_angular_radius(
        self, direction, radius: float, mode: RadiusMode = "chord"
    ) -> list[int]:
        """Return the ids of all cells within radius of direction, ascending.

        Args:
            direction: query direction
            radius: search radius
            mode: ``"chord"`` compares the straight-line distance between unit
                vectors against radius, which is close to the angle in radians
                for small radii. ``"geodesic"`` compares the true angle
                ``arccos(a . b)`` against radius (in radians).

        Returns:
            matching cell ids; empty for an empty grid, a zero direction or a
            negative radius
        """
        if mode not in ("chord", "geodesic"):
            raise ValueError(f"Unknown radius mode: {mode}")

        unit = try_normalize(direction)
        if unit is None or not self._cells or radius < 0:
            return []

        if mode == "geodesic":
            cosines = np.clip(self._positions @ unit, -1.0, 1.0)
            return [int(i) for i in np.flatnonzero(np.arccos(cosines) <= radius)]

        if self._kdtree is not None:
            return sorted(int(i) for i in self._kdtree.query_ball_point(unit, r=radius))
        within = self._squared_distances(unit) <= radius * radius
        return [int(i) for i in np.flatnonzero(within)]

    def validate(
        self, unit_tolerance: float = DEFAULT_UNIT_TOLERANCE
    ) -> tuple[bool, list[str]]:
        """Re-run every invariant check, e.g. after restoring a grid from disk.

        Returns:
            ``(is_valid, diagnostics)``
        """
        return validate_grid(self, unit_tolerance=unit_tolerance)

    def recalculate_statistics(self) -> GridStatistics:
        """Recompute and store the cell area statistics."""
        self.statistics = calculate_statistics(self._cells)
        return self.statistics

    def summary(self) -> str:
        """Return a multi-line report of the grid's counts and area statistics."""
        stats = self.statistics
        return (
            f"Grid Level: {self.level}\n"
            f"Total Cells: {self.total_cell_count}\n"
            f"   - Hexagons: {self.hexagon_count}\n"
            f"   - Pentagons: {self.pentagon_count}\n"
            f"Cell Area Statistics (unit sphere):\n"
            f"   - Min Area: {stats.min_area:.6f}\n"
            f"   - Max Area: {stats.max_area:.6f}\n"
            f"   - Avg Area: {stats.mean_area:.6f}\n"
            f"   - Std Dev : {stats.std_area:.6f}\n"
            f"Uniformity: {stats.uniformity:.2f}% (100% = perfectly uniform)"
        )

    def to_networkx(self) -> nx.Graph:
        """Return the cell adjacency as a NetworkX graph.

        Nodes are cell ids with ``cell_type``, ``position`` and ``face_index``
        attributes; edges join neighboring cells.
        """
        graph = nx.Graph(level=self.level)
        for cell in self._cells:
            graph.add_node(
                cell.cell_id,
                cell_type=cell.cell_type.name.lower(),
                position=tuple(cell.position.tolist()),
                face_index=cell.face_index,
            )
        for cell in self._cells:
            graph.add_edges_from((cell.cell_id, n) for n in cell.neighbor_ids)
        return graph

    def to_dataframe(self) -> pd.DataFrame:
        """Return one row per cell with its position, type, face, neighbor count and area."""
        return pd.DataFrame(
            {
                "cell_type": [cell.cell_type.name.lower() for cell in self._cells],
                "x": self._positions[:, 0],
                "y": self._positions[:, 1],
                "z": self._positions[:, 2],
                "face_index": [cell.face_index for cell in self._cells],
                "neighbor_count": [cell.neighbor_count for cell in self._cells],
                "area": cell_areas(self._cells),
            },
            index=pd.RangeIndex(len(self._cells), name="cell_id"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a plain-data representation of the grid."""
        return {
            "level": self.level,
            "cells": [cell.to_dict() for cell in self._cells],
            "statistics": self.statistics.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HexGrid:
        """Rebuild a grid from :meth:`to_dict` output.

        Statistics are recomputed from the cells. The result is not validated.
        """
        cells = [
            Cell(
                entry["cell_id"],
                CellType[entry["cell_type"].upper()],
                entry["position"],
                entry["boundary"],
                entry["neighbor_ids"],
                entry.get("face_index", 0),
            )
            for entry in data["cells"]
        ]
        return cls(cells, data["level"])
