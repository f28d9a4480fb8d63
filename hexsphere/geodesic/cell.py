"""Cells of a geodesic grid.

A cell is one polygon of the dual mesh: a hexagon everywhere except at the
twelve original icosahedron vertices, where it is a pentagon. Cells refer to
their neighbors by id only, so a grid's cells form no reference cycles and
can be serialized as plain data.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any

import numpy as np

from hexsphere.geodesic.geometry import read_only, try_normalize

INVALID_CELL_ID = -1


class CellType(IntEnum):
    """Type of cell in the grid."""

    HEXAGON = 0
    PENTAGON = 1

    @property
    def degree(self) -> int:
        """Number of neighbors a cell of this type has."""
        return 5 if self is CellType.PENTAGON else 6


class Cell:
    """A single cell of a spherical hexagonal grid.

    Attributes:
        cell_id (int): id of the cell, equal to its index in the grid
        cell_type (CellType): hexagon or pentagon
        position (np.ndarray): unit vector at the cell center
        boundary (np.ndarray): (n, 3) array of polygon corners, counter-clockwise once ordered
        neighbor_ids (tuple[int, ...]): ids of the adjacent cells, ascending
        face_index (int): index of the nearest face of the base icosahedron

    Notes:
        ``position`` and ``boundary`` are read-only arrays and ``neighbor_ids``
        is a tuple; the generation pipeline replaces them wholesale rather than
        mutating them.

    """

    __slots__ = [
        "boundary",
        "cell_id",
        "cell_type",
        "face_index",
        "neighbor_ids",
        "position",
    ]

    def __init__(
        self,
        cell_id: int,
        cell_type: CellType = CellType.HEXAGON,
        position: np.ndarray | None = None,
        boundary: np.ndarray | None = None,
        neighbor_ids=(),
        face_index: int = 0,
    ) -> None:
        """Initialise the cell.

        Args:
            cell_id: id of the cell
            cell_type: hexagon or pentagon
            position: center of the cell on the unit sphere
            boundary: polygon corners, one per incident triangle
            neighbor_ids: ids of the adjacent cells
            face_index: index of the nearest icosahedron face
        """
        self.cell_id = cell_id
        self.cell_type = CellType(cell_type)
        self.position = read_only(
            np.zeros(3) if position is None else np.array(position, dtype=float)
        )
        self.boundary = read_only(
            np.empty((0, 3))
            if boundary is None
            else np.array(boundary, dtype=float).reshape(-1, 3)
        )
        self.neighbor_ids = tuple(int(n) for n in neighbor_ids)
        self.face_index = face_index

    @classmethod
    def invalid(cls) -> Cell:
        """Return the sentinel handed out for out-of-range lookups."""
        return cls(INVALID_CELL_ID)

    @property
    def is_valid(self) -> bool:
        """Whether this is a real cell rather than the invalid sentinel."""
        return self.cell_id != INVALID_CELL_ID

    @property
    def is_pentagon(self) -> bool:
        """Whether the cell is one of the twelve pentagons."""
        return self.cell_type is CellType.PENTAGON

    @property
    def is_hexagon(self) -> bool:
        """Whether the cell is a hexagon."""
        return self.cell_type is CellType.HEXAGON

    @property
    def expected_neighbor_count(self) -> int:
        """5 for pentagons, 6 for hexagons."""
        return self.cell_type.degree

    @property
    def neighbor_count(self) -> int:
        """Number of neighbors actually connected."""
        return len(self.neighbor_ids)

    def neighbor_by_index(self, index: int) -> int | None:
        """Return the id of the index-th neighbor, or None if out of range."""
        if 0 <= index < len(self.neighbor_ids):
            return self.neighbor_ids[index]
        return None

    def has_neighbor(self, cell_id: int) -> bool:
        """Whether cell_id is adjacent to this cell."""
        return cell_id in self.neighbor_ids

    def area(self, radius: float = 1.0) -> float:
        """Approximate the cell's area on a sphere of the given radius.

        The polygon is split into a fan of triangles around the cell center and
        the planar triangle areas are summed. Boundary points must already be
        in rotational order.
        """
        if len(self.boundary) < 3:
            return 0.0

        center = self.position * radius
        edges = self.boundary * radius - center
        following = np.roll(edges, -1, axis=0)
        return float(np.linalg.norm(np.cross(edges, following), axis=1).sum() / 2.0)

    def boundary_centroid(self) -> np.ndarray:
        """Mean of the boundary points on the unit sphere, or the position if there are none."""
        if len(self.boundary) == 0:
            return self.position
        centroid = try_normalize(self.boundary.mean(axis=0))
        return self.position if centroid is None else centroid

    def to_dict(self) -> dict[str, Any]:
        """Return a plain-data representation of the cell."""
        return {
            "cell_id": self.cell_id,
            "cell_type": self.cell_type.name.lower(),
            "position": self.position.tolist(),
            "boundary": self.boundary.tolist(),
            "neighbor_ids": list(self.neighbor_ids),
            "face_index": self.face_index,
        }

    def __repr__(self):  # noqa: D105
        return (
            f"Cell(cell_id={self.cell_id}, cell_type={self.cell_type.name}, "
            f"neighbors={len(self.neighbor_ids)}, face_index={self.face_index})"
        )
