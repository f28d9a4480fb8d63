"""Spatial hash for merging coincident points.

Points are bucketed on a cubic lattice whose spacing equals the merge
tolerance, so any point within tolerance of a query lies in one of the 27
buckets around the query's own bucket. Lookup is O(1) on average, in
contrast to scanning every stored point.
"""

from __future__ import annotations

import math
from collections import defaultdict
from itertools import product

import numpy as np

_OFFSETS = tuple(product((-1, 0, 1), repeat=3))


class PointIndex:
    """Index of 3D points supporting tolerance-based lookup.

    Attributes:
        tolerance (float): two points coincide when their distance is <= tolerance

    Notes:
        Points are compared by squared distance against ``tolerance ** 2``.
        When several stored points coincide with a query, the one inserted
        first wins.
    """

    def __init__(self, tolerance: float) -> None:
        """Create an empty index.

        Args:
            tolerance: merge distance, must be positive
        """
        if not tolerance > 0:
            raise ValueError(f"Tolerance must be positive, got {tolerance}.")
        self.tolerance = float(tolerance)
        self._tolerance_sq = self.tolerance * self.tolerance
        self._points: list[tuple[float, float, float]] = []
        self._buckets: dict[tuple[int, int, int], list[int]] = defaultdict(list)

    def __len__(self) -> int:  # noqa: D105
        return len(self._points)

    def _key(self, point) -> tuple[int, int, int]:
        inv = 1.0 / self.tolerance
        return (
            math.floor(point[0] * inv),
            math.floor(point[1] * inv),
            math.floor(point[2] * inv),
        )

    def find(self, point: np.ndarray) -> int | None:
        """Return the index of a stored point coinciding with point, if any."""
        x, y, z = float(point[0]), float(point[1]), float(point[2])
        kx, ky, kz = self._key((x, y, z))
        best = None
        for dx, dy, dz in _OFFSETS:
            bucket = self._buckets.get((kx + dx, ky + dy, kz + dz))
            if not bucket:
                continue
            for index in bucket:
                px, py, pz = self._points[index]
                dist_sq = (px - x) ** 2 + (py - y) ** 2 + (pz - z) ** 2
                if dist_sq <= self._tolerance_sq and (best is None or index < best):
                    best = index
        return best

    def add(self, point: np.ndarray) -> int:
        """Store point unconditionally and return its index."""
        stored = (float(point[0]), float(point[1]), float(point[2]))
        index = len(self._points)
        self._points.append(stored)
        self._buckets[self._key(stored)].append(index)
        return index

    def find_or_add(self, point: np.ndarray) -> tuple[int, bool]:
        """Return ``(index, created)`` for point, storing it only if no match exists."""
        index = self.find(point)
        if index is not None:
            return index, False
        return self.add(point), True
