"""Conversion of a triangle mesh into its hexagonal/pentagonal dual.

Every vertex of the triangle mesh becomes a cell and every triangle becomes a
corner shared by the three cells around it. The steps run in this order:

- :func:`convert_to_dual` creates the cells and their boundary points
- :func:`resolve_neighbors` links cells that share a polygon edge
- :func:`order_boundaries` sorts each boundary counter-clockwise
- :func:`assign_faces` tags each cell with its nearest icosahedron face
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

import numpy as np

from hexsphere.errors import GridError
from hexsphere.geodesic.cell import Cell, CellType
from hexsphere.geodesic.geometry import read_only, try_normalize
from hexsphere.geodesic.icosahedron import icosahedron_face_centroids
from hexsphere.geodesic.mesh import DEFAULT_MERGE_TOLERANCE, BuildMesh
from hexsphere.geodesic.spatial_hash import PointIndex
from hexsphere.hexsphere_logging import create_module_logger

_logger = create_module_logger()

# two cells sharing this many corners share a polygon edge
SHARED_POINTS_FOR_EDGE = 2


def convert_to_dual(mesh: BuildMesh) -> list[Cell]:
    """Create one cell per mesh vertex.

    The boundary of a cell is the list of centroids of the triangles around
    its vertex, in incidence order. Five incident triangles make a pentagon
    and six a hexagon; any other count is logged and the cell is emitted as a
    hexagon with whatever boundary it has.

    Raises:
        GridError: if :func:`build_adjacency` has not been run on the mesh
    """
    if not mesh.has_adjacency:
        raise GridError("Mesh adjacency must be built before dual conversion.")

    centers = [mesh.triangle_center(t) for t in range(mesh.triangle_count)]

    cells = []
    for vertex_id, position in enumerate(mesh.vertices):
        incident = mesh.vertex_triangles.get(vertex_id, [])
        if len(incident) == 5:
            cell_type = CellType.PENTAGON
        elif len(incident) == 6:
            cell_type = CellType.HEXAGON
        else:
            _logger.warning(
                f"vertex {vertex_id} has {len(incident)} incident triangles, "
                "expected 5 or 6"
            )
            cell_type = CellType.HEXAGON

        boundary = np.array([centers[t] for t in incident]).reshape(-1, 3)
        cells.append(Cell(vertex_id, cell_type, position, boundary))

    counts = Counter(cell.cell_type for cell in cells)
    _logger.debug(
        f"dual conversion: {len(cells)} cells, "
        f"{counts[CellType.HEXAGON]} hexagons, {counts[CellType.PENTAGON]} pentagons"
    )
    return cells


def shared_point_count(
    first: np.ndarray, second: np.ndarray, merge_tolerance: float
) -> int:
    """Count the points of first that coincide with some point of second."""
    if len(first) == 0 or len(second) == 0:
        return 0
    delta = first[:, np.newaxis, :] - second[np.newaxis, :, :]
    coincident = (delta**2).sum(axis=2) <= merge_tolerance * merge_tolerance
    return int(np.count_nonzero(coincident.any(axis=1)))


def _neighbors_brute_force(
    cells: Sequence[Cell], merge_tolerance: float
) -> list[set[int]]:
    neighbors: list[set[int]] = [set() for _ in cells]
    for i, first in enumerate(cells):
        for j in range(i + 1, len(cells)):
            shared = shared_point_count(first.boundary, cells[j].boundary, merge_tolerance)
            if shared >= SHARED_POINTS_FOR_EDGE:
                neighbors[i].add(j)
                neighbors[j].add(i)
    return neighbors


def _neighbors_hashed(cells: Sequence[Cell], merge_tolerance: float) -> list[set[int]]:
    index = PointIndex(merge_tolerance)
    point_cells: list[set[int]] = []
    cell_points: list[set[int]] = []
    for i, cell in enumerate(cells):
        points = set()
        for point in cell.boundary:
            point_id, created = index.find_or_add(point)
            if created:
                point_cells.append(set())
            point_cells[point_id].add(i)
            points.add(point_id)
        cell_points.append(points)

    neighbors: list[set[int]] = []
    for i, points in enumerate(cell_points):
        shared = Counter(j for point_id in points for j in point_cells[point_id] if j != i)
        neighbors.append({j for j, n in shared.items() if n >= SHARED_POINTS_FOR_EDGE})
    return neighbors


def resolve_neighbors(
    cells: Sequence[Cell],
    merge_tolerance: float = DEFAULT_MERGE_TOLERANCE,
    brute_force: bool = False,
) -> Sequence[Cell]:
    """Connect cells that share at least two boundary points.

    Args:
        cells: cells indexed by id
        merge_tolerance: distance under which two boundary points coincide
        brute_force: compare every pair of cells directly instead of going
            through a spatial hash of the boundary points; both give the
            same neighbors

    Returns:
        the cells, with ``neighbor_ids`` set in ascending order

    Notes:
        A neighbor count that differs from the cell type's degree is logged
        as a warning. Whether that makes the grid unusable is decided by
        validation.
    """
    if brute_force:
        neighbors = _neighbors_brute_force(cells, merge_tolerance)
    else:
        neighbors = _neighbors_hashed(cells, merge_tolerance)

    mismatches = 0
    for cell, linked in zip(cells, neighbors):
        cell.neighbor_ids = tuple(sorted(linked))
        if cell.neighbor_count != cell.expected_neighbor_count:
            mismatches += 1
            _logger.warning(
                f"cell {cell.cell_id} has {cell.neighbor_count} neighbors, "
                f"expected {cell.expected_neighbor_count}"
            )

    _logger.debug(
        f"neighbors resolved for {len(cells)} cells "
        f"({'brute force' if brute_force else 'hashed'}), {mismatches} mismatches"
    )
    return cells


def order_boundaries(cells: Sequence[Cell]) -> Sequence[Cell]:
    """Sort each cell's boundary counter-clockwise as seen from outside the sphere.

    A tangent basis is built at the cell center from the direction towards the
    first boundary point; every point is then sorted by its angle in that
    basis. Cells with fewer than three boundary points are left unchanged.
    """
    for cell in cells:
        boundary = cell.boundary
        if len(boundary) < 3:
            continue

        normal = cell.position
        tangent = try_normalize(boundary[0] - normal * np.dot(boundary[0], normal))
        if tangent is None:
            _logger.warning(f"cell {cell.cell_id} has a boundary point at its center")
            continue
        bitangent = np.cross(normal, tangent)

        # tangent and bitangent are orthogonal to the normal, so dotting with
        # them equals dotting with the projection onto the tangent plane
        angles = np.arctan2(boundary @ bitangent, boundary @ tangent)
        order = np.argsort(angles, kind="stable")
        cell.boundary = read_only(boundary[order])
    return cells


def assign_faces(cells: Sequence[Cell]) -> Sequence[Cell]:
    """Tag every cell with the index (0-19) of the closest icosahedron face centroid."""
    if not cells:
        return cells

    centroids = icosahedron_face_centroids()
    positions = np.array([cell.position for cell in cells])
    distances = ((positions[:, np.newaxis, :] - centroids[np.newaxis, :, :]) ** 2).sum(
        axis=2
    )
    for cell, face_index in zip(cells, np.argmin(distances, axis=1)):
        cell.face_index = int(face_index)
    return cells
