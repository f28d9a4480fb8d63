"""Transient triangle mesh used while building a geodesic grid.

The mesh lives for one generation run: the icosahedron seeds it, subdivision
refines it in place, adjacency indexing annotates it, and dual conversion
consumes it.
"""

from __future__ import annotations

import numpy as np

from hexsphere.errors import InvalidLevelError
from hexsphere.geodesic.geometry import centroid_on_sphere, midpoint_on_sphere, normalize
from hexsphere.geodesic.spatial_hash import PointIndex
from hexsphere.hexsphere_logging import create_module_logger

_logger = create_module_logger()

DEFAULT_MERGE_TOLERANCE = 1e-4
MAX_SUBDIVISIONS = 10

Triangle = tuple[int, int, int]


class BuildMesh:
    """Triangle mesh on the unit sphere with vertex deduplication.

    Attributes:
        vertices (list[np.ndarray]): unit vectors, identified by their index
        triangles (list[Triangle]): vertex index triples
        vertex_triangles (dict[int, list[int]]): vertex -> incident triangle indices
        triangle_neighbors (list[list[int]]): triangle -> edge-sharing triangle indices
        merge_tolerance (float): distance under which two vertices are the same vertex

    Notes:
        The adjacency maps are only valid after :func:`build_adjacency` and are
        cleared whenever the triangle list is replaced.
    """

    def __init__(self, merge_tolerance: float = DEFAULT_MERGE_TOLERANCE) -> None:
        """Create an empty mesh.

        Args:
            merge_tolerance: distance under which vertices are merged on insert
        """
        self.merge_tolerance = merge_tolerance
        self.vertices: list[np.ndarray] = []
        self.triangles: list[Triangle] = []
        self.vertex_triangles: dict[int, list[int]] = {}
        self.triangle_neighbors: list[list[int]] = []
        self._index = PointIndex(merge_tolerance)

    @property
    def vertex_count(self) -> int:
        """Number of vertices."""
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        """Number of triangles."""
        return len(self.triangles)

    @property
    def has_adjacency(self) -> bool:
        """Whether the adjacency maps describe the current triangles."""
        return len(self.triangle_neighbors) == len(self.triangles) and bool(
            self.vertex_triangles or not self.vertices
        )

    def clear(self) -> None:
        """Remove all vertices, triangles and adjacency data."""
        self.vertices.clear()
        self.triangles.clear()
        self.clear_adjacency()
        self._index = PointIndex(self.merge_tolerance)

    def clear_adjacency(self) -> None:
        """Drop the adjacency maps."""
        self.vertex_triangles = {}
        self.triangle_neighbors = []

    def get_or_add_vertex(self, position) -> int:
        """Return the index of the vertex at position, adding it if needed.

        The position is normalized onto the unit sphere first. An existing
        vertex whose squared distance is within ``merge_tolerance ** 2`` is
        reused instead of creating a duplicate.
        """
        unit = normalize(position)
        index, created = self._index.find_or_add(unit)
        if created:
            self.vertices.append(unit)
        return index

    def add_triangle(self, v0: int, v1: int, v2: int) -> int:
        """Append a triangle and return its index."""
        self.triangles.append((v0, v1, v2))
        return len(self.triangles) - 1

    def triangle(self, triangle_index: int) -> Triangle:
        """Return the vertex indices of a triangle."""
        return self.triangles[triangle_index]

    def triangle_center(self, triangle_index: int) -> np.ndarray:
        """Centroid of a triangle, renormalized onto the unit sphere."""
        v0, v1, v2 = self.triangles[triangle_index]
        return centroid_on_sphere(
            np.array([self.vertices[v0], self.vertices[v1], self.vertices[v2]])
        )

    def edge_triangles(self, vertex_a: int, vertex_b: int) -> list[int]:
        """Return the sorted indices of the triangles containing edge (a, b)."""
        around_a = self.vertex_triangles.get(vertex_a, ())
        around_b = set(self.vertex_triangles.get(vertex_b, ()))
        return sorted(t for t in around_a if t in around_b)


def subdivide_triangle(mesh: BuildMesh, v0: int, v1: int, v2: int) -> list[Triangle]:
    """Split one triangle into four, adding (or reusing) the edge midpoints.

    ::

             v0
             /\\
            /  \\
         m01----m02
          /\\    /\\
         /  \\  /  \\
       v1----m12----v2

    Returns:
        the three corner triangles followed by the center triangle, all with
        the winding of the parent
    """
    p0, p1, p2 = mesh.vertices[v0], mesh.vertices[v1], mesh.vertices[v2]
    m01 = mesh.get_or_add_vertex(midpoint_on_sphere(p0, p1))
    m12 = mesh.get_or_add_vertex(midpoint_on_sphere(p1, p2))
    m02 = mesh.get_or_add_vertex(midpoint_on_sphere(p0, p2))
    return [
        (v0, m01, m02),
        (m01, v1, m12),
        (m02, m12, v2),
        (m01, m12, m02),
    ]


def subdivide(mesh: BuildMesh, subdivisions: int) -> BuildMesh:
    """Replace every triangle by four smaller ones, ``subdivisions`` times.

    Args:
        mesh: mesh to refine in place
        subdivisions: number of passes, between 0 and MAX_SUBDIVISIONS

    Returns:
        the same mesh, for chaining

    Raises:
        InvalidLevelError: if subdivisions is out of range
    """
    if (
        isinstance(subdivisions, bool)
        or not isinstance(subdivisions, int | np.integer)
        or not 0 <= subdivisions <= MAX_SUBDIVISIONS
    ):
        raise InvalidLevelError(subdivisions, 0, MAX_SUBDIVISIONS)

    for step in range(int(subdivisions)):
        refined: list[Triangle] = []
        for v0, v1, v2 in mesh.triangles:
            refined.extend(subdivide_triangle(mesh, v0, v1, v2))
        mesh.triangles = refined
        _logger.debug(
            f"subdivision pass {step + 1}/{subdivisions}: "
            f"{mesh.vertex_count} vertices, {mesh.triangle_count} triangles"
        )

    if subdivisions:
        mesh.clear_adjacency()
    return mesh


def build_adjacency(mesh: BuildMesh) -> BuildMesh:
    """Index vertex -> triangles and triangle -> neighboring triangles.

    Two triangles are neighbors when they share an edge, i.e. two vertices.
    The neighbor sets are found by intersecting the vertex -> triangle sets
    of the two endpoints of each edge.
    """
    vertex_triangles: dict[int, list[int]] = {
        vertex: [] for vertex in range(mesh.vertex_count)
    }
    for triangle_index, triangle in enumerate(mesh.triangles):
        for vertex in triangle:
            vertex_triangles[vertex].append(triangle_index)
    mesh.vertex_triangles = vertex_triangles

    triangle_neighbors: list[list[int]] = []
    for triangle_index, (v0, v1, v2) in enumerate(mesh.triangles):
        neighbors: set[int] = set()
        for a, b in ((v0, v1), (v1, v2), (v2, v0)):
            neighbors.update(mesh.edge_triangles(a, b))
        neighbors.discard(triangle_index)
        triangle_neighbors.append(sorted(neighbors))
    mesh.triangle_neighbors = triangle_neighbors

    _logger.debug(
        f"adjacency built for {mesh.vertex_count} vertices "
        f"and {mesh.triangle_count} triangles"
    )
    return mesh
