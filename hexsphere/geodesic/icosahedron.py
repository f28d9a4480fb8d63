"""The regular icosahedron that seeds every geodesic grid."""

from __future__ import annotations

import math

import numpy as np

from hexsphere.geodesic.geometry import centroid_on_sphere
from hexsphere.geodesic.mesh import DEFAULT_MERGE_TOLERANCE, BuildMesh

PHI = (1.0 + math.sqrt(5.0)) / 2.0

# fmt: off
ICOSAHEDRON_VERTICES = (
    (-1.0,  PHI,  0.0), ( 1.0,  PHI,  0.0), (-1.0, -PHI,  0.0), ( 1.0, -PHI,  0.0),
    ( 0.0, -1.0,  PHI), ( 0.0,  1.0,  PHI), ( 0.0, -1.0, -PHI), ( 0.0,  1.0, -PHI),
    ( PHI,  0.0, -1.0), ( PHI,  0.0,  1.0), (-PHI,  0.0, -1.0), (-PHI,  0.0,  1.0),
)

# counter-clockwise seen from outside
ICOSAHEDRON_FACES = (
    (0, 11, 5), (0, 5, 1), (0, 1, 7), (0, 7, 10), (0, 10, 11),
    (1, 5, 9), (5, 11, 4), (11, 10, 2), (10, 7, 6), (7, 1, 8),
    (3, 9, 4), (3, 4, 2), (3, 2, 6), (3, 6, 8), (3, 8, 9),
    (4, 9, 5), (2, 4, 11), (6, 2, 10), (8, 6, 7), (9, 8, 1),
)
# fmt: on

FACE_COUNT = len(ICOSAHEDRON_FACES)


def build_icosahedron(merge_tolerance: float = DEFAULT_MERGE_TOLERANCE) -> BuildMesh:
    """Create a mesh holding the 12 vertices and 20 faces of the unit icosahedron."""
    mesh = BuildMesh(merge_tolerance=merge_tolerance)
    for position in ICOSAHEDRON_VERTICES:
        mesh.get_or_add_vertex(position)
    for v0, v1, v2 in ICOSAHEDRON_FACES:
        mesh.add_triangle(v0, v1, v2)
    return mesh


def icosahedron_face_centroids() -> np.ndarray:
    """Return the (20, 3) array of face centroids projected onto the unit sphere."""
    mesh = build_icosahedron()
    return np.array(
        [
            centroid_on_sphere(np.array([mesh.vertices[v] for v in face]))
            for face in mesh.triangles
        ]
    )
