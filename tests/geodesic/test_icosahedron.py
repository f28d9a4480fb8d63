"""Tests for the icosahedron seed mesh."""

import numpy as np

from hexsphere.geodesic.icosahedron import (
    FACE_COUNT,
    build_icosahedron,
    icosahedron_face_centroids,
)
from hexsphere.geodesic.mesh import build_adjacency


class TestIcosahedron:
    """Tests for build_icosahedron."""

    def test_counts(self):
        """The icosahedron has 12 vertices and 20 faces."""
        mesh = build_icosahedron()
        assert mesh.vertex_count == 12
        assert mesh.triangle_count == 20
        assert FACE_COUNT == 20

    def test_vertices_on_unit_sphere(self):
        """Every vertex is normalized."""
        mesh = build_icosahedron()
        lengths = np.linalg.norm(np.array(mesh.vertices), axis=1)
        assert np.allclose(lengths, 1.0)

    def test_every_vertex_touches_five_faces(self):
        """Each vertex is shared by exactly five faces."""
        mesh = build_adjacency(build_icosahedron())
        assert all(len(t) == 5 for t in mesh.vertex_triangles.values())

    def test_faces_wound_outwards(self):
        """Face normals point away from the sphere center."""
        mesh = build_icosahedron()
        for v0, v1, v2 in mesh.triangles:
            p0, p1, p2 = mesh.vertices[v0], mesh.vertices[v1], mesh.vertices[v2]
            normal = np.cross(p1 - p0, p2 - p0)
            assert np.dot(normal, p0 + p1 + p2) > 0

    def test_deterministic(self):
        """Two builds produce identical meshes."""
        first, second = build_icosahedron(), build_icosahedron()
        assert first.triangles == second.triangles
        assert np.array_equal(np.array(first.vertices), np.array(second.vertices))


class TestFaceCentroids:
    """Tests for icosahedron_face_centroids."""

    def test_shape_and_length(self):
        """There is one unit-length centroid per face."""
        centroids = icosahedron_face_centroids()
        assert centroids.shape == (20, 3)
        assert np.allclose(np.linalg.norm(centroids, axis=1), 1.0)

    def test_centroids_distinct(self):
        """No two face centroids coincide."""
        centroids = icosahedron_face_centroids()
        assert len(np.unique(np.round(centroids, 6), axis=0)) == 20
