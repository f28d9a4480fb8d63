"""Tests for the dual conversion steps."""

import logging

import numpy as np
import pytest

from hexsphere.errors import GridError
from hexsphere.geodesic.cell import Cell, CellType
from hexsphere.geodesic.dual import (
    assign_faces,
    convert_to_dual,
    order_boundaries,
    resolve_neighbors,
    shared_point_count,
)
from hexsphere.geodesic.icosahedron import build_icosahedron
from hexsphere.geodesic.mesh import BuildMesh, build_adjacency, subdivide


def dual_cells(level):
    """Build the unordered dual cells of a level."""
    return convert_to_dual(build_adjacency(subdivide(build_icosahedron(), level)))


def tetrahedron():
    """A closed mesh whose vertices each touch three triangles."""
    mesh = BuildMesh()
    for position in [(1, 1, 1), (1, -1, -1), (-1, 1, -1), (-1, -1, 1)]:
        mesh.get_or_add_vertex(position)
    for triangle in [(0, 1, 2), (0, 3, 1), (0, 2, 3), (1, 3, 2)]:
        mesh.add_triangle(*triangle)
    return build_adjacency(mesh)


class TestConvertToDual:
    """Tests for convert_to_dual."""

    def test_level_zero(self):
        """The icosahedron's dual has 12 pentagons."""
        cells = dual_cells(0)
        assert len(cells) == 12
        assert all(cell.is_pentagon for cell in cells)
        assert all(len(cell.boundary) == 5 for cell in cells)

    def test_level_two(self):
        """Cell types follow the incidence counts."""
        cells = dual_cells(2)
        assert len(cells) == 162
        assert sum(cell.is_pentagon for cell in cells) == 12
        assert all(len(cell.boundary) == cell.cell_type.degree for cell in cells)

    def test_ids_and_positions(self):
        """Cells take the index and position of their vertex."""
        mesh = build_adjacency(subdivide(build_icosahedron(), 1))
        cells = convert_to_dual(mesh)
        for index, cell in enumerate(cells):
            assert cell.cell_id == index
            assert np.array_equal(cell.position, mesh.vertices[index])

    def test_boundary_points_on_sphere(self):
        """Boundary points are renormalized triangle centroids."""
        for cell in dual_cells(1):
            assert np.allclose(np.linalg.norm(cell.boundary, axis=1), 1.0)

    def test_requires_adjacency(self):
        """Conversion refuses a mesh without adjacency data."""
        with pytest.raises(GridError):
            convert_to_dual(subdivide(build_icosahedron(), 1))

    def test_anomalous_incidence_logged(self, caplog):
        """Vertices touching neither 5 nor 6 triangles are logged and kept."""
        with caplog.at_level(logging.WARNING):
            cells = convert_to_dual(tetrahedron())
        assert len(cells) == 4
        assert all(cell.cell_type is CellType.HEXAGON for cell in cells)
        assert all(len(cell.boundary) == 3 for cell in cells)
        assert "3 incident triangles" in caplog.text


class TestSharedPointCount:
    """Tests for shared_point_count."""

    def test_counts_coincident_points(self):
        """Only points within tolerance are counted."""
        first = np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
        second = np.array([[1.0, 0.0, 0.0], [0.0, 1.0 + 1e-6, 0.0], [0.5, 0.5, 0.0]])
        assert shared_point_count(first, second, 1e-4) == 2

    def test_empty(self):
        """Empty boundaries share nothing."""
        assert shared_point_count(np.empty((0, 3)), np.ones((2, 3)), 1e-4) == 0


class TestResolveNeighbors:
    """Tests for resolve_neighbors."""

    @pytest.mark.parametrize("level", [0, 1, 2])
    def test_degree_matches_type(self, level):
        """Every cell gets 5 or 6 neighbors according to its type."""
        cells = resolve_neighbors(dual_cells(level))
        for cell in cells:
            assert cell.neighbor_count == cell.expected_neighbor_count

    def test_symmetric(self):
        """Adjacency is mutual."""
        cells = resolve_neighbors(dual_cells(2))
        for cell in cells:
            for neighbor_id in cell.neighbor_ids:
                assert cell.cell_id in cells[neighbor_id].neighbor_ids

    def test_sorted_and_unique(self):
        """Neighbor ids are ascending, without duplicates or self references."""
        for cell in resolve_neighbors(dual_cells(1)):
            assert list(cell.neighbor_ids) == sorted(set(cell.neighbor_ids))
            assert cell.cell_id not in cell.neighbor_ids

    def test_neighbors_match_mesh_edges(self):
        """Two cells are neighbors exactly when their vertices share an edge."""
        mesh = build_adjacency(subdivide(build_icosahedron(), 1))
        cells = resolve_neighbors(convert_to_dual(mesh))
        edges = set()
        for v0, v1, v2 in mesh.triangles:
            for a, b in ((v0, v1), (v1, v2), (v2, v0)):
                edges.add((min(a, b), max(a, b)))
        linked = {
            (cell.cell_id, n) for cell in cells for n in cell.neighbor_ids if n > cell.cell_id
        }
        assert linked == edges

    @pytest.mark.parametrize("level", [0, 1])
    def test_brute_force_agrees(self, level):
        """The all-pairs comparison finds the same neighbors as the hashed one."""
        hashed = resolve_neighbors(dual_cells(level))
        brute = resolve_neighbors(dual_cells(level), brute_force=True)
        assert [c.neighbor_ids for c in hashed] == [c.neighbor_ids for c in brute]

    def test_mismatch_logged(self, caplog):
        """A wrong neighbor count is a warning, not an error."""
        cells = convert_to_dual(tetrahedron())
        with caplog.at_level(logging.WARNING):
            resolve_neighbors(cells)
        assert all(cell.neighbor_count == 3 for cell in cells)
        assert "expected 6" in caplog.text


class TestOrderBoundaries:
    """Tests for order_boundaries."""

    @pytest.mark.parametrize("level", [0, 2])
    def test_counter_clockwise(self, level):
        """Consecutive corners turn counter-clockwise around the outward normal."""
        for cell in order_boundaries(dual_cells(level)):
            points = cell.boundary - cell.position
            following = np.roll(points, -1, axis=0)
            turns = np.cross(points, following) @ cell.position
            assert np.all(turns > 0)

    def test_same_points(self):
        """Ordering only permutes the boundary points."""
        cells = dual_cells(1)
        before = [np.array(cell.boundary) for cell in cells]
        order_boundaries(cells)
        for original, cell in zip(before, cells):
            assert cell.boundary.shape == original.shape
            assert np.allclose(
                np.sort(original, axis=0), np.sort(np.array(cell.boundary), axis=0)
            )

    def test_degenerate_left_unchanged(self):
        """Cells with fewer than three boundary points are skipped."""
        boundary = [(0.0, 1.0, 0.0), (1.0, 0.0, 0.0)]
        cell = Cell(0, position=(0.0, 0.0, 1.0), boundary=boundary)
        order_boundaries([cell])
        assert np.array_equal(cell.boundary, boundary)


class TestAssignFaces:
    """Tests for assign_faces."""

    def test_face_range(self):
        """Face indices are between 0 and 19."""
        cells = assign_faces(dual_cells(1))
        assert all(0 <= cell.face_index < 20 for cell in cells)

    def test_every_face_used(self):
        """At level 2 each face has cells of its own."""
        cells = assign_faces(dual_cells(2))
        assert {cell.face_index for cell in cells} == set(range(20))

    def test_empty(self):
        """Tagging no cells is a no-op."""
        assert assign_faces([]) == []
