"""
Tests for mesh buffers, ring emission and cap emission.
"""

import numpy as np
import pytest

from plantgen.mesh import MeshBuilder
from plantgen.turtle import OrientationState


def state_at(y: float, radius: float = 1.0, tex_v: float = 0.0) -> OrientationState:
    return OrientationState(
        position=np.array([0.0, y, 0.0]),
        radius=radius,
        tex_v=tex_v,
    )


class TestRingEmission:
    """Tests for vertex rings and side walls."""

    def test_first_ring_has_no_side_wall(self) -> None:
        """Without a previous ring, only vertices are added."""
        mesh = MeshBuilder(face_count=4)
        start = mesh.emit_ring(state_at(0.0), None)
        assert start == 0
        assert mesh.vertex_count == 5
        assert mesh.index_count == 0

    def test_second_ring_adds_side_wall(self) -> None:
        """A ring connected to a previous one adds 6 indices per face."""
        mesh = MeshBuilder(face_count=4)
        first = mesh.emit_ring(state_at(0.0), None)
        second = mesh.emit_ring(state_at(1.0), first)
        assert second == 5
        assert mesh.vertex_count == 10
        assert mesh.index_count == 4 * 6

    def test_ring_closes_uv_seam(self) -> None:
        """The last ring vertex repeats the first position with u = 1."""
        mesh = MeshBuilder(face_count=6)
        mesh.emit_ring(state_at(0.0, radius=2.0, tex_v=0.25), None)
        result = mesh.finalize()

        np.testing.assert_allclose(result.positions[0], result.positions[-1], atol=1e-12)
        np.testing.assert_allclose(result.uvs[:, 0], np.linspace(0.0, 1.0, 7))
        np.testing.assert_allclose(result.uvs[:, 1], 0.25)

    def test_ring_radius_and_center(self) -> None:
        """Ring vertices lie at the radius around the state position."""
        mesh = MeshBuilder(face_count=8)
        mesh.emit_ring(state_at(3.0, radius=0.5), None)
        positions = mesh.finalize().positions

        np.testing.assert_allclose(positions[:, 1], 3.0)
        np.testing.assert_allclose(np.hypot(positions[:, 0], positions[:, 2]), 0.5)

    def test_side_wall_faces_outward(self) -> None:
        """Side wall triangle normals point away from the tube axis."""
        mesh = MeshBuilder(face_count=8)
        first = mesh.emit_ring(state_at(0.0), None)
        mesh.emit_ring(state_at(1.0), first)
        result = mesh.finalize()

        for tri in result.triangles:
            a, b, c = result.positions[tri]
            normal = np.cross(b - a, c - a)
            centroid = (a + b + c) / 3.0
            radial = np.array([centroid[0], 0.0, centroid[2]])
            assert np.dot(normal, radial) > 0


class TestCapEmission:
    """Tests for closing caps."""

    def test_cap_adds_apex_and_fan(self) -> None:
        """A cap adds one apex vertex and 3 indices per face."""
        mesh = MeshBuilder(face_count=4)
        ring = mesh.emit_ring(state_at(0.0), None)
        apex = mesh.emit_cap(state_at(0.0), ring)
        assert apex == 5
        assert mesh.vertex_count == 6
        assert mesh.index_count == 4 * 3

    def test_cap_faces_along_growth(self) -> None:
        """Cap normals point along the growth direction."""
        mesh = MeshBuilder(face_count=5)
        ring = mesh.emit_ring(state_at(2.0), None)
        mesh.emit_cap(state_at(2.0), ring)
        result = mesh.finalize()

        for tri in result.triangles:
            a, b, c = result.positions[tri]
            assert np.cross(b - a, c - a)[1] > 0

    def test_apex_texture_coordinate(self) -> None:
        """The apex sits at u = 1 and one unit past the cursor in v."""
        mesh = MeshBuilder(face_count=3)
        ring = mesh.emit_ring(state_at(0.0, tex_v=0.5), None)
        mesh.emit_cap(state_at(0.0, tex_v=0.5), ring)
        np.testing.assert_allclose(mesh.finalize().uvs[-1], [1.0, 1.5])


class TestBufferInvariants:
    """Tests for append-only buffer rules."""

    def test_face_count_minimum(self) -> None:
        """Rings need at least three faces."""
        with pytest.raises(ValueError):
            MeshBuilder(face_count=2)

    def test_triangle_must_reference_existing_vertices(self) -> None:
        """Indices beyond the appended vertices are rejected."""
        mesh = MeshBuilder(face_count=3)
        mesh.add_vertex(np.zeros(3), (0.0, 0.0))
        mesh.add_vertex(np.ones(3), (0.0, 0.0))
        with pytest.raises(ValueError):
            mesh.add_triangle(0, 1, 2)

    def test_finalize_once(self) -> None:
        """A finalized buffer accepts no more data."""
        mesh = MeshBuilder(face_count=3)
        mesh.emit_ring(state_at(0.0), None)
        mesh.finalize()
        with pytest.raises(RuntimeError):
            mesh.emit_ring(state_at(1.0), 0)
        with pytest.raises(RuntimeError):
            mesh.finalize()

    def test_finalized_arrays_read_only(self) -> None:
        """Mesh arrays cannot be modified after finalization."""
        mesh = MeshBuilder(face_count=3)
        ring = mesh.emit_ring(state_at(0.0), None)
        mesh.emit_cap(state_at(0.0), ring)
        result = mesh.finalize()
        with pytest.raises(ValueError):
            result.positions[0, 0] = 1.0
        with pytest.raises(ValueError):
            result.triangles[0, 0] = 0

    def test_empty_mesh_shapes(self) -> None:
        """An empty buffer finalizes to correctly shaped empty arrays."""
        result = MeshBuilder(face_count=3).finalize()
        assert result.positions.shape == (0, 3)
        assert result.uvs.shape == (0, 2)
        assert result.triangles.shape == (0, 3)
        assert result.is_valid()

    def test_vertices_view(self) -> None:
        """The vertex list mirrors positions and uvs."""
        mesh = MeshBuilder(face_count=3)
        mesh.emit_ring(state_at(1.0, tex_v=0.2), None)
        result = mesh.finalize()
        vertices = result.vertices
        assert len(vertices) == result.vertex_count
        assert vertices[0].uv == (0.0, 0.2)
        assert vertices[0].position[1] == pytest.approx(1.0)
