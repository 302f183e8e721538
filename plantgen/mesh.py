"""
Triangle mesh buffers for tube geometry.

MeshBuilder is the append-only buffer the interpreter writes into:
vertex rings around the tube axis, side walls that stitch consecutive
rings, and cap fans that close a branch. Once finalized it yields a
TriangleMesh whose arrays are read-only.

Ring layout:
    A ring holds face_count + 1 vertices. The last vertex repeats the
    first position with u = 1 so the texture seam closes.

Winding:
    Triangles are counter-clockwise seen from outside the tube, so a
    right-handed normal computation points away from the axis.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from plantgen.turtle import OrientationState


class Vertex(NamedTuple):
    """A mesh vertex: position and texture coordinate."""

    position: tuple[float, float, float]
    uv: tuple[float, float]


class MeshBuilder:
    """
    Append-only vertex and triangle buffer.

    Args:
        face_count: Number of faces on each ring (at least 3)
    """

    def __init__(self, face_count: int) -> None:
        if face_count < 3:
            raise ValueError("A ring needs at least 3 faces")
        self.face_count = int(face_count)
        self._vertices: list[Vertex] = []
        self._triangles: list[tuple[int, int, int]] = []
        self._finalized = False

        # Unit ring in the local xz plane, shared by every emitted ring
        angles = np.arange(self.face_count + 1) * (2.0 * math.pi / self.face_count)
        self._unit_ring = np.stack(
            [np.cos(angles), np.zeros_like(angles), np.sin(angles)], axis=1
        )
        self._ring_u = np.arange(self.face_count + 1) / self.face_count

    @property
    def ring_size(self) -> int:
        return self.face_count + 1

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    @property
    def index_count(self) -> int:
        return 3 * len(self._triangles)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def _check_open(self) -> None:
        if self._finalized:
            raise RuntimeError("Mesh buffer is already finalized")

    def add_vertex(self, position: np.ndarray, uv: tuple[float, float]) -> int:
        """Append a vertex and return its index."""
        self._check_open()
        x, y, z = (float(c) for c in position)
        self._vertices.append(Vertex((x, y, z), (float(uv[0]), float(uv[1]))))
        return len(self._vertices) - 1

    def add_triangle(self, a: int, b: int, c: int) -> None:
        """
        Append a triangle.

        Raises:
            ValueError: If an index does not refer to an appended vertex
        """
        self._check_open()
        count = len(self._vertices)
        for index in (a, b, c):
            if not 0 <= index < count:
                raise ValueError(
                    f"Triangle index {index} out of range for {count} vertices"
                )
        self._triangles.append((a, b, c))

    def emit_ring(self, state: OrientationState, previous_ring: int | None) -> int:
        """
        Emit a vertex ring at the state's position, orientation and radius.

        If previous_ring is given, two triangles per face connect it to the
        new ring.

        Args:
            state: Turtle state at the ring
            previous_ring: Index of the first vertex of the previous ring

        Returns:
            Index of the first vertex of the new ring
        """
        self._check_open()
        start = len(self._vertices)
        world = state.position + state.orientation.apply(state.radius * self._unit_ring)
        for position, u in zip(world, self._ring_u):
            self.add_vertex(position, (u, state.tex_v))

        if previous_ring is not None:
            p = previous_ring
            for k in range(self.face_count):
                self.add_triangle(p + k + 1, p + k, start + k)
                self.add_triangle(start + k, start + k + 1, p + k + 1)
        return start

    def emit_cap(self, state: OrientationState, ring: int) -> int:
        """
        Close a branch with a triangle fan from its last ring to an apex.

        Args:
            state: Turtle state at the branch end (apex position)
            ring: Index of the first vertex of the ring being closed

        Returns:
            Index of the apex vertex
        """
        apex = self.add_vertex(state.position, (1.0, state.tex_v + 1.0))
        for k in range(self.face_count):
            self.add_triangle(ring + k, apex, ring + k + 1)
        return apex

    def finalize(self) -> "TriangleMesh":
        """Freeze the buffer into a TriangleMesh. Can only be called once."""
        self._check_open()
        self._finalized = True

        positions = np.array([v.position for v in self._vertices], dtype=float)
        uvs = np.array([v.uv for v in self._vertices], dtype=float)
        triangles = np.array(self._triangles, dtype=np.int64)
        positions = positions.reshape(-1, 3)
        uvs = uvs.reshape(-1, 2)
        triangles = triangles.reshape(-1, 3)
        for array in (positions, uvs, triangles):
            array.flags.writeable = False
        return TriangleMesh(
            positions=positions,
            uvs=uvs,
            triangles=triangles,
            face_count=self.face_count,
        )


@dataclass(frozen=True, eq=False)
class TriangleMesh:
    """
    Finalized mesh data ready for handoff to a renderer.

    Attributes:
        positions: (N, 3) vertex positions
        uvs: (N, 2) texture coordinates
        triangles: (M, 3) vertex indices per triangle
        face_count: Faces per ring used to build the mesh
    """

    positions: np.ndarray
    uvs: np.ndarray
    triangles: np.ndarray
    face_count: int

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    @property
    def indices(self) -> np.ndarray:
        """Flat index list, three entries per triangle."""
        return self.triangles.reshape(-1)

    @property
    def vertices(self) -> list[Vertex]:
        return [
            Vertex((p[0], p[1], p[2]), (uv[0], uv[1]))
            for p, uv in zip(self.positions.tolist(), self.uvs.tolist())
        ]

    def is_valid(self) -> bool:
        """Check index count, index range and that positions are finite."""
        indices = self.indices
        if len(indices) % 3 != 0:
            return False
        if len(indices) and (indices.min() < 0 or indices.max() >= self.vertex_count):
            return False
        return bool(np.all(np.isfinite(self.positions)))

    def get_scalar_summary(self) -> dict[str, float]:
        """
        Compute a scalar summary of the mesh.

        Returns a dictionary with:
        - Vertices: Number of vertices
        - Triangles: Number of triangles
        - Indices: Length of the flat index list
        - FaceCount: Faces per ring
        - Height: Highest vertex along y
        - Spread: Largest horizontal distance from the trunk axis
        """
        if self.vertex_count:
            height = float(self.positions[:, 1].max())
            spread = float(np.hypot(self.positions[:, 0], self.positions[:, 2]).max())
        else:
            height = spread = 0.0
        return {
            "Vertices": self.vertex_count,
            "Triangles": self.triangle_count,
            "Indices": len(self.indices),
            "FaceCount": self.face_count,
            "Height": height,
            "Spread": spread,
        }
