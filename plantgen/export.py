"""
Mesh export for external consumers.

write_obj writes a Wavefront OBJ file (positions, texture coordinates and
1-based faces); mesh_to_dict produces plain lists suitable for JSON.
Normals are left to the consuming application.
"""

from pathlib import Path
from typing import Any

from plantgen.mesh import TriangleMesh


def write_obj(
    mesh: TriangleMesh, path: str | Path, name: str = "plant", precision: int = 6
) -> Path:
    """
    Write a mesh as Wavefront OBJ.

    Args:
        mesh: Finalized mesh
        path: Output file path (parent directories are created)
        name: Object name written to the ``o`` line
        precision: Decimal places for coordinates

    Returns:
        The written path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(f"# {mesh.vertex_count} vertices, {mesh.triangle_count} triangles\n")
        f.write(f"o {name}\n")
        for x, y, z in mesh.positions.tolist():
            f.write(f"v {x:.{precision}f} {y:.{precision}f} {z:.{precision}f}\n")
        for u, v in mesh.uvs.tolist():
            f.write(f"vt {u:.{precision}f} {v:.{precision}f}\n")
        for a, b, c in (mesh.triangles + 1).tolist():
            f.write(f"f {a}/{a} {b}/{b} {c}/{c}\n")
    return path


def mesh_to_dict(mesh: TriangleMesh) -> dict[str, Any]:
    """Convert a mesh to a dictionary of plain lists."""
    return {
        "positions": mesh.positions.tolist(),
        "uvs": mesh.uvs.tolist(),
        "indices": mesh.indices.tolist(),
        "face_count": mesh.face_count,
    }
