"""
Matplotlib previews of generated plant meshes.

These helpers stand in for a real renderer when inspecting results: they
draw the triangle list as a 3D polygon collection on equally scaled axes.
"""

import matplotlib.pyplot as plt
import numpy as np
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from plantgen.config import BuildParams
from plantgen.mesh import TriangleMesh
from plantgen.pipeline import generate


def _set_equal_limits(ax, positions: np.ndarray) -> None:
    # Plant grows along y; show y as the vertical plot axis
    lo = positions.min(axis=0)
    hi = positions.max(axis=0)
    center = 0.5 * (lo + hi)
    half = max(0.5 * float(np.max(hi - lo)), 1e-6)
    ax.set_xlim(center[0] - half, center[0] + half)
    ax.set_ylim(center[2] - half, center[2] + half)
    ax.set_zlim(center[1] - half, center[1] + half)


def plot_mesh(
    mesh: TriangleMesh,
    ax=None,
    figsize: tuple = (8, 8),
    facecolor: str = "#8B5A2B",
    edgecolor: str = "#3E2A14",
    linewidth: float = 0.1,
    title: str = "",
    elev: float = 15.0,
    azim: float = -60.0,
):
    """
    Draw a mesh as a 3D polygon collection.

    Args:
        mesh: Finalized mesh
        ax: Matplotlib 3D axes (creates new if None)
        figsize: Figure size if creating new
        facecolor: Triangle fill color
        edgecolor: Triangle edge color
        linewidth: Edge line width
        title: Plot title
        elev: Camera elevation in degrees
        azim: Camera azimuth in degrees

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig = plt.figure(figsize=figsize)
        ax = fig.add_subplot(projection="3d")

    # Swap y and z so the growth axis points up on screen
    positions = mesh.positions[:, [0, 2, 1]]
    if mesh.triangle_count:
        polygons = positions[mesh.triangles]
        collection = Poly3DCollection(
            polygons,
            facecolors=facecolor,
            edgecolors=edgecolor,
            linewidths=linewidth,
        )
        ax.add_collection3d(collection)

    if mesh.vertex_count:
        _set_equal_limits(ax, mesh.positions)

    ax.view_init(elev=elev, azim=azim)
    ax.set_xlabel("x")
    ax.set_ylabel("z")
    ax.set_zlabel("y")
    if title:
        ax.set_title(title, fontsize=14, fontweight="bold")

    return ax


def save_mesh_preview(
    mesh: TriangleMesh,
    filepath: str,
    dpi: int = 150,
    figsize: tuple = (8, 8),
    **kwargs,
) -> None:
    """Render a mesh preview and save it to file."""
    fig = plt.figure(figsize=figsize)
    ax = fig.add_subplot(projection="3d")
    plot_mesh(mesh, ax=ax, **kwargs)
    fig.savefig(filepath, dpi=dpi, bbox_inches="tight", pad_inches=0.1)
    plt.close(fig)
    print(f"Saved to {filepath}")


def plot_generation_growth(
    params: BuildParams,
    iterations: list[int],
    figsize: tuple = (18, 8),
    **kwargs,
):
    """
    Build and draw the same plant at several iteration counts side by side.

    Args:
        params: Base build parameters (the seed is reused for every panel)
        iterations: Iteration counts, one panel each
        figsize: Overall figure size
        **kwargs: Passed to plot_mesh

    Returns:
        Figure and axes
    """
    n = len(iterations)
    fig = plt.figure(figsize=figsize)
    axes = []
    for i, count in enumerate(iterations):
        ax = fig.add_subplot(1, n, i + 1, projection="3d")
        result = generate(params.model_copy(update={"iterations": count}))
        plot_mesh(result.mesh, ax=ax, title=f"n = {count}", **kwargs)
        axes.append(ax)

    plt.tight_layout()
    return fig, axes
