"""
Static 3-D plots of grids and paths.
"""

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
import numpy as np
from pathlib import Path
from typing import Optional, Sequence

from .core.grid import Grid


def plot_path(
    grid: Grid,
    path: Sequence[Sequence[int]],
    output_path: str,
    title: str = "Generated Path",
    show_cells: bool = True,
):
    """
    Render ``path`` over the lattice and save it as an image.

    Args:
        grid: Grid the path lives on
        path: Cells in visiting order
        output_path: Where to save the figure (format from the extension)
        title: Plot title
        show_cells: Draw every lattice cell as a faint dot
    """
    fig = plt.figure(figsize=(10, 10))
    ax = fig.add_subplot(111, projection='3d')

    if show_cells:
        cells = grid.positions(grid.cells)
        ax.scatter(cells[:, 0], cells[:, 1], cells[:, 2], c='#BBBBBB', s=12, alpha=0.35, depthshade=False)

    points = grid.positions(path)
    if len(points) > 1:
        # Color the polyline from start (dark) to end (light)
        colors = plt.cm.viridis(np.linspace(0.0, 1.0, len(points) - 1))
        for i in range(len(points) - 1):
            seg = points[i:i + 2]
            ax.plot(seg[:, 0], seg[:, 1], seg[:, 2], color=colors[i], linewidth=2.5)

    if len(points) > 0:
        ax.scatter(*points[0], c='green', s=120, label='Start', depthshade=False)
        ax.scatter(*points[-1], c='red', s=120, label='End', depthshade=False)
        ax.legend(loc='upper right', fontsize=10)

    half = (np.array(grid.dims) - 1) / 2.0 * grid.spacing + grid.spacing / 2.0
    ax.set_xlim(-half[0], half[0])
    ax.set_ylim(-half[1], half[1])
    ax.set_zlim(-half[2], half[2])
    ax.set_xlabel('x')
    ax.set_ylabel('y')
    ax.set_zlabel('z')

    full_title = f"{title}\nGrid: {grid.width}×{grid.height}×{grid.depth} | "
    full_title += f"Cells: {len(path)}/{grid.size}"
    ax.set_title(full_title, fontsize=11, fontweight='bold', pad=20)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=120, bbox_inches='tight')
    plt.close(fig)
    return output_path


def plot_coverage(rows: Sequence[dict], output_path: str, title: Optional[str] = None):
    """Bar chart of mean coverage per grid from ``summarize_sweep`` rows."""
    fig, ax = plt.subplots(1, 1, figsize=(max(6, len(rows) * 0.8), 5))
    labels = [f"{r['dims']}\n{r['mode']}" for r in rows]
    values = [r['mean_coverage'] * 100 for r in rows]
    ax.bar(range(len(rows)), values, color='#4477AA')
    ax.set_xticks(range(len(rows)))
    ax.set_xticklabels(labels, fontsize=8)
    ax.set_ylim(0, 105)
    ax.set_ylabel('Mean coverage (%)')
    ax.grid(True, axis='y', alpha=0.3, linestyle='--')
    ax.set_title(title or "Coverage by grid", fontsize=11, fontweight='bold')

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=120, bbox_inches='tight')
    plt.close(fig)
    return output_path
