"""
Plotting utilities for recorded trajectories.

Example:
    >>> from bibber import plotting
    >>> plotting.temperature(result.trajectory, show=False)
    >>> plotting.save("temperature.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from .integrators import instantaneous_temperature

if TYPE_CHECKING:
    from .io.trajectory import Trajectory

logger = logging.getLogger(__name__)

# Try to import matplotlib, but don't fail if not available
try:
    import matplotlib.pyplot as plt

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    plt = None


def _check_matplotlib():
    """Check if matplotlib is available."""
    if not HAS_MATPLOTLIB:
        raise ImportError(
            "matplotlib is required for plotting. "
            "Install it with: pip install matplotlib"
        )


def frame_temperatures(trajectory: Trajectory) -> np.ndarray:
    """Mean per-particle temperature of every frame (K)."""
    temperatures = []
    for frame in trajectory:
        masses = np.array([p.mass for p in frame.particles])
        temperatures.append(instantaneous_temperature(frame.velocities, masses))
    return np.array(temperatures)


def temperature(
    trajectory: Trajectory,
    target: float | None = None,
    show: bool = True,
    figsize: tuple[float, float] = (10, 4),
):
    """
    Plot measured temperature against simulation time.

    Args:
        trajectory: Recorded trajectory.
        target: Optional thermostat target drawn as a reference line.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.

    Returns:
        The matplotlib Figure.
    """
    _check_matplotlib()

    fig, ax = plt.subplots(figsize=figsize)
    times_ps = trajectory.times * 1e12

    ax.plot(times_ps, frame_temperatures(trajectory), "b-", lw=0.8, label="Measured")
    if target is not None:
        ax.axhline(
            y=target, color="r", linestyle="--", lw=1.5, label=f"Target {target:g} K"
        )

    ax.set_xlabel("Time (ps)")
    ax.set_ylabel("Temperature (K)")
    ax.set_title(f"{trajectory.title}: temperature")
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()
    return fig


def trajectory_2d(
    trajectory: Trajectory,
    particle_indices: list[int] | None = None,
    projection: str = "xy",
    show: bool = True,
    figsize: tuple[float, float] = (8, 8),
):
    """
    Plot a 2D projection of particle paths in nanometers.

    Args:
        trajectory: Recorded trajectory.
        particle_indices: Particles to plot (default: first 5).
        projection: Projection plane ("xy", "xz", or "yz").
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.

    Returns:
        The matplotlib Figure.
    """
    _check_matplotlib()

    proj_map = {"xy": (0, 1), "xz": (0, 2), "yz": (1, 2)}
    if projection not in proj_map:
        raise ValueError(f"Invalid projection {projection!r}. Use 'xy', 'xz', or 'yz'")
    idx1, idx2 = proj_map[projection]
    labels = ["x", "y", "z"]

    if particle_indices is None:
        particle_indices = list(range(min(5, trajectory.n_particles)))

    positions_nm = trajectory.positions * 1e9
    half_box = 0.5 * np.array(list(trajectory.bounding_box)) * 1e9

    fig, ax = plt.subplots(figsize=figsize)
    colors = plt.cm.tab10(np.linspace(0, 1, max(len(particle_indices), 1)))
    for color, index in zip(colors, particle_indices):
        path = positions_nm[:, index]
        # Periodic wraps show up as long jumps; plot points, not lines
        ax.plot(path[:, idx1], path[:, idx2], ".", color=color, ms=2, label=f"#{index}")

    ax.set_xlim(-half_box[idx1], half_box[idx1])
    ax.set_ylim(-half_box[idx2], half_box[idx2])
    ax.set_xlabel(f"{labels[idx1]} (nm)")
    ax.set_ylabel(f"{labels[idx2]} (nm)")
    ax.set_aspect("equal")
    ax.set_title(f"{trajectory.title}: {projection} projection")
    ax.legend(loc="upper right", fontsize="small")

    plt.tight_layout()
    if show:
        plt.show()
    return fig


def save(filename: str | Path, dpi: int = 150) -> None:
    """
    Save the current figure to a file.

    Args:
        filename: Output filename (e.g., "plot.png", "plot.pdf").
        dpi: Resolution in dots per inch.
    """
    _check_matplotlib()
    plt.savefig(filename, dpi=dpi, bbox_inches="tight")
    logger.info("Saved plot to %s", filename)


def show() -> None:
    """Display all pending plots."""
    _check_matplotlib()
    plt.show()
