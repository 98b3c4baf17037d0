"""GROMACS GRO trajectory export."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import TrajectoryWriter

if TYPE_CHECKING:
    from ..units import Vec3
    from .trajectory import Frame, Trajectory

NM_PER_M = 1e9
KM_PER_M = 1e-3

RESIDUE_NAME = "DUMMY"
ATOM_NAME = "DUM"

# GRO numbers live in 5-character fields
_INDEX_MODULUS = 100_000


def format_atom_line(index: int, position, velocity) -> str:
    """
    Format one particle record.

    Args:
        index: 0-based particle index.
        position: Position in meters (Vec3 or length-3 sequence).
        velocity: Velocity in meters/second.

    Returns:
        Fixed-width line with position in nm and velocity in km/s.
    """
    number = (index + 1) % _INDEX_MODULUS
    x, y, z = (c * NM_PER_M for c in position)
    vx, vy, vz = (c * KM_PER_M for c in velocity)
    return (
        f"{number:>5d}{RESIDUE_NAME:<5s}{ATOM_NAME:>5s}{number:>5d}"
        f"{x:8.3f}{y:8.3f}{z:8.3f}{vx:8.4f}{vy:8.4f}{vz:8.4f}\n"
    )


def format_box_line(box: Vec3) -> str:
    """Format the trailing box record (nm)."""
    return "".join(f"{length * NM_PER_M:10.5f}" for length in box) + "\n"


def format_frame(frame: Frame, title: str, box: Vec3) -> str:
    """Serialize one frame."""
    lines = [
        f"{title}, t= {frame.time.picoseconds:.5f}\n",
        f"{frame.n_particles}\n",
    ]
    lines.extend(
        format_atom_line(index, particle.pos, particle.vel)
        for index, particle in enumerate(frame.particles)
    )
    lines.append(format_box_line(box))
    return "".join(lines)


def format_trajectory(trajectory: Trajectory) -> str:
    """Serialize every frame of a trajectory."""
    return "".join(
        format_frame(frame, trajectory.title, trajectory.bounding_box)
        for frame in trajectory
    )


class GroWriter(TrajectoryWriter):
    """
    GRO format trajectory writer.

    Each frame is:
        title, t= time_ps
        N
        resnum resname atomname atomnum x y z vx vy vz   (N lines)
        box_x box_y box_z

    Positions are in nm (%8.3f), velocities in km/s (%8.4f), which is
    what conventional trajectory viewers expect.
    """

    def write(self, frame: Frame, trajectory: Trajectory) -> None:
        """Write a single frame in GRO format."""
        if self._file is None:
            raise RuntimeError("File not open. Use context manager or call open().")

        self._file.write(format_frame(frame, trajectory.title, trajectory.bounding_box))
        self._n_frames += 1
