"""In-memory trajectory of universe snapshots."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ..units import Time, Vec3

if TYPE_CHECKING:
    from ..system import Particle, Universe


@dataclass(frozen=True)
class Frame:
    """
    Immutable snapshot of the universe at one instant.

    Attributes:
        time: Simulation time of the snapshot.
        iteration: Step count of the snapshot.
        particles: Copied particles.
    """

    time: Time
    iteration: int
    particles: tuple[Particle, ...]

    @property
    def n_particles(self) -> int:
        return len(self.particles)

    @property
    def positions(self) -> NDArray[np.floating]:
        """Return positions as (N, 3) array."""
        return np.array([p.pos.to_array() for p in self.particles]).reshape(-1, 3)

    @property
    def velocities(self) -> NDArray[np.floating]:
        """Return velocities as (N, 3) array."""
        return np.array([p.vel.to_array() for p in self.particles]).reshape(-1, 3)


class Trajectory:
    """
    Append-only sequence of frames of one universe.

    The title, particle count and bounding box are fixed when the
    trajectory is created.
    """

    def __init__(self, title: str, n_particles: int, bounding_box: Vec3) -> None:
        """
        Initialize empty trajectory.

        Args:
            title: Title written into every exported frame.
            n_particles: Particle count every frame must have.
            bounding_box: Box extents in meters.
        """
        self.title = title
        self.n_particles = n_particles
        self.bounding_box = bounding_box
        self._frames: list[Frame] = []

    @classmethod
    def from_universe(cls, universe: Universe, title: str) -> Trajectory:
        """Create an empty trajectory bound to ``universe``'s size and box."""
        return cls(title, universe.n_particles, universe.boundary.extents)

    def add_frame_from_universe(self, universe: Universe) -> Frame:
        """
        Snapshot the universe and append it.

        Args:
            universe: Universe to copy from.

        Returns:
            The appended frame.
        """
        if universe.n_particles != self.n_particles:
            raise ValueError(
                f"universe has {universe.n_particles} particles, trajectory "
                f"expects {self.n_particles}"
            )
        frame = Frame(
            time=universe.time,
            iteration=universe.iteration,
            particles=universe.particles,
        )
        self._frames.append(frame)
        return frame

    @property
    def frames(self) -> tuple[Frame, ...]:
        return tuple(self._frames)

    @property
    def n_frames(self) -> int:
        """Return number of stored frames."""
        return len(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(self._frames)

    def __getitem__(self, index: int) -> Frame:
        return self._frames[index]

    @property
    def times(self) -> NDArray[np.floating]:
        """Return frame times in seconds."""
        return np.array([frame.time.seconds for frame in self._frames])

    @property
    def positions(self) -> NDArray[np.floating]:
        """Return positions as (n_frames, n_particles, 3) array."""
        return np.array([frame.positions for frame in self._frames]).reshape(
            -1, self.n_particles, 3
        )

    @property
    def velocities(self) -> NDArray[np.floating]:
        """Return velocities as (n_frames, n_particles, 3) array."""
        return np.array([frame.velocities for frame in self._frames]).reshape(
            -1, self.n_particles, 3
        )

    def to_gro(self) -> str:
        """Serialize every frame in GRO format."""
        from .gro import format_trajectory

        return format_trajectory(self)
