"""Base class for trajectory writers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from .trajectory import Frame, Trajectory


class TrajectoryWriter(ABC):
    """
    Abstract base class for trajectory writers.

    Writers serialize frames to a text file or an already open stream.

    Example:
        with GroWriter("trajectory.gro") as writer:
            writer.write_trajectory(trajectory)
    """

    def __init__(self, target: str | Path | TextIO) -> None:
        """
        Initialize trajectory writer.

        Args:
            target: Output file path, or an open text stream (not closed
                by the writer).
        """
        if isinstance(target, (str, Path)):
            self.filename: Path | None = Path(target)
            self._file: TextIO | None = None
        else:
            self.filename = None
            self._file = target
        self._n_frames = 0

    @abstractmethod
    def write(self, frame: Frame, trajectory: Trajectory) -> None:
        """
        Write a single frame.

        Args:
            frame: Frame to write.
            trajectory: Trajectory supplying title and box.
        """
        ...

    def write_trajectory(self, trajectory: Trajectory) -> None:
        """Write every frame of ``trajectory``."""
        for frame in trajectory:
            self.write(frame, trajectory)

    def open(self) -> None:
        """Open file for writing."""
        if self.filename is not None:
            self._file = self.filename.open("w", encoding="utf-8")

    def close(self) -> None:
        """Close file (streams passed in are only flushed)."""
        if self._file is None:
            return
        if self.filename is not None:
            self._file.close()
            self._file = None
        else:
            self._file.flush()

    def __enter__(self) -> TrajectoryWriter:
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    @property
    def n_frames(self) -> int:
        """Number of frames written."""
        return self._n_frames
