"""Periodic simulation box."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..units import Vec3


class WrapMode(Enum):
    """
    How a coordinate that left the primary cell is brought back.

    CENTERED shifts the coordinate by the whole number of box lengths that
    puts it back into [-L/2, L/2]. REMAINDER replaces it by the truncated
    remainder fmod(x, L), the legacy behaviour; it only
    guarantees |x| < L, so coordinates between L/2 and L stay where they are.
    """

    CENTERED = "centered"
    REMAINDER = "remainder"


@dataclass(frozen=True)
class Boundary:
    """
    Orthorhombic periodic box centred on the origin.

    The primary cell spans [-L/2, L/2] along each axis.

    Attributes:
        extents: Box side lengths in meters.
        wrap_mode: Policy applied by wrap().
    """

    extents: Vec3
    wrap_mode: WrapMode = WrapMode.CENTERED

    def __post_init__(self) -> None:
        """Validate extents."""
        extents = self.extents
        if not isinstance(extents, Vec3):
            extents = Vec3.from_array(extents)
        if not all(np.isfinite(v) and v > 0.0 for v in extents):
            raise ValueError(f"box extents must be positive and finite, got {extents}")
        # Use object.__setattr__ since dataclass is frozen
        object.__setattr__(self, "extents", extents)
        object.__setattr__(self, "wrap_mode", WrapMode(self.wrap_mode))

    @classmethod
    def cubic(cls, length: float, wrap_mode: WrapMode = WrapMode.CENTERED) -> Boundary:
        """Create a cubic box with given side length."""
        return cls(Vec3(length, length, length), wrap_mode)

    @classmethod
    def orthorhombic(
        cls, lx: float, ly: float, lz: float, wrap_mode: WrapMode = WrapMode.CENTERED
    ) -> Boundary:
        """Create a box with given side lengths."""
        return cls(Vec3(lx, ly, lz), wrap_mode)

    @property
    def lengths(self) -> NDArray[np.floating]:
        """Return box lengths [lx, ly, lz]."""
        return self.extents.to_array()

    @property
    def half_lengths(self) -> NDArray[np.floating]:
        return 0.5 * self.lengths

    @property
    def volume(self) -> float:
        """Return box volume."""
        return float(np.prod(self.lengths))

    def image_offsets(self) -> NDArray[np.floating]:
        """
        Return the 27 periodic image translations.

        The zero offset comes first, followed by the 26 neighbouring cells
        ({-1, 0, 1}^3 without the origin) scaled by the box lengths.

        Returns:
            Offsets array of shape (27, 3).
        """
        shifts = [(0, 0, 0)] + [
            s for s in itertools.product((-1, 0, 1), repeat=3) if s != (0, 0, 0)
        ]
        return np.array(shifts, dtype=np.float64) * self.lengths

    def contains(self, positions: ArrayLike) -> NDArray[np.bool_]:
        """Return per-axis mask of coordinates inside the primary cell."""
        positions = np.asarray(positions, dtype=np.float64)
        return np.abs(positions) <= self.half_lengths

    def wrap(self, positions: ArrayLike) -> NDArray[np.floating]:
        """
        Wrap positions into the primary cell.

        Each axis is handled independently. Coordinates already inside the
        cell are returned unchanged; non-finite coordinates stay non-finite.

        Args:
            positions: Positions array of shape (N, 3) or (3,).

        Returns:
            Wrapped positions array of the same shape.
        """
        positions = np.asarray(positions, dtype=np.float64)
        lengths = self.lengths
        outside = ~self.contains(positions)
        if not np.any(outside):
            return positions.copy()

        with np.errstate(invalid="ignore"):
            if self.wrap_mode is WrapMode.CENTERED:
                wrapped = positions - lengths * np.round(positions / lengths)
            else:
                wrapped = np.fmod(positions, lengths)
        return np.where(outside, wrapped, positions)

    def wrap_vec(self, position: Vec3) -> Vec3:
        """Wrap a single position."""
        return Vec3.from_array(self.wrap(position.to_array()))
