"""Base interface for force providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from ..system.boundary import Boundary


class ForceProvider(ABC):
    """
    Abstract base class for force computation modules.

    Providers are pure with respect to the universe: they read a position
    snapshot and return a new force array, never mutating their input.
    """

    @abstractmethod
    def compute(
        self, positions: NDArray[np.floating], boundary: Boundary
    ) -> NDArray[np.floating]:
        """
        Compute forces on all particles.

        Args:
            positions: Particle positions, shape (N, 3), in meters.
            boundary: Periodic box.

        Returns:
            Forces array of shape (N, 3), in newtons.
        """
        ...

    def compute_with_energy(
        self, positions: NDArray[np.floating], boundary: Boundary
    ) -> tuple[NDArray[np.floating], float]:
        """
        Compute forces and potential energy.

        Default implementation computes forces only; subclasses should
        override if energy is needed.

        Returns:
            Tuple of (forces array, potential energy in joules).
        """
        return self.compute(positions, boundary), 0.0
