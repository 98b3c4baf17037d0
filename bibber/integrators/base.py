"""Base interfaces for integration stages."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import NDArray

from ..units import Time


class Integrator(ABC):
    """
    Abstract base class for time integration algorithms.

    Integrators advance positions and velocities by one timestep given the
    accelerations of the previous step. They return new arrays and never
    modify their inputs.
    """

    @abstractmethod
    def predict(
        self,
        positions: NDArray[np.floating],
        velocities: NDArray[np.floating],
        accelerations: NDArray[np.floating],
    ) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
        """
        Advance positions and velocities by one timestep.

        Returns:
            Tuple of (new positions, new velocities).
        """
        ...

    def correct(
        self,
        positions: NDArray[np.floating],
        velocities: NDArray[np.floating],
        accelerations: NDArray[np.floating],
    ) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
        """Refine predicted state with fresh accelerations (no-op by default)."""
        return positions, velocities

    @property
    @abstractmethod
    def timestep(self) -> Time:
        """Return the integration timestep."""
        ...


class ThermostatModifier(ABC):
    """
    Abstract base class for thermostat modifiers.

    Thermostats map velocities to new velocities to control temperature.
    """

    @abstractmethod
    def apply(
        self, velocities: NDArray[np.floating], masses: NDArray[np.floating]
    ) -> NDArray[np.floating]:
        """
        Return thermostatted velocities.

        Args:
            velocities: Velocities, shape (N, 3), m/s.
            masses: Masses, shape (N,), kg.

        Returns:
            New velocities array of shape (N, 3).
        """
        ...

    @property
    @abstractmethod
    def target_temperature(self) -> float:
        """Return target temperature in Kelvin."""
        ...


class BarostatModifier(ABC):
    """
    Abstract base class for pressure control.

    Barostats scale positions and the box; only a no-op exists.
    """

    @abstractmethod
    def apply(self, positions: NDArray[np.floating]) -> NDArray[np.floating]:
        ...
