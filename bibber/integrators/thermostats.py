"""Thermostat and barostat modifiers."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from ..errors import ZeroVelocityError
from ..units.constants import BOLTZMANN
from .base import BarostatModifier, ThermostatModifier


def particle_temperatures(
    velocities: NDArray[np.floating], masses: NDArray[np.floating]
) -> NDArray[np.floating]:
    """
    Temperature implied by each particle's kinetic energy.

    Uses E_kin = 1/2 m v^2 = 3/2 k_B T, so T = m v^2 / (3 k_B).

    Returns:
        Array of shape (N,) in Kelvin.
    """
    speed_sq = np.sum(velocities**2, axis=1)
    return masses * speed_sq / (3.0 * BOLTZMANN)


def instantaneous_temperature(
    velocities: NDArray[np.floating], masses: NDArray[np.floating]
) -> float:
    """
    Mean of the per-particle temperatures.

    Returns 0 for an empty system. NaN or inf velocities propagate.
    """
    if len(masses) == 0:
        return 0.0
    return float(np.mean(particle_temperatures(velocities, masses)))


class IsokineticThermostat(ThermostatModifier):
    """
    Hard velocity rescaling, particle by particle.

    Every particle is set to the speed that carries the target temperature
    on its own, v = sqrt(3 k_B T / m), keeping its direction. This is not a
    relaxation: the target is met exactly after every application.

    A particle at rest has no direction to keep, so ZeroVelocityError is
    raised. Non-finite velocities are passed through unchanged in direction
    (they stay non-finite).
    """

    def __init__(self, temperature: float) -> None:
        """
        Initialize thermostat.

        Args:
            temperature: Target temperature in K.
        """
        if not temperature >= 0.0:
            raise ValueError(f"temperature must be non-negative, got {temperature}")
        self._temperature = float(temperature)

    @property
    def target_temperature(self) -> float:
        return self._temperature

    def target_speed(self, masses: NDArray[np.floating]) -> NDArray[np.floating]:
        """Speed per particle that matches the target temperature."""
        return np.sqrt(3.0 * BOLTZMANN * self._temperature / np.asarray(masses))

    def apply(
        self, velocities: NDArray[np.floating], masses: NDArray[np.floating]
    ) -> NDArray[np.floating]:
        """
        Rescale every velocity to the target speed.

        Args:
            velocities: Velocities, shape (N, 3).
            masses: Masses, shape (N,).

        Returns:
            Rescaled velocities.

        Raises:
            ZeroVelocityError: If any particle has a zero velocity norm.
        """
        velocities = np.asarray(velocities, dtype=np.float64)
        speeds = np.linalg.norm(velocities, axis=1)

        at_rest = np.flatnonzero(speeds == 0.0)
        if len(at_rest):
            raise ZeroVelocityError(at_rest.tolist())

        with np.errstate(invalid="ignore", over="ignore"):
            scale = self.target_speed(masses) / speeds
            return velocities * scale[:, np.newaxis]


class NoBarostat(BarostatModifier):
    """Pressure control placeholder; positions pass through unchanged."""

    def apply(self, positions: NDArray[np.floating]) -> NDArray[np.floating]:
        return positions
