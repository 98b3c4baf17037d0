"""Explicit predictor integrator."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from ..units import Time
from .base import Integrator


class PredictorIntegrator(Integrator):
    """
    Explicit Taylor predictor.

    Algorithm:
        r(t + dt) = r(t) + dt * v(t) + 0.5 * dt^2 * a(t - dt)
        v(t + dt) = v(t) + dt * a(t - dt)

    The acceleration used is the one computed during the previous step.
    No corrector pass follows (correct() is the inherited no-op), so the
    scheme is neither symplectic nor time-reversible. Small timesteps
    (around a femtosecond for atomic systems) keep the error acceptable.

    Attributes:
        dt: Integration timestep.
    """

    def __init__(self, dt: Time) -> None:
        """
        Initialize predictor.

        Args:
            dt: Integration timestep, strictly positive.
        """
        if not dt.seconds > 0.0:
            raise ValueError(f"timestep must be positive, got {dt}")
        self._dt = dt

    @property
    def timestep(self) -> Time:
        """Return the integration timestep."""
        return self._dt

    def predict(
        self,
        positions: NDArray[np.floating],
        velocities: NDArray[np.floating],
        accelerations: NDArray[np.floating],
    ) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
        """
        Perform one predictor step.

        Args:
            positions: Positions, shape (N, 3).
            velocities: Velocities, shape (N, 3).
            accelerations: Accelerations from the previous step, shape (N, 3).

        Returns:
            Tuple of (new positions, new velocities).
        """
        dt = self._dt.seconds
        positions_new = positions + velocities * dt + 0.5 * accelerations * dt * dt
        velocities_new = velocities + accelerations * dt
        return positions_new, velocities_new
