"""Lennard-Jones force implementation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..units import Vec3
from ..units.constants import ARGON_EPSILON, ARGON_SIGMA, DEFAULT_CUTOFF_SIGMAS
from .base import ForceProvider

if TYPE_CHECKING:
    from ..system.boundary import Boundary


def lennard_jones(
    r: ArrayLike | Vec3, epsilon: float = ARGON_EPSILON, sigma: float = ARGON_SIGMA
) -> NDArray[np.floating] | Vec3:
    """
    Lennard-Jones 12-6 pair force along a separation vector.

    V(r) = 4 * epsilon * [(sigma/r)^12 - (sigma/r)^6]

    The returned vector is -dV/dr times the unit vector of ``r``, so it
    points along ``r`` when the pair repels and against it when the pair
    attracts. A particle whose neighbour sits at separation ``r`` therefore
    feels ``-lennard_jones(r)``.
    The function is odd in ``r`` and has no notion of a cutoff; at zero
    separation the result is non-finite.

    Args:
        r: Separation vector(s), shape (..., 3) or a Vec3, in meters.
        epsilon: Well depth in joules.
        sigma: Zero-crossing distance in meters.

    Returns:
        Force vector(s) in newtons, same shape as ``r`` (a Vec3 for a Vec3).
    """
    if isinstance(r, Vec3):
        return Vec3.from_array(lennard_jones(r.to_array(), epsilon, sigma))

    r = np.asarray(r, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        dist = np.linalg.norm(r, axis=-1, keepdims=True)
        sig_over_r_6 = (sigma / dist) ** 6
        sig_over_r_12 = sig_over_r_6**2
        # -dV/dr magnitude: 24 * epsilon * [2*(sigma/r)^12 - (sigma/r)^6] / r
        force_mag = 24.0 * epsilon * (2.0 * sig_over_r_12 - sig_over_r_6) / dist
        return force_mag * (r / dist)


def lennard_jones_energy(
    distance: ArrayLike, epsilon: float = ARGON_EPSILON, sigma: float = ARGON_SIGMA
) -> NDArray[np.floating]:
    """Pair potential energy at the given distance(s), in joules."""
    distance = np.asarray(distance, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        sig_over_r_6 = (sigma / distance) ** 6
        return 4.0 * epsilon * (sig_over_r_6**2 - sig_over_r_6)


class LennardJones(ForceProvider):
    """
    Single-species Lennard-Jones interaction with periodic images.

    Every particle interacts with every other particle and with their
    images in the 26 neighbouring cells. Pairs at or beyond the cutoff
    contribute nothing.

    Attributes:
        epsilon: Well depth (J).
        sigma: Size parameter (m).
        cutoff: Cutoff distance (m).
    """

    def __init__(
        self,
        epsilon: float = ARGON_EPSILON,
        sigma: float = ARGON_SIGMA,
        cutoff: float | None = None,
    ) -> None:
        """
        Initialize Lennard-Jones force.

        Args:
            epsilon: Well depth in joules.
            sigma: Size parameter in meters.
            cutoff: Cutoff distance in meters. Defaults to 2.5 sigma.
        """
        self.epsilon = float(epsilon)
        self.sigma = float(sigma)
        self.cutoff = (
            DEFAULT_CUTOFF_SIGMAS * self.sigma if cutoff is None else float(cutoff)
        )

        for name in ("epsilon", "sigma", "cutoff"):
            value = getattr(self, name)
            if not (np.isfinite(value) and value > 0.0):
                raise ValueError(f"{name} must be positive and finite, got {value}")

    def __repr__(self) -> str:
        return (
            f"LennardJones(epsilon={self.epsilon!r}, sigma={self.sigma!r}, "
            f"cutoff={self.cutoff!r})"
        )

    def _pairs(
        self, positions: NDArray[np.floating], boundary: Boundary
    ) -> list[tuple[NDArray[np.integer], NDArray[np.floating]]]:
        """
        Collect interacting (particle, separation) pairs for every image.

        Returns:
            One (i_indices, separations) tuple per image offset, where
            separations[k] runs from particle i_indices[k] to the image of
            its partner.
        """
        n = len(positions)
        not_self = ~np.eye(n, dtype=bool)
        pairs = []
        for offset in boundary.image_offsets():
            # dr[i, j] = (pos_j + offset) - pos_i
            dr = positions[np.newaxis, :, :] + offset - positions[:, np.newaxis, :]
            r = np.linalg.norm(dr, axis=-1)
            # NaN distances compare False but must still poison the result
            mask = not_self & ((r < self.cutoff) | ~np.isfinite(r))
            i_indices, j_indices = np.nonzero(mask)
            if len(i_indices):
                pairs.append((i_indices, dr[i_indices, j_indices]))
        return pairs

    def compute(
        self, positions: NDArray[np.floating], boundary: Boundary
    ) -> NDArray[np.floating]:
        """
        Compute Lennard-Jones forces over all ordered pairs and images.

        Args:
            positions: Position snapshot, shape (N, 3).
            boundary: Periodic box supplying the image offsets.

        Returns:
            Forces array of shape (N, 3).
        """
        positions = np.asarray(positions, dtype=np.float64)
        forces = np.zeros_like(positions)
        if len(positions) < 2:
            return forces

        with np.errstate(invalid="ignore", over="ignore"):
            for i_indices, dr in self._pairs(positions, boundary):
                np.add.at(forces, i_indices, -lennard_jones(dr, self.epsilon, self.sigma))
        return forces

    def compute_with_energy(
        self, positions: NDArray[np.floating], boundary: Boundary
    ) -> tuple[NDArray[np.floating], float]:
        """Compute Lennard-Jones forces and potential energy."""
        positions = np.asarray(positions, dtype=np.float64)
        forces = np.zeros_like(positions)
        energy = 0.0
        if len(positions) < 2:
            return forces, energy

        with np.errstate(invalid="ignore", over="ignore"):
            for i_indices, dr in self._pairs(positions, boundary):
                np.add.at(forces, i_indices, -lennard_jones(dr, self.epsilon, self.sigma))
                distance = np.linalg.norm(dr, axis=-1)
                energy += float(
                    np.sum(lennard_jones_energy(distance, self.epsilon, self.sigma))
                )
        # Each unordered pair was visited from both ends
        return forces, 0.5 * energy
