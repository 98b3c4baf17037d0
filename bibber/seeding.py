"""Random initial particle placement."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from .errors import SeedingError
from .system import Boundary, Particle
from .units import Vec3

logger = logging.getLogger(__name__)

DEFAULT_MASS = 1e-24  # kg
DEFAULT_MIN_SEPARATION = 7e-9  # m
# Initial velocity components are drawn from +-speed_scale * L / 2 (per second)
DEFAULT_SPEED_SCALE = 100.0


def seed_particles(
    n_particles: int,
    boundary: Boundary,
    mass: float = DEFAULT_MASS,
    min_separation: float = DEFAULT_MIN_SEPARATION,
    speed_scale: float = DEFAULT_SPEED_SCALE,
    rng: np.random.Generator | None = None,
    max_attempts: int | None = None,
) -> list[Particle]:
    """
    Place particles uniformly in the box, keeping them apart.

    Candidates are drawn one at a time and rejected if they fall closer
    than ``min_separation`` to an already accepted particle.

    Args:
        n_particles: Number of particles to place.
        boundary: Box; positions are drawn from [-L/2, L/2) per axis.
        mass: Particle mass in kg.
        min_separation: Minimum pair distance in meters.
        speed_scale: Velocity components are uniform in
            [-speed_scale * L/2, speed_scale * L/2) m/s.
        rng: Random generator. A fresh unseeded one when None.
        max_attempts: Cap on candidate draws. Defaults to 1000 per particle.

    Returns:
        List of particles with zero acceleration.

    Raises:
        SeedingError: If the cap is reached before all particles are placed.
    """
    if n_particles < 0:
        raise ValueError(f"n_particles must be non-negative, got {n_particles}")
    rng = rng if rng is not None else np.random.default_rng()
    if max_attempts is None:
        max_attempts = 1000 * max(n_particles, 1)

    half = boundary.half_lengths
    accepted = np.empty((0, 3), dtype=np.float64)
    attempts = 0
    while len(accepted) < n_particles:
        if attempts >= max_attempts:
            raise SeedingError(
                f"placed {len(accepted)}/{n_particles} particles after "
                f"{attempts} attempts with min separation {min_separation} m"
            )
        attempts += 1
        candidate = rng.uniform(-half, half)
        if len(accepted):
            distances = np.linalg.norm(accepted - candidate, axis=1)
            if np.any(distances < min_separation):
                continue
        accepted = np.vstack([accepted, candidate])

    velocities = rng.uniform(-half * speed_scale, half * speed_scale, (n_particles, 3))
    logger.info("Seeded %d particles in %d attempts", n_particles, attempts)
    return [
        Particle(
            pos=Vec3.from_array(pos),
            vel=Vec3.from_array(vel),
            acc=Vec3.zero(),
            mass=mass,
        )
        for pos, vel in zip(accepted, velocities)
    ]


def prune_close_particles(
    particles: Sequence[Particle], min_separation: float
) -> list[Particle]:
    """
    Drop every particle that has a neighbour closer than ``min_separation``.

    Both members of a close pair are removed. Order is preserved.

    Args:
        particles: Candidate particles.
        min_separation: Minimum pair distance in meters.

    Returns:
        Surviving particles.
    """
    if len(particles) < 2:
        return list(particles)
    positions = np.array([p.pos.to_array() for p in particles])
    dr = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
    distances = np.linalg.norm(dr, axis=-1)
    np.fill_diagonal(distances, np.inf)
    keep = np.all(distances >= min_separation, axis=1)
    survivors = [p for p, ok in zip(particles, keep) if ok]
    logger.info("%d/%d particles survived pruning", len(survivors), len(particles))
    return survivors
