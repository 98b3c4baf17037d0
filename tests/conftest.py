"""Shared fixtures."""

import os

import numpy as np
import pytest

os.environ.setdefault("MPLBACKEND", "Agg")

from bibber.forcefields import LennardJones  # noqa: E402
from bibber.system import Boundary, Particle, Universe, UniverseConfig  # noqa: E402
from bibber.units import Time, Vec3  # noqa: E402

# Two-particle scenario: separation below sigma, periodic images far away
PAIR_MASS = 1e-24
PAIR_SIGMA = 6e-10
PAIR_CUTOFF = 2e-9


@pytest.fixture
def repulsive_pair_config():
    """Config for a pair inside the repulsive core, no thermostat."""
    return UniverseConfig(
        dt=Time.from_femtoseconds(1.0),
        boundary=Boundary.cubic(1e-6),
        temperature=None,
        potential=LennardJones(sigma=PAIR_SIGMA, cutoff=PAIR_CUTOFF),
    )


@pytest.fixture
def repulsive_pair(repulsive_pair_config):
    """Two particles at rest, 5 Angstrom apart along x."""
    particles = [
        Particle(pos=Vec3(0.0, 0.0, 0.0), mass=PAIR_MASS),
        Particle(pos=Vec3(5e-10, 0.0, 0.0), mass=PAIR_MASS),
    ]
    return Universe(repulsive_pair_config, particles)


@pytest.fixture
def gas_particles():
    """Eight particles on a 2 nm lattice with random velocities."""
    rng = np.random.default_rng(7)
    particles = []
    for ix in (-1, 1):
        for iy in (-1, 1):
            for iz in (-1, 1):
                particles.append(
                    Particle(
                        pos=Vec3(ix * 1e-9, iy * 1e-9, iz * 1e-9),
                        vel=Vec3.from_array(rng.normal(0.0, 200.0, 3)),
                        mass=6.6e-26,
                    )
                )
    return particles


@pytest.fixture
def gas_config():
    """Argon in a 4 nm box at 120 K."""
    return UniverseConfig(
        dt=Time.from_femtoseconds(2.0),
        boundary=Boundary.cubic(4e-9),
        temperature=120.0,
    )
