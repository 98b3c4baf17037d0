"""
bibber - classical molecular dynamics of Lennard-Jones particles.

Particles move under a single-species Lennard-Jones potential in a
periodic box, advanced by an explicit predictor with an isokinetic
thermostat. Runs are described by recipe files and exported as GRO
trajectories.

Quick Start:
    >>> from bibber import load_recipe, run_recipe
    >>> result = run_recipe(load_recipe("argon.recipe"), seed=1)
    >>> print(result.trajectory.to_gro())
"""

__version__ = "0.1.0"

from .engines import Simulation, SimulationResult, run_recipe
from .errors import (
    BibberError,
    RecipeParseError,
    SeedingError,
    UnitError,
    ZeroVelocityError,
)
from .forcefields import LennardJones, lennard_jones
from .io import Frame, GroWriter, Recipe, Trajectory, load_recipe, parse_recipe
from .seeding import seed_particles
from .system import Boundary, Particle, Universe, UniverseConfig, WrapMode
from .units import Time, Vec3

__all__ = [
    "Simulation",
    "SimulationResult",
    "run_recipe",
    "BibberError",
    "RecipeParseError",
    "SeedingError",
    "UnitError",
    "ZeroVelocityError",
    "LennardJones",
    "lennard_jones",
    "Frame",
    "GroWriter",
    "Recipe",
    "Trajectory",
    "load_recipe",
    "parse_recipe",
    "seed_particles",
    "Boundary",
    "Particle",
    "Universe",
    "UniverseConfig",
    "WrapMode",
    "Time",
    "Vec3",
]
