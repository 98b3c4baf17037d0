"""Force field implementations."""

from .base import ForceProvider
from .lj import LennardJones, lennard_jones, lennard_jones_energy

__all__ = ["ForceProvider", "LennardJones", "lennard_jones", "lennard_jones_energy"]
