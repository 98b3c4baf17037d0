"""Particles, periodic box and universe state."""

from .boundary import Boundary, WrapMode
from .particle import Particle
from .universe import Universe, UniverseConfig

__all__ = ["Boundary", "WrapMode", "Particle", "Universe", "UniverseConfig"]
