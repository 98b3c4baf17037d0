"""Value types and physical units."""

from .constants import BOLTZMANN, LENGTH_UNITS, TEMPERATURE_UNITS, TIME_UNITS
from .time import Time
from .vec3 import Vec3

__all__ = [
    "BOLTZMANN",
    "LENGTH_UNITS",
    "TEMPERATURE_UNITS",
    "TIME_UNITS",
    "Time",
    "Vec3",
]
