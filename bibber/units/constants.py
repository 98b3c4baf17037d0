"""Physical constants and unit tables (SI)."""

from __future__ import annotations

# Boltzmann constant (J/K)
BOLTZMANN = 1.380649e-23

# Atomic mass unit (kg)
ATOMIC_MASS_UNIT = 1.66053906660e-27

# Argon Lennard-Jones parameters
ARGON_SIGMA = 3.405e-10  # m
ARGON_EPSILON = 119.8 * BOLTZMANN  # J
ARGON_MASS = 39.948 * ATOMIC_MASS_UNIT  # kg

# Cutoff in units of sigma
DEFAULT_CUTOFF_SIGMAS = 2.5

# Factors converting to seconds
TIME_UNITS: dict[str, float] = {
    "s": 1.0,
    "ms": 1e-3,
    "us": 1e-6,
    "ns": 1e-9,
    "ps": 1e-12,
    "fs": 1e-15,
}

# Factors converting to meters
LENGTH_UNITS: dict[str, float] = {
    "km": 1e3,
    "m": 1.0,
    "dm": 1e-1,
    "cm": 1e-2,
    "mm": 1e-3,
    "um": 1e-6,
    "nm": 1e-9,
    "pm": 1e-12,
    "fm": 1e-15,
}

# Offsets converting to Kelvin
TEMPERATURE_UNITS: dict[str, float] = {
    "K": 0.0,
    "C": 273.15,
}
