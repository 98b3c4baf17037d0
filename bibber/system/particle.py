"""Particle representation."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from ..units import Vec3


@dataclass
class Particle:
    """
    A point mass.

    Attributes:
        pos: Position in meters.
        vel: Velocity in meters/second.
        acc: Acceleration in meters/second^2.
        mass: Mass in kilograms, strictly positive.
    """

    pos: Vec3
    vel: Vec3 = field(default_factory=Vec3.zero)
    acc: Vec3 = field(default_factory=Vec3.zero)
    mass: float = 1.0

    def __post_init__(self) -> None:
        """Coerce vectors and validate mass."""
        self.pos = _as_vec3(self.pos)
        self.vel = _as_vec3(self.vel)
        self.acc = _as_vec3(self.acc)
        self.mass = float(self.mass)
        if not self.mass > 0.0:
            raise ValueError(f"particle mass must be positive, got {self.mass}")


def _as_vec3(value) -> Vec3:
    if isinstance(value, Vec3):
        return value
    return Vec3.from_array(np.asarray(value, dtype=np.float64))
