"""Three-component vector value type."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .time import Time


@dataclass(frozen=True)
class Vec3:
    """
    Immutable 3-vector of floats.

    All operators are component-wise, with scalars and Times broadcast to
    every component. Division by a zero component follows IEEE semantics
    (inf or nan) instead of raising; divergence checks rely on this.

    Attributes:
        x: First component.
        y: Second component.
        z: Third component.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    # Make numpy scalars defer to the reflected operators below
    __array_ufunc__ = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))
        object.__setattr__(self, "z", float(self.z))

    @classmethod
    def zero(cls) -> Vec3:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def one(cls) -> Vec3:
        return cls(1.0, 1.0, 1.0)

    @classmethod
    def from_array(cls, values: ArrayLike) -> Vec3:
        """Create a vector from any length-3 sequence or array."""
        values = np.asarray(values, dtype=np.float64)
        if values.shape != (3,):
            raise ValueError(f"Vec3 needs shape (3,), got {values.shape}")
        return cls(*values)

    def to_array(self) -> NDArray[np.floating]:
        """Return the components as a new float64 array of shape (3,)."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def __array__(self, dtype=None, copy=None) -> NDArray:
        values = self.to_array()
        return values if dtype is None else values.astype(dtype)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __len__(self) -> int:
        return 3

    def norm(self) -> float:
        """Euclidean length."""
        return float(np.sqrt(self.x * self.x + self.y * self.y + self.z * self.z))

    def powi(self, n: int) -> Vec3:
        """Raise every component to the integer power ``n``."""
        return self._apply(lambda a: np.power(a, float(int(n))))

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.to_array())))

    def _apply(self, fn: Callable[[NDArray], NDArray]) -> Vec3:
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            return Vec3(*fn(self.to_array()))

    def _binary(
        self, other: Vec3 | Time | float, fn: Callable[[NDArray, NDArray], NDArray]
    ) -> Vec3:
        if isinstance(other, Vec3):
            rhs = other.to_array()
        elif isinstance(other, Time):
            rhs = np.float64(other.seconds)
        elif isinstance(other, (int, float, np.floating, np.integer)):
            rhs = np.float64(other)
        else:
            return NotImplemented
        return self._apply(lambda lhs: fn(lhs, rhs))

    def __add__(self, other: Vec3 | float) -> Vec3:
        return self._binary(other, np.add)

    def __radd__(self, other: float) -> Vec3:
        return self._binary(other, lambda a, b: np.add(b, a))

    def __sub__(self, other: Vec3 | float) -> Vec3:
        return self._binary(other, np.subtract)

    def __rsub__(self, other: float) -> Vec3:
        return self._binary(other, lambda a, b: np.subtract(b, a))

    def __mul__(self, other: Vec3 | Time | float) -> Vec3:
        return self._binary(other, np.multiply)

    def __rmul__(self, other: Time | float) -> Vec3:
        return self._binary(other, lambda a, b: np.multiply(b, a))

    def __truediv__(self, other: Vec3 | Time | float) -> Vec3:
        return self._binary(other, np.divide)

    def __rtruediv__(self, other: float) -> Vec3:
        return self._binary(other, lambda a, b: np.divide(b, a))

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def __repr__(self) -> str:
        return f"Vec3({self.x!r}, {self.y!r}, {self.z!r})"
