"""Unit-safe simulation time."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..errors import UnitError
from .constants import TIME_UNITS


def _divide(numerator: float, denominator: float) -> float:
    """IEEE division: zero denominators give inf/nan instead of raising."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.divide(np.float64(numerator), np.float64(denominator)))


def _factor(unit: str) -> float:
    try:
        return TIME_UNITS[unit]
    except KeyError:
        raise UnitError(f"unknown time unit {unit!r}") from None


@dataclass(frozen=True, order=True)
class Time:
    """
    Simulation time stored in seconds.

    Negative values are valid and are used for deltas. Conversions to and
    from other units are linear rescalings by powers of ten.

    Attributes:
        seconds: Underlying value in seconds.
    """

    seconds: float = 0.0

    __array_ufunc__ = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "seconds", float(self.seconds))

    @classmethod
    def zero(cls) -> Time:
        return cls(0.0)

    @classmethod
    def from_seconds(cls, seconds: float) -> Time:
        return cls(seconds)

    @classmethod
    def from_milliseconds(cls, value: float) -> Time:
        return cls.from_unit(value, "ms")

    @classmethod
    def from_microseconds(cls, value: float) -> Time:
        return cls.from_unit(value, "us")

    @classmethod
    def from_nanoseconds(cls, value: float) -> Time:
        return cls.from_unit(value, "ns")

    @classmethod
    def from_picoseconds(cls, value: float) -> Time:
        return cls.from_unit(value, "ps")

    @classmethod
    def from_femtoseconds(cls, value: float) -> Time:
        return cls.from_unit(value, "fs")

    @classmethod
    def from_unit(cls, value: float, unit: str) -> Time:
        """
        Create a time from a value in the given unit.

        Args:
            value: Magnitude in ``unit``.
            unit: One of s, ms, us, ns, ps, fs.

        Returns:
            New Time instance.
        """
        return cls(float(value) * _factor(unit))

    def as_unit(self, unit: str) -> float:
        """Return the value expressed in ``unit``."""
        return _divide(self.seconds, _factor(unit))

    @property
    def milliseconds(self) -> float:
        return self.as_unit("ms")

    @property
    def microseconds(self) -> float:
        return self.as_unit("us")

    @property
    def nanoseconds(self) -> float:
        return self.as_unit("ns")

    @property
    def picoseconds(self) -> float:
        return self.as_unit("ps")

    @property
    def femtoseconds(self) -> float:
        return self.as_unit("fs")

    def __add__(self, other: Time) -> Time:
        if not isinstance(other, Time):
            return NotImplemented
        return Time(self.seconds + other.seconds)

    def __sub__(self, other: Time) -> Time:
        if not isinstance(other, Time):
            return NotImplemented
        return Time(self.seconds - other.seconds)

    def __neg__(self) -> Time:
        return Time(-self.seconds)

    def __mul__(self, factor: float) -> Time:
        if not isinstance(factor, (int, float, np.floating, np.integer)):
            return NotImplemented
        return Time(self.seconds * float(factor))

    __rmul__ = __mul__

    def __truediv__(self, other: Time | float) -> Time | float:
        # Time / Time is a plain ratio, Time / scalar is a Time
        if isinstance(other, Time):
            return _divide(self.seconds, other.seconds)
        if not isinstance(other, (int, float, np.floating, np.integer)):
            return NotImplemented
        return Time(_divide(self.seconds, float(other)))

    def __float__(self) -> float:
        return self.seconds

    def __repr__(self) -> str:
        return f"Time({self.seconds!r} s)"
