"""
Recipe parsing.

A recipe is a line-oriented text file of ``key value...`` records:

    title Argon in a box
    start 0:ps
    end 100:ps
    timestep 2:fs
    snapshot 1:ps
    temperature 120:K
    particles 100
    boundary cubic 10:nm 10:nm 10:nm

Quantities carry their unit after a colon. Blank lines and text after a
``#`` are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..errors import ParseErrorKind, RecipeParseError
from ..units import Time, Vec3
from ..units.constants import LENGTH_UNITS, TEMPERATURE_UNITS, TIME_UNITS

REQUIRED_KEYS = (
    "title",
    "start",
    "end",
    "timestep",
    "snapshot",
    "temperature",
    "particles",
    "boundary",
)

BOUNDARY_SHAPES = ("cubic",)

_ALL_UNITS = set(TIME_UNITS) | set(LENGTH_UNITS) | set(TEMPERATURE_UNITS)


@dataclass(frozen=True)
class Recipe:
    """
    Typed simulation parameters.

    Attributes:
        title: Run title, copied into every exported frame.
        start: Initial simulation time.
        end: Simulation time at which to stop.
        timestep: Integration timestep.
        snapshot: Simulated time between recorded frames.
        temperature: Target temperature in Kelvin.
        particles: Number of particles to seed.
        boundary: Box extents in meters.
    """

    title: str
    start: Time
    end: Time
    timestep: Time
    snapshot: Time
    temperature: float
    particles: int
    boundary: Vec3

    @property
    def duration(self) -> Time:
        """Time from start to end."""
        return self.end - self.start

    @property
    def n_timesteps(self) -> int:
        """Number of timesteps between start and end."""
        return int(self.duration / self.timestep)

    @property
    def n_snapshots(self) -> int:
        """Number of snapshots between start and end."""
        return int(self.duration / self.snapshot)

    @property
    def snapshot_interval(self) -> int:
        """Steps between recorded frames (at least 1)."""
        return max(1, int(round(self.snapshot / self.timestep)))


def _split_quantity(token: str) -> tuple[float, str]:
    number, sep, unit = token.partition(":")
    if not sep or not unit:
        raise RecipeParseError(ParseErrorKind.NO_UNIT, token)
    try:
        value = float(number)
    except ValueError:
        raise RecipeParseError(ParseErrorKind.INVALID_NUMBER, number) from None
    return value, unit


def _lookup_unit(unit: str, table: dict[str, float]) -> float:
    if unit in table:
        return table[unit]
    if unit in _ALL_UNITS:
        raise RecipeParseError(ParseErrorKind.INVALID_UNIT, unit)
    raise RecipeParseError(ParseErrorKind.UNKNOWN_UNIT, unit)


def parse_length(token: str) -> float:
    """Parse ``<value>:<unit>`` into meters."""
    value, unit = _split_quantity(token)
    return value * _lookup_unit(unit, LENGTH_UNITS)


def parse_time(token: str) -> Time:
    """Parse ``<value>:<unit>`` into a Time."""
    value, unit = _split_quantity(token)
    _lookup_unit(unit, TIME_UNITS)
    return Time.from_unit(value, unit)


def parse_temperature(token: str) -> float:
    """Parse ``<value>:<K|C>`` into Kelvin."""
    value, unit = _split_quantity(token)
    return value + _lookup_unit(unit, TEMPERATURE_UNITS)


def _expect(arguments: list[str], expected: int) -> list[str]:
    if len(arguments) < expected:
        raise RecipeParseError(ParseErrorKind.TOO_FEW_ARGUMENTS, " ".join(arguments))
    if len(arguments) > expected:
        raise RecipeParseError(ParseErrorKind.TOO_MANY_ARGUMENTS, " ".join(arguments))
    return arguments


def _parse_title(arguments: list[str]) -> str:
    if not arguments:
        raise RecipeParseError(ParseErrorKind.TOO_FEW_ARGUMENTS)
    return " ".join(arguments)


def _parse_single_time(arguments: list[str]) -> Time:
    (token,) = _expect(arguments, 1)
    return parse_time(token)


def _parse_positive_time(arguments: list[str]) -> Time:
    (token,) = _expect(arguments, 1)
    interval = parse_time(token)
    if not interval.seconds > 0.0:
        raise RecipeParseError(ParseErrorKind.INVALID_NUMBER, token)
    return interval


def _parse_temperature(arguments: list[str]) -> float:
    (token,) = _expect(arguments, 1)
    return parse_temperature(token)


def _parse_particles(arguments: list[str]) -> int:
    (token,) = _expect(arguments, 1)
    try:
        count = int(token)
    except ValueError:
        raise RecipeParseError(ParseErrorKind.INVALID_NUMBER, token) from None
    if count < 0:
        raise RecipeParseError(ParseErrorKind.INVALID_NUMBER, token)
    return count


def _parse_boundary(arguments: list[str]) -> Vec3:
    shape, x, y, z = _expect(arguments, 4)
    if shape not in BOUNDARY_SHAPES:
        raise RecipeParseError(ParseErrorKind.UNKNOWN_BOUNDARY, shape)
    return Vec3(parse_length(x), parse_length(y), parse_length(z))


_PARSERS = {
    "title": _parse_title,
    "start": _parse_single_time,
    "end": _parse_single_time,
    "timestep": _parse_positive_time,
    "snapshot": _parse_positive_time,
    "temperature": _parse_temperature,
    "particles": _parse_particles,
    "boundary": _parse_boundary,
}


def parse_recipe(text: str) -> Recipe:
    """
    Parse recipe text.

    Later occurrences of a key override earlier ones.

    Args:
        text: Recipe source.

    Returns:
        Parsed Recipe.

    Raises:
        RecipeParseError: On the first malformed line or a missing key.
    """
    values: dict[str, object] = {}
    for line_number, line in enumerate(text.splitlines(), start=1):
        words = line.split("#", 1)[0].split()
        if not words:
            continue
        key, arguments = words[0], words[1:]
        parser = _PARSERS.get(key)
        if parser is None:
            raise RecipeParseError(ParseErrorKind.UNKNOWN_KEY, key, line_number)
        try:
            values[key] = parser(arguments)
        except RecipeParseError as exc:
            raise exc.at_line(line_number) from None

    for key in REQUIRED_KEYS:
        if key not in values:
            raise RecipeParseError(ParseErrorKind.MISSING_KEY, key)

    return Recipe(**values)


def load_recipe(filename: str | Path) -> Recipe:
    """Read and parse a recipe file."""
    return parse_recipe(Path(filename).read_text(encoding="utf-8"))
