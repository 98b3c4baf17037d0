"""Exception hierarchy."""

from __future__ import annotations

from enum import Enum


class BibberError(Exception):
    """Base class for all errors raised by bibber."""


class UnitError(BibberError, ValueError):
    """Raised when a unit name is not recognised for a quantity."""


class SeedingError(BibberError, RuntimeError):
    """Raised when particle placement cannot satisfy the separation constraint."""


class ZeroVelocityError(BibberError, ArithmeticError):
    """
    Raised when velocity rescaling meets a particle at rest.

    The direction of a zero velocity is undefined, so the particle cannot
    be brought to the target speed.

    Attributes:
        indices: Indices of the particles with a zero velocity norm.
    """

    def __init__(self, indices: list[int]) -> None:
        self.indices = list(indices)
        super().__init__(
            f"cannot rescale zero velocity of particle(s) {self.indices}"
        )


class ParseErrorKind(Enum):
    """Categories of recipe parse failures."""

    TOO_FEW_ARGUMENTS = "too few arguments"
    TOO_MANY_ARGUMENTS = "too many arguments"
    NO_UNIT = "no unit"
    UNKNOWN_UNIT = "unknown unit"
    INVALID_UNIT = "invalid unit"
    INVALID_NUMBER = "invalid number"
    UNKNOWN_KEY = "unknown key"
    MISSING_KEY = "missing key"
    UNKNOWN_BOUNDARY = "unknown boundary"


class RecipeParseError(BibberError):
    """
    Raised when a recipe cannot be parsed.

    Attributes:
        kind: Failure category.
        detail: Offending token or key.
        line: 1-based line number, or None when the error is not tied to a line.
    """

    def __init__(
        self, kind: ParseErrorKind, detail: str = "", line: int | None = None
    ) -> None:
        self.kind = kind
        self.detail = detail
        self.line = line
        message = kind.value
        if detail:
            message = f"{message}: {detail!r}"
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)

    def at_line(self, line: int) -> RecipeParseError:
        """Return a copy of this error tied to a line number."""
        return RecipeParseError(self.kind, self.detail, line)
