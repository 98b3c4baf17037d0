"""Command-line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from .engines import run_recipe
from .errors import RecipeParseError, SeedingError, ZeroVelocityError
from .io import GroWriter, load_recipe
from .logging_config import setup_logging
from .seeding import DEFAULT_MASS, DEFAULT_MIN_SEPARATION
from .system import WrapMode

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DIVERGED = 1
EXIT_BAD_INPUT = 2


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bibber",
        description="Lennard-Jones molecular dynamics in a periodic box",
    )
    parser.add_argument("recipe", help="Recipe file")
    parser.add_argument(
        "-o", "--output", default=None, help="GRO output file (default: stdout)"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for seeding")
    parser.add_argument(
        "--mass", type=float, default=DEFAULT_MASS, help="Particle mass (kg)"
    )
    parser.add_argument(
        "--min-separation",
        type=float,
        default=DEFAULT_MIN_SEPARATION,
        help="Minimum distance between seeded particles (m)",
    )
    parser.add_argument(
        "--no-thermostat",
        action="store_true",
        help="Disable temperature control",
    )
    parser.add_argument(
        "--wrap",
        choices=[mode.value for mode in WrapMode],
        default=WrapMode.CENTERED.value,
        help="Boundary wrap policy",
    )
    parser.add_argument(
        "--progress-every",
        type=positive_int,
        default=100,
        help="Steps between progress lines",
    )
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    Run a recipe and export its trajectory.

    Returns:
        Process exit status: 0 on success, 1 if the run diverged (the
        partial trajectory is still written), 2 for bad input.
    """
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    try:
        recipe = load_recipe(args.recipe)
    except (OSError, RecipeParseError) as exc:
        logger.error("Cannot read recipe %s: %s", args.recipe, exc)
        return EXIT_BAD_INPUT

    try:
        result = run_recipe(
            recipe,
            thermostat=not args.no_thermostat,
            wrap_mode=WrapMode(args.wrap),
            mass=args.mass,
            min_separation=args.min_separation,
            seed=args.seed,
            progress_frequency=args.progress_every,
        )
    except (SeedingError, ZeroVelocityError, ValueError) as exc:
        logger.error("Cannot run recipe %s: %s", args.recipe, exc)
        return EXIT_BAD_INPUT

    with GroWriter(args.output if args.output else sys.stdout) as writer:
        writer.write_trajectory(result.trajectory)

    if not result.completed:
        logger.warning(
            "Run ended early at t=%g ps; wrote %d frames",
            result.universe.time.picoseconds,
            len(result.trajectory),
        )
        return EXIT_DIVERGED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
