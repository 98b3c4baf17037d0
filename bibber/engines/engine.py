"""Simulation driver loop."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from ..seeding import DEFAULT_MASS, DEFAULT_MIN_SEPARATION, seed_particles
from ..system import Universe, UniverseConfig
from .reporters import ProgressReporter, Reporter, ReporterGroup, TrajectoryReporter

if TYPE_CHECKING:
    from ..forcefields import LennardJones
    from ..io.recipe import Recipe
    from ..io.trajectory import Trajectory
    from ..system import Particle, WrapMode
    from ..units import Time

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """
    Outcome of a run.

    Attributes:
        universe: Universe in its final (last valid) state.
        trajectory: Recorded frames, if a TrajectoryReporter was attached.
        completed: False if the run stopped early on divergence.
        steps: Number of successful steps taken by this run.
        wall_time: Wall-clock seconds spent.
    """

    universe: Universe
    trajectory: Trajectory | None
    completed: bool
    steps: int
    wall_time: float


class Simulation:
    """
    Drives a universe until an end time or a failed step.

    The universe is owned exclusively by the simulation while it runs;
    reporters see it only between steps.

    Example usage:
        simulation = Simulation(universe)
        simulation.add_reporter(TrajectoryReporter("argon", frequency=500))
        result = simulation.run(until=Time.from_picoseconds(100.0))
        print(result.trajectory.to_gro())
    """

    def __init__(
        self, universe: Universe, reporters: Sequence[Reporter] | None = None
    ) -> None:
        """
        Initialize simulation.

        Args:
            universe: Universe to advance.
            reporters: Reporters called after every successful step.
        """
        self._universe = universe
        self._reporters = ReporterGroup(list(reporters) if reporters else None)

    @property
    def universe(self) -> Universe:
        """Return the driven universe."""
        return self._universe

    def add_reporter(self, reporter: Reporter) -> None:
        """Add a reporter."""
        self._reporters.add(reporter)

    def remove_reporter(self, reporter: Reporter) -> None:
        """Remove a reporter."""
        self._reporters.remove(reporter)

    def _trajectory(self) -> Trajectory | None:
        for reporter in self._reporters:
            if isinstance(reporter, TrajectoryReporter):
                return reporter.trajectory
        return None

    def run(self, until: Time, max_steps: int | None = None) -> SimulationResult:
        """
        Step until the simulation clock reaches ``until``.

        The end condition allows half a timestep of slack so accumulated
        rounding in the clock does not add a spurious final step.

        Args:
            until: End time.
            max_steps: Optional hard cap on the number of steps.

        Returns:
            SimulationResult. Frames recorded before a divergence are kept.
        """
        universe = self._universe
        end = until - universe.dt * 0.5
        steps = 0
        completed = True

        self._reporters.initialize(universe)
        logger.info(
            "Running %d particles from t=%g ps to t=%g ps (dt=%g fs)",
            universe.n_particles,
            universe.time.picoseconds,
            until.picoseconds,
            universe.dt.femtoseconds,
        )

        start_time = time.perf_counter()
        try:
            while universe.time < end:
                if max_steps is not None and steps >= max_steps:
                    break
                if not universe.step():
                    completed = False
                    logger.warning(
                        "Simulation stopped early at t=%g ps after %d steps",
                        universe.time.picoseconds,
                        steps,
                    )
                    break
                steps += 1
                self._reporters.report(universe)
        finally:
            wall_time = time.perf_counter() - start_time
            self._reporters.finalize(universe)

        if completed:
            logger.info("Finished %d steps in %.2f s", steps, wall_time)

        return SimulationResult(
            universe=universe,
            trajectory=self._trajectory(),
            completed=completed,
            steps=steps,
            wall_time=wall_time,
        )


def run_recipe(
    recipe: Recipe,
    particles: Sequence[Particle] | None = None,
    potential: LennardJones | None = None,
    thermostat: bool = True,
    wrap_mode: WrapMode | None = None,
    mass: float = DEFAULT_MASS,
    min_separation: float = DEFAULT_MIN_SEPARATION,
    seed: int | None = None,
    progress_frequency: int = 100,
) -> SimulationResult:
    """
    Build a universe from a recipe and run it to the recipe end time.

    Args:
        recipe: Parsed recipe.
        particles: Initial particles. Seeded randomly when None.
        potential: Pair interaction; argon defaults when None.
        thermostat: Whether to apply the recipe temperature.
        wrap_mode: Boundary wrap policy.
        mass: Mass of seeded particles (kg).
        min_separation: Minimum distance between seeded particles (m).
        seed: Random seed for particle seeding.
        progress_frequency: Steps between progress log lines.

    Returns:
        SimulationResult with the recorded trajectory.
    """
    config = UniverseConfig.from_recipe(
        recipe, potential=potential, thermostat=thermostat, wrap_mode=wrap_mode
    )
    if particles is None:
        particles = seed_particles(
            recipe.particles,
            config.boundary,
            mass=mass,
            min_separation=min_separation,
            rng=np.random.default_rng(seed),
        )

    simulation = Simulation(
        Universe(config, particles),
        [
            TrajectoryReporter(recipe.title, frequency=recipe.snapshot_interval),
            ProgressReporter(until=recipe.end, frequency=progress_frequency),
        ],
    )
    return simulation.run(until=recipe.end)
