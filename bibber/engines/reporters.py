"""Observers called by the simulation loop between steps."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

from ..io.trajectory import Trajectory

if TYPE_CHECKING:
    from ..system import Universe
    from ..units import Time

logger = logging.getLogger(__name__)


def _check_frequency(frequency: int) -> int:
    if frequency < 1:
        raise ValueError(f"frequency must be at least 1, got {frequency}")
    return frequency


class Reporter(ABC):
    """
    Observer of a running universe.

    Reporters are called between steps, never during one, to record
    frames, log progress or collect observables.
    """

    @abstractmethod
    def report(self, universe: Universe) -> None:
        """Observe ``universe`` right after a successful step."""
        ...

    @property
    @abstractmethod
    def frequency(self) -> int:
        """Steps between reports."""
        ...

    def should_report(self, iteration: int) -> bool:
        """True when ``iteration`` is a multiple of the frequency."""
        return iteration % self.frequency == 0

    def initialize(self, universe: Universe) -> None:
        """Called once before the first step of a run."""

    def finalize(self, universe: Universe) -> None:
        """Called once after the last step, including after a divergence."""


class ReporterGroup:
    """
    Reporters attached to one simulation, dispatched by iteration count.

    Iterating the group yields reporters in the order they were attached.
    """

    def __init__(self, reporters: list[Reporter] | None = None) -> None:
        self._members: list[Reporter] = list(reporters) if reporters else []

    def __iter__(self) -> Iterator[Reporter]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def add(self, reporter: Reporter) -> None:
        self._members.append(reporter)

    def remove(self, reporter: Reporter) -> None:
        """Detach a reporter; ValueError if it was never attached."""
        self._members.remove(reporter)

    def initialize(self, universe: Universe) -> None:
        for member in self._members:
            member.initialize(universe)

    def report(self, universe: Universe) -> None:
        """Call every reporter whose frequency divides the iteration count."""
        due = [m for m in self._members if m.should_report(universe.iteration)]
        for member in due:
            member.report(universe)

    def finalize(self, universe: Universe) -> None:
        for member in self._members:
            member.finalize(universe)


class TrajectoryReporter(Reporter):
    """
    Reporter that records frames into a Trajectory.

    The initial state is recorded on initialize(), then every
    ``frequency`` steps.
    """

    def __init__(self, title: str, frequency: int = 100) -> None:
        """
        Initialize trajectory reporter.

        Args:
            title: Trajectory title.
            frequency: Steps between frames.
        """
        self._title = title
        self._frequency = _check_frequency(frequency)
        self._trajectory: Trajectory | None = None

    @property
    def frequency(self) -> int:
        return self._frequency

    @property
    def trajectory(self) -> Trajectory:
        """Return the recorded trajectory."""
        if self._trajectory is None:
            raise RuntimeError("TrajectoryReporter has not been initialized")
        return self._trajectory

    def initialize(self, universe: Universe) -> None:
        """Bind to the universe and record frame 0."""
        if self._trajectory is None:
            self._trajectory = Trajectory.from_universe(universe, self._title)
            self._trajectory.add_frame_from_universe(universe)

    def report(self, universe: Universe) -> None:
        """Store current frame."""
        self.trajectory.add_frame_from_universe(universe)


class ProgressReporter(Reporter):
    """
    Reporter that logs simulated time and estimated remaining wall time.
    """

    def __init__(
        self,
        until: Time,
        frequency: int = 100,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        """
        Initialize progress reporter.

        Args:
            until: Simulation time at which the run ends.
            frequency: Reporting frequency.
            clock: Wall clock in seconds (injectable for tests).
        """
        self._until = until
        self._frequency = _check_frequency(frequency)
        self._clock = clock
        self._start_wall = 0.0
        self._start_iteration = 0
        self.last_estimate: float | None = None

    @property
    def frequency(self) -> int:
        return self._frequency

    def initialize(self, universe: Universe) -> None:
        self._start_wall = self._clock()
        self._start_iteration = universe.iteration

    def estimate_remaining(self, universe: Universe) -> float:
        """Estimated wall time (s) to reach the end time at the current pace."""
        done = universe.iteration - self._start_iteration
        if done <= 0:
            return float("nan")
        per_step = (self._clock() - self._start_wall) / done
        remaining_steps = max(0.0, (self._until - universe.time) / universe.dt)
        return remaining_steps * per_step

    def report(self, universe: Universe) -> None:
        self.last_estimate = self.estimate_remaining(universe)
        logger.info(
            "t = %10.3f ps    est. rem. wall time %.0f s",
            universe.time.picoseconds,
            self.last_estimate,
        )


class TemperatureReporter(Reporter):
    """
    Collects the measured temperature and kinetic energy of the universe.

    Useful for checking that the thermostat holds its target: with the
    isokinetic thermostat enabled every sample equals the target.
    """

    def __init__(self, frequency: int = 100) -> None:
        self._frequency = _check_frequency(frequency)
        self._samples: list[tuple[float, float, float]] = []

    @property
    def frequency(self) -> int:
        return self._frequency

    def report(self, universe: Universe) -> None:
        self._samples.append(
            (
                universe.time.seconds,
                universe.measured_temperature,
                universe.kinetic_energy,
            )
        )

    def _column(self, index: int) -> NDArray[np.floating]:
        return np.array([sample[index] for sample in self._samples])

    @property
    def times(self) -> NDArray[np.floating]:
        """Sample times in seconds."""
        return self._column(0)

    @property
    def temperatures(self) -> NDArray[np.floating]:
        """Measured temperatures in Kelvin."""
        return self._column(1)

    @property
    def kinetic_energy(self) -> NDArray[np.floating]:
        """Total kinetic energy in joules."""
        return self._column(2)


class CallbackReporter(Reporter):
    """
    Hands the universe to an arbitrary function between steps.

    The callback must not keep references to arrays it obtains; the
    universe accessors already return copies.
    """

    def __init__(self, callback: Callable[[Universe], Any], frequency: int = 1) -> None:
        self._callback = callback
        self._frequency = _check_frequency(frequency)

    @property
    def frequency(self) -> int:
        return self._frequency

    def report(self, universe: Universe) -> None:
        self._callback(universe)
