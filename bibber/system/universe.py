"""The simulated universe and its step transition."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ..forcefields import LennardJones
from ..integrators import (
    IsokineticThermostat,
    NoBarostat,
    PredictorIntegrator,
    instantaneous_temperature,
)
from ..units import Time, Vec3
from .boundary import Boundary, WrapMode
from .particle import Particle

if TYPE_CHECKING:
    from ..io.recipe import Recipe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UniverseConfig:
    """
    Immutable, validated run parameters.

    Attributes:
        dt: Fixed timestep.
        boundary: Periodic box.
        temperature: Thermostat target in Kelvin, or None to disable
            temperature control.
        potential: Pair interaction.
        start: Initial simulation clock.
    """

    dt: Time
    boundary: Boundary
    temperature: float | None = None
    potential: LennardJones = field(default_factory=LennardJones)
    start: Time = field(default_factory=Time.zero)

    def __post_init__(self) -> None:
        """Validate parameters."""
        if not self.dt.seconds > 0.0:
            raise ValueError(f"timestep must be positive, got {self.dt}")
        if self.temperature is not None:
            temperature = float(self.temperature)
            if not temperature >= 0.0:
                raise ValueError(f"temperature must be non-negative, got {temperature}")
            object.__setattr__(self, "temperature", temperature)

    @classmethod
    def from_recipe(
        cls,
        recipe: Recipe,
        potential: LennardJones | None = None,
        thermostat: bool = True,
        wrap_mode: WrapMode | None = None,
    ) -> UniverseConfig:
        """
        Build a configuration from a parsed recipe.

        Args:
            recipe: Parsed recipe.
            potential: Pair interaction; argon defaults when None.
            thermostat: Whether to enable the recipe temperature.
            wrap_mode: Boundary wrap policy; the Boundary default when None.

        Returns:
            New UniverseConfig.
        """
        boundary = (
            Boundary(recipe.boundary)
            if wrap_mode is None
            else Boundary(recipe.boundary, wrap_mode)
        )
        return cls(
            dt=recipe.timestep,
            boundary=boundary,
            temperature=recipe.temperature if thermostat else None,
            potential=potential if potential is not None else LennardJones(),
            start=recipe.start,
        )


class Universe:
    """
    Exclusive owner of the particle system and the simulation clock.

    Particle data are stored column-wise in float64 arrays. Accessors hand
    out copies, so callers never alias live state.

    Each call to step() runs, in order: predictor, force evaluation on a
    position snapshot, corrector (no-op), boundary wrap, thermostat,
    pressure control (no-op), divergence check. Stages produce new arrays
    that are committed only when every quantity is finite; a diverged step
    leaves the universe exactly as it was.

    Example usage:
        config = UniverseConfig(dt=Time.from_femtoseconds(1.0),
                                boundary=Boundary.cubic(1e-8))
        universe = Universe(config, particles)
        while universe.time < end and universe.step():
            ...
    """

    def __init__(self, config: UniverseConfig, particles: Iterable[Particle] = ()) -> None:
        """
        Initialize universe.

        Args:
            config: Validated run parameters.
            particles: Initial particles, attached once.
        """
        particles = list(particles)
        self._config = config
        self._integrator = PredictorIntegrator(config.dt)
        self._thermostat = (
            IsokineticThermostat(config.temperature)
            if config.temperature is not None
            else None
        )
        self._barostat = NoBarostat()

        self._time = config.start
        self._iteration = 0

        n = len(particles)
        self._positions = np.zeros((n, 3), dtype=np.float64)
        self._velocities = np.zeros((n, 3), dtype=np.float64)
        self._accelerations = np.zeros((n, 3), dtype=np.float64)
        self._masses = np.zeros(n, dtype=np.float64)
        for index, particle in enumerate(particles):
            self._positions[index] = particle.pos.to_array()
            self._velocities[index] = particle.vel.to_array()
            self._accelerations[index] = particle.acc.to_array()
            self._masses[index] = particle.mass

        logger.debug(
            "Universe created: %d particles, dt=%g s, box=%s",
            n,
            config.dt.seconds,
            config.boundary.extents,
        )

    @property
    def config(self) -> UniverseConfig:
        return self._config

    @property
    def time(self) -> Time:
        """Return current simulation time."""
        return self._time

    @property
    def iteration(self) -> int:
        """Return number of successful steps."""
        return self._iteration

    @property
    def dt(self) -> Time:
        return self._config.dt

    @property
    def boundary(self) -> Boundary:
        return self._config.boundary

    @property
    def temperature(self) -> float | None:
        """Return thermostat target in Kelvin (None when disabled)."""
        return self._config.temperature

    @property
    def potential(self) -> LennardJones:
        return self._config.potential

    @property
    def n_particles(self) -> int:
        return len(self._masses)

    @property
    def positions(self) -> NDArray[np.floating]:
        """Return a copy of positions, shape (N, 3)."""
        return self._positions.copy()

    @property
    def velocities(self) -> NDArray[np.floating]:
        """Return a copy of velocities, shape (N, 3)."""
        return self._velocities.copy()

    @property
    def accelerations(self) -> NDArray[np.floating]:
        """Return a copy of accelerations, shape (N, 3)."""
        return self._accelerations.copy()

    @property
    def masses(self) -> NDArray[np.floating]:
        """Return a copy of masses, shape (N,)."""
        return self._masses.copy()

    @property
    def particles(self) -> tuple[Particle, ...]:
        """Return a snapshot of all particles."""
        return tuple(
            Particle(
                pos=Vec3.from_array(self._positions[i]),
                vel=Vec3.from_array(self._velocities[i]),
                acc=Vec3.from_array(self._accelerations[i]),
                mass=self._masses[i],
            )
            for i in range(self.n_particles)
        )

    @property
    def kinetic_energy(self) -> float:
        """Compute total kinetic energy: sum(0.5 * m * v^2)."""
        return float(0.5 * np.sum(self._masses[:, np.newaxis] * self._velocities**2))

    @property
    def momentum(self) -> NDArray[np.floating]:
        """Compute total linear momentum."""
        return np.sum(self._masses[:, np.newaxis] * self._velocities, axis=0)

    @property
    def measured_temperature(self) -> float:
        """Mean per-particle temperature implied by the velocities (K)."""
        return instantaneous_temperature(self._velocities, self._masses)

    @property
    def potential_energy(self) -> float:
        """Lennard-Jones energy of the current configuration (J)."""
        _, energy = self.potential.compute_with_energy(self._positions, self.boundary)
        return energy

    def step(self) -> bool:
        """
        Apply one time step.

        Returns:
            True if the state advanced and remains finite. False if the step
            diverged; time, iteration and all particle data are then left at
            their previous values and the caller should stop.

        Raises:
            ZeroVelocityError: If the thermostat meets a particle at rest.
                State is left unchanged.
        """
        with np.errstate(all="ignore"):
            # Predictor stage
            positions, velocities = self._integrator.predict(
                self._positions, self._velocities, self._accelerations
            )

            # Forces from a snapshot taken before any further mutation; F = -dV/dr
            snapshot = positions.copy()
            forces = self.potential.compute(snapshot, self.boundary)
            accelerations = forces / self._masses[:, np.newaxis]

            # Corrector stage
            positions, velocities = self._integrator.correct(
                positions, velocities, accelerations
            )

            positions = self.boundary.wrap(positions)

            if self._thermostat is not None:
                velocities = self._thermostat.apply(velocities, self._masses)

            positions = self._barostat.apply(positions)

            temperature = instantaneous_temperature(velocities, self._masses)

        if not self._is_valid(positions, velocities, accelerations, temperature):
            logger.warning(
                "Step %d diverged at t=%g ps (measured temperature %s K); "
                "state kept at last valid step",
                self._iteration + 1,
                self._time.picoseconds,
                temperature,
            )
            return False

        self._positions = positions
        self._velocities = velocities
        self._accelerations = accelerations
        self._time = self._time + self._config.dt
        self._iteration += 1
        logger.debug(
            "Step %d: t=%g ps, T=%g K", self._iteration, self._time.picoseconds, temperature
        )
        return True

    def steps(self, n: int) -> int:
        """
        Apply up to ``n`` steps, stopping at the first divergence.

        Returns:
            Number of successful steps.
        """
        for done in range(n):
            if not self.step():
                return done
        return n

    @staticmethod
    def _is_valid(
        positions: NDArray[np.floating],
        velocities: NDArray[np.floating],
        accelerations: NDArray[np.floating],
        temperature: float,
    ) -> bool:
        if np.isnan(temperature):
            return False
        return bool(
            np.all(np.isfinite(positions))
            and np.all(np.isfinite(velocities))
            and np.all(np.isfinite(accelerations))
        )
