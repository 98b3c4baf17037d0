"""Tests for the simulation driver and reporters."""

import logging

import numpy as np
import pytest

from bibber.engines import (
    CallbackReporter,
    ProgressReporter,
    Simulation,
    TemperatureReporter,
    TrajectoryReporter,
    run_recipe,
)
from bibber.io import parse_recipe
from bibber.system import Boundary, Particle, Universe, UniverseConfig
from bibber.units import Time, Vec3


def _coincident_universe():
    config = UniverseConfig(
        dt=Time.from_femtoseconds(1.0), boundary=Boundary.cubic(1e-8), temperature=None
    )
    return Universe(
        config,
        [Particle(pos=Vec3(1e-9, 0.0, 0.0)), Particle(pos=Vec3(1e-9, 0.0, 0.0))],
    )


class FakeClock:
    """Wall clock advancing one second per call."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        self.now += 1.0
        return self.now


class TestSimulation:
    """Test the driver loop."""

    def test_runs_to_end_time(self, repulsive_pair):
        simulation = Simulation(repulsive_pair, [TrajectoryReporter("pair", frequency=5)])
        result = simulation.run(until=Time.from_femtoseconds(10.0))

        assert result.completed
        assert result.steps == 10
        assert repulsive_pair.iteration == 10
        assert result.trajectory is not None
        assert [frame.iteration for frame in result.trajectory] == [0, 5, 10]
        assert result.wall_time >= 0.0

    def test_frames_in_time_order(self, repulsive_pair):
        simulation = Simulation(repulsive_pair, [TrajectoryReporter("pair", frequency=1)])
        result = simulation.run(until=Time.from_femtoseconds(4.0))
        times = result.trajectory.times
        assert len(times) == 5
        assert np.all(np.diff(times) > 0)

    def test_already_past_end(self, repulsive_pair):
        result = Simulation(repulsive_pair).run(until=Time.zero())
        assert result.completed
        assert result.steps == 0
        assert result.trajectory is None

    def test_max_steps(self, repulsive_pair):
        result = Simulation(repulsive_pair).run(
            until=Time.from_picoseconds(1.0), max_steps=3
        )
        assert result.steps == 3
        assert repulsive_pair.iteration == 3

    def test_resumes_from_current_time(self, repulsive_pair):
        simulation = Simulation(repulsive_pair)
        simulation.run(until=Time.from_femtoseconds(3.0))
        result = simulation.run(until=Time.from_femtoseconds(5.0))
        assert result.steps == 2
        assert repulsive_pair.iteration == 5

    def test_divergence_stops_run(self, caplog):
        universe = _coincident_universe()
        reporter = TrajectoryReporter("bad", frequency=1)
        with caplog.at_level(logging.WARNING, logger="bibber"):
            result = Simulation(universe, [reporter]).run(until=Time.from_femtoseconds(10.0))

        assert not result.completed
        assert result.steps == 0
        assert universe.iteration == 0
        # Initial frame survives
        assert result.trajectory.n_frames == 1
        assert "stopped early" in caplog.text

    def test_add_and_remove_reporter(self, repulsive_pair):
        calls = []
        reporter = CallbackReporter(lambda universe: calls.append(universe.iteration))
        simulation = Simulation(repulsive_pair)
        simulation.add_reporter(reporter)
        simulation.run(until=Time.from_femtoseconds(3.0))
        simulation.remove_reporter(reporter)
        simulation.run(until=Time.from_femtoseconds(5.0))
        assert calls == [1, 2, 3]


class TestReporters:
    """Test individual reporters."""

    def test_trajectory_reporter_requires_initialize(self):
        with pytest.raises(RuntimeError):
            TrajectoryReporter("x").trajectory

    @pytest.mark.parametrize(
        "make",
        [
            lambda f: TrajectoryReporter("x", frequency=f),
            lambda f: ProgressReporter(until=Time.from_femtoseconds(1.0), frequency=f),
            lambda f: TemperatureReporter(frequency=f),
            lambda f: CallbackReporter(print, frequency=f),
        ],
    )
    @pytest.mark.parametrize("frequency", [0, -3])
    def test_rejects_non_positive_frequency(self, make, frequency):
        with pytest.raises(ValueError):
            make(frequency)

    def test_should_report(self):
        reporter = TrajectoryReporter("x", frequency=3)
        assert reporter.should_report(0)
        assert not reporter.should_report(1)
        assert reporter.should_report(6)

    def test_temperature_reporter(self, gas_config, gas_particles):
        universe = Universe(gas_config, gas_particles)
        reporter = TemperatureReporter(frequency=2)
        Simulation(universe, [reporter]).run(until=Time.from_femtoseconds(8.0))
        assert len(reporter.times) == 2
        assert np.allclose(reporter.temperatures, 120.0)
        assert np.all(reporter.kinetic_energy > 0.0)

    def test_progress_estimate(self, repulsive_pair):
        clock = FakeClock()
        reporter = ProgressReporter(
            until=Time.from_femtoseconds(10.0), frequency=1, clock=clock
        )
        reporter.initialize(repulsive_pair)
        assert np.isnan(reporter.estimate_remaining(repulsive_pair))

        repulsive_pair.steps(2)
        # One clock tick over two steps, eight steps to go
        assert reporter.estimate_remaining(repulsive_pair) == pytest.approx(4.0)

    def test_progress_logs(self, repulsive_pair, caplog):
        reporter = ProgressReporter(until=Time.from_femtoseconds(2.0), frequency=1)
        with caplog.at_level(logging.INFO, logger="bibber"):
            Simulation(repulsive_pair, [reporter]).run(until=Time.from_femtoseconds(2.0))
        assert "est. rem. wall time" in caplog.text
        assert reporter.last_estimate is not None


class TestRunRecipe:
    """Test running straight from a recipe."""

    RECIPE = """\
title gas
start 0:fs
end 20:fs
timestep 2:fs
snapshot 10:fs
temperature 120:K
particles 4
boundary cubic 10:nm 10:nm 10:nm
"""

    def test_seeded_run(self):
        recipe = parse_recipe(self.RECIPE)
        result = run_recipe(recipe, min_separation=1e-9, seed=3)
        assert result.completed
        assert result.steps == 10
        assert result.trajectory.title == "gas"
        assert result.trajectory.n_particles == 4
        assert result.trajectory.n_frames == 3
        assert result.universe.measured_temperature == pytest.approx(120.0)

    def test_explicit_particles(self, gas_particles):
        recipe = parse_recipe(self.RECIPE)
        result = run_recipe(recipe, particles=gas_particles, thermostat=False)
        assert result.trajectory.n_particles == 8
        assert result.universe.temperature is None
