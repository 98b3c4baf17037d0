"""Tests for the universe and its step transition."""

import numpy as np
import pytest

from bibber.errors import ZeroVelocityError
from bibber.io import parse_recipe
from bibber.system import Boundary, Particle, Universe, UniverseConfig, WrapMode
from bibber.units import BOLTZMANN, Time, Vec3

PAIR_MASS = 1e-24


def _single(position, velocity, temperature=None, length=1e-8):
    config = UniverseConfig(
        dt=Time.from_femtoseconds(1.0),
        boundary=Boundary.cubic(length),
        temperature=temperature,
    )
    return Universe(config, [Particle(pos=position, vel=velocity, mass=PAIR_MASS)])


class TestUniverseConfig:
    """Test configuration validation."""

    def test_defaults(self):
        config = UniverseConfig(dt=Time.from_femtoseconds(1.0), boundary=Boundary.cubic(1e-8))
        assert config.temperature is None
        assert config.start == Time.zero()

    @pytest.mark.parametrize("seconds", [0.0, -1e-15])
    def test_rejects_non_positive_timestep(self, seconds):
        with pytest.raises(ValueError):
            UniverseConfig(dt=Time(seconds), boundary=Boundary.cubic(1e-8))

    def test_rejects_negative_temperature(self):
        with pytest.raises(ValueError):
            UniverseConfig(
                dt=Time.from_femtoseconds(1.0),
                boundary=Boundary.cubic(1e-8),
                temperature=-5.0,
            )

    def test_from_recipe(self):
        recipe = parse_recipe(
            "title t\nstart 1:ps\nend 2:ps\ntimestep 2:fs\nsnapshot 10:fs\n"
            "temperature 120:K\nparticles 3\nboundary cubic 10:nm 10:nm 10:nm\n"
        )
        config = UniverseConfig.from_recipe(recipe)
        assert config.dt == Time.from_femtoseconds(2.0)
        assert config.temperature == 120.0
        assert config.start == Time.from_picoseconds(1.0)
        assert np.allclose(config.boundary.lengths, 1e-8)
        assert config.boundary.wrap_mode is WrapMode.CENTERED

        unthermostatted = UniverseConfig.from_recipe(
            recipe, thermostat=False, wrap_mode=WrapMode.REMAINDER
        )
        assert unthermostatted.temperature is None
        assert unthermostatted.boundary.wrap_mode is WrapMode.REMAINDER


class TestUniverseState:
    """Test construction and accessors."""

    def test_initial_state(self, repulsive_pair):
        assert repulsive_pair.n_particles == 2
        assert repulsive_pair.time == Time.zero()
        assert repulsive_pair.iteration == 0
        assert np.allclose(repulsive_pair.positions[1], [5e-10, 0.0, 0.0])
        assert np.array_equal(repulsive_pair.masses, [PAIR_MASS, PAIR_MASS])

    def test_accessors_return_copies(self, repulsive_pair):
        positions = repulsive_pair.positions
        positions[:] = 1.0
        velocities = repulsive_pair.velocities
        velocities[:] = 1.0
        assert repulsive_pair.positions[0, 0] == 0.0
        assert np.array_equal(repulsive_pair.velocities, np.zeros((2, 3)))

    def test_particles_snapshot(self, repulsive_pair):
        particles = repulsive_pair.particles
        assert len(particles) == 2
        assert particles[1].pos == Vec3(5e-10, 0.0, 0.0)
        assert particles[1].mass == PAIR_MASS

    def test_empty_universe_steps(self):
        config = UniverseConfig(
            dt=Time.from_femtoseconds(1.0), boundary=Boundary.cubic(1e-8), temperature=100.0
        )
        universe = Universe(config)
        assert universe.step()
        assert universe.iteration == 1
        assert universe.measured_temperature == 0.0


class TestStep:
    """Test the step transition."""

    def test_advances_clock(self, repulsive_pair):
        assert repulsive_pair.step()
        assert repulsive_pair.iteration == 1
        assert repulsive_pair.time == Time.from_femtoseconds(1.0)

    def test_first_step_uses_initial_acceleration(self, repulsive_pair):
        """At rest with zero acceleration the first step moves nothing."""
        before = repulsive_pair.positions
        repulsive_pair.step()
        assert np.array_equal(repulsive_pair.positions, before)
        # Forces computed on the way push the pair apart
        accelerations = repulsive_pair.accelerations
        assert accelerations[0, 0] < 0
        assert accelerations[1, 0] > 0

    def test_repulsive_pair_separates(self, repulsive_pair):
        separation = 5e-10
        for _ in range(5):
            assert repulsive_pair.step()
            positions = repulsive_pair.positions
            new_separation = positions[1, 0] - positions[0, 0]
            assert new_separation >= separation
            separation = new_separation
        assert separation > 5e-10

    def test_pair_conserves_momentum(self):
        config = UniverseConfig(
            dt=Time.from_femtoseconds(1.0), boundary=Boundary.cubic(1e-6), temperature=None
        )
        universe = Universe(
            config,
            [
                Particle(pos=Vec3(-2e-10, 0.0, 0.0), mass=6.6e-26),
                Particle(pos=Vec3(2e-10, 0.0, 0.0), mass=6.6e-26),
            ],
        )
        for _ in range(20):
            assert universe.step()
        momentum = universe.momentum
        scale = 6.6e-26 * np.max(np.abs(universe.velocities))
        assert scale > 0
        assert np.all(np.abs(momentum) <= 1e-12 * scale)

    def test_thermostat_sets_speeds(self, gas_config, gas_particles):
        universe = Universe(gas_config, gas_particles)
        assert universe.step()
        speeds = np.linalg.norm(universe.velocities, axis=1)
        expected = np.sqrt(3 * BOLTZMANN * 120.0 / universe.masses)
        assert np.allclose(speeds, expected, rtol=1e-12)
        assert universe.measured_temperature == pytest.approx(120.0)

    def test_positions_stay_in_box(self, gas_config, gas_particles):
        universe = Universe(gas_config, gas_particles)
        assert universe.steps(50) == 50
        half = universe.boundary.half_lengths
        assert np.all(np.abs(universe.positions) <= half)

    def test_wraps_across_face(self):
        universe = _single(Vec3(4.99e-9, 0.0, 0.0), Vec3(1e5, 0.0, 0.0))
        assert universe.step()
        # 4.99 nm + 0.1 nm leaves through +x and re-enters at -x
        assert universe.positions[0, 0] == pytest.approx(-4.91e-9)
        assert universe.velocities[0, 0] == 1e5

    def test_steps_counts(self, repulsive_pair):
        assert repulsive_pair.steps(4) == 4
        assert repulsive_pair.iteration == 4
        assert repulsive_pair.time == Time.from_femtoseconds(4.0)


class TestDivergence:
    """Test that diverged steps leave the state untouched."""

    def _coincident(self):
        config = UniverseConfig(
            dt=Time.from_femtoseconds(1.0), boundary=Boundary.cubic(1e-8), temperature=None
        )
        return Universe(
            config,
            [
                Particle(pos=Vec3(1e-9, 1e-9, 1e-9), mass=PAIR_MASS),
                Particle(pos=Vec3(1e-9, 1e-9, 1e-9), mass=PAIR_MASS),
            ],
        )

    def test_coincident_particles_diverge(self):
        universe = self._coincident()
        before = universe.positions
        assert universe.step() is False
        assert universe.time == Time.zero()
        assert universe.iteration == 0
        assert np.array_equal(universe.positions, before)
        assert np.array_equal(universe.accelerations, np.zeros((2, 3)))

    def test_divergence_is_logged(self, caplog):
        universe = self._coincident()
        with caplog.at_level("WARNING", logger="bibber"):
            universe.step()
        assert "diverged" in caplog.text

    def test_steps_stops_at_divergence(self):
        assert self._coincident().steps(10) == 0

    def test_nonfinite_velocity_diverges(self):
        universe = _single(Vec3(0.0, 0.0, 0.0), Vec3(np.inf, 0.0, 0.0))
        assert universe.step() is False
        assert universe.iteration == 0

    def test_particle_at_rest_under_thermostat(self):
        universe = _single(Vec3(0.0, 0.0, 0.0), Vec3.zero(), temperature=100.0)
        with pytest.raises(ZeroVelocityError):
            universe.step()
        assert universe.iteration == 0
        assert universe.time == Time.zero()


class TestEnergies:
    """Test derived energy measures."""

    def test_kinetic_energy(self):
        universe = _single(Vec3.zero(), Vec3(3.0, 4.0, 0.0))
        assert universe.kinetic_energy == pytest.approx(0.5 * PAIR_MASS * 25.0)

    def test_potential_energy_of_repulsive_pair(self, repulsive_pair):
        assert repulsive_pair.potential_energy > 0.0
