"""Integration stages: predictor, thermostat, pressure control."""

from .base import BarostatModifier, Integrator, ThermostatModifier
from .predictor import PredictorIntegrator
from .thermostats import (
    IsokineticThermostat,
    NoBarostat,
    instantaneous_temperature,
    particle_temperatures,
)

__all__ = [
    # Base classes
    "Integrator",
    "ThermostatModifier",
    "BarostatModifier",
    # Integrators
    "PredictorIntegrator",
    # Thermostats
    "IsokineticThermostat",
    "instantaneous_temperature",
    "particle_temperatures",
    # Barostats
    "NoBarostat",
]
