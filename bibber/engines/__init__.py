"""Simulation driver and reporters."""

from .engine import Simulation, SimulationResult, run_recipe
from .reporters import (
    CallbackReporter,
    ProgressReporter,
    Reporter,
    ReporterGroup,
    TemperatureReporter,
    TrajectoryReporter,
)

__all__ = [
    "Simulation",
    "SimulationResult",
    "run_recipe",
    "Reporter",
    "ReporterGroup",
    "TrajectoryReporter",
    "ProgressReporter",
    "TemperatureReporter",
    "CallbackReporter",
]
