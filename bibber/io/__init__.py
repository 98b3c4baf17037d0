"""Recipe input and trajectory output."""

from .base import TrajectoryWriter
from .gro import GroWriter, format_frame, format_trajectory
from .recipe import Recipe, load_recipe, parse_recipe
from .trajectory import Frame, Trajectory

__all__ = [
    "TrajectoryWriter",
    "GroWriter",
    "format_frame",
    "format_trajectory",
    "Recipe",
    "load_recipe",
    "parse_recipe",
    "Frame",
    "Trajectory",
]
