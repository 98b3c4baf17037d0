#!/usr/bin/env python
"""
Quick start example - run a recipe and look at the result.

Usage:
    python examples/quickstart.py
"""

from pathlib import Path

from bibber import GroWriter, load_recipe, run_recipe
from bibber.logging_config import setup_logging
from bibber.plotting import frame_temperatures

HERE = Path(__file__).parent


def main():
    setup_logging()

    recipe = load_recipe(HERE / "argon.recipe")
    print("=" * 60)
    print(f"{recipe.title}: {recipe.particles} particles, {recipe.n_timesteps} steps")
    print("=" * 60)

    result = run_recipe(recipe, seed=42)

    print(f"   Completed:       {result.completed}")
    print(f"   Steps:           {result.steps}")
    print(f"   Frames:          {result.trajectory.n_frames}")
    print(f"   Wall time:       {result.wall_time:.2f} s")
    print(f"   Final T:         {result.universe.measured_temperature:.2f} K")
    print(f"   Mean frame T:    {frame_temperatures(result.trajectory)[1:].mean():.2f} K")

    with GroWriter(HERE / "argon.gro") as writer:
        writer.write_trajectory(result.trajectory)
    print(f"\nTrajectory written to {HERE / 'argon.gro'}")


if __name__ == "__main__":
    main()
