"""Tests for the command-line entry point."""

import logging

import pytest

from bibber import cli
from bibber.engines import Simulation, TrajectoryReporter
from bibber.system import Boundary, Particle, Universe, UniverseConfig
from bibber.units import Time, Vec3

RECIPE = """\
title cli run
start 0:fs
end 20:fs
timestep 2:fs
snapshot 10:fs
temperature 120:K
particles 3
boundary cubic 10:nm 10:nm 10:nm
"""


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by main() so later tests log normally."""
    yield
    logger = logging.getLogger("bibber")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def recipe_file(tmp_path):
    path = tmp_path / "gas.recipe"
    path.write_text(RECIPE, encoding="utf-8")
    return path


class TestMain:
    """Test main() exit codes and output."""

    def test_writes_gro_file(self, recipe_file, tmp_path):
        output = tmp_path / "out.gro"
        status = cli.main(
            [str(recipe_file), "-o", str(output), "--seed", "1", "--min-separation", "1e-9"]
        )
        assert status == cli.EXIT_OK

        lines = output.read_text(encoding="utf-8").splitlines()
        headers = [line for line in lines if line.startswith("cli run, t=")]
        assert headers == [
            "cli run, t= 0.00000",
            "cli run, t= 0.01000",
            "cli run, t= 0.02000",
        ]
        # header + count + 3 atoms + box per frame
        assert len(lines) == 3 * 6

    def test_writes_stdout(self, recipe_file, capsys):
        status = cli.main([str(recipe_file), "--seed", "2", "--min-separation", "1e-9"])
        assert status == cli.EXIT_OK
        captured = capsys.readouterr()
        assert captured.out.startswith("cli run, t= 0.00000\n3\n")

    def test_missing_recipe(self, tmp_path):
        assert cli.main([str(tmp_path / "missing.recipe")]) == cli.EXIT_BAD_INPUT

    def test_malformed_recipe(self, tmp_path):
        path = tmp_path / "bad.recipe"
        path.write_text(RECIPE.replace("120:K", "120:kelvin"), encoding="utf-8")
        assert cli.main([str(path)]) == cli.EXIT_BAD_INPUT

    def test_unseedable_recipe(self, recipe_file):
        status = cli.main([str(recipe_file), "--min-separation", "1"])
        assert status == cli.EXIT_BAD_INPUT

    def test_diverged_run_still_written(self, recipe_file, tmp_path, monkeypatch):
        def diverging_run(recipe, **kwargs):
            config = UniverseConfig(
                dt=recipe.timestep, boundary=Boundary(recipe.boundary), temperature=None
            )
            universe = Universe(
                config, [Particle(pos=Vec3.zero()) for _ in range(recipe.particles)]
            )
            simulation = Simulation(universe, [TrajectoryReporter(recipe.title, 1)])
            return simulation.run(until=recipe.end)

        monkeypatch.setattr(cli, "run_recipe", diverging_run)
        output = tmp_path / "partial.gro"
        status = cli.main([str(recipe_file), "-o", str(output)])

        assert status == cli.EXIT_DIVERGED
        assert output.read_text(encoding="utf-8").startswith("cli run, t= 0.00000\n")

    def test_zero_progress_interval_is_bad_input(self, recipe_file, tmp_path):
        output = tmp_path / "out.gro"
        with pytest.raises(SystemExit) as excinfo:
            cli.main(
                [str(recipe_file), "-o", str(output), "--seed", "1", "--progress-every", "0"]
            )
        assert excinfo.value.code == cli.EXIT_BAD_INPUT
        assert not output.exists()

    def test_log_file(self, recipe_file, tmp_path):
        log_file = tmp_path / "run.log"
        cli.main(
            [
                str(recipe_file),
                "-o",
                str(tmp_path / "out.gro"),
                "--min-separation",
                "1e-9",
                "--log-file",
                str(log_file),
            ]
        )
        assert "Seeded 3 particles" in log_file.read_text(encoding="utf-8")


class TestParser:
    """Test argument parsing."""

    def test_defaults(self):
        args = cli.build_parser().parse_args(["run.recipe"])
        assert args.output is None
        assert args.wrap == "centered"
        assert not args.no_thermostat

    @pytest.mark.parametrize("value", ["0", "-5", "often"])
    def test_rejects_bad_progress_interval(self, value):
        with pytest.raises(SystemExit) as excinfo:
            cli.build_parser().parse_args(["run.recipe", "--progress-every", value])
        assert excinfo.value.code == 2

    def test_progress_interval(self):
        args = cli.build_parser().parse_args(["run.recipe", "--progress-every", "7"])
        assert args.progress_every == 7

    def test_rejects_unknown_wrap(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["run.recipe", "--wrap", "bounce"])
