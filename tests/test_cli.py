"""Tests for the command-line entry point."""

import pytest

import universe_hopper.__main__ as cli
from universe_hopper.errors import LevelConfigError


class FakeEngine:
    instances = []

    def __init__(self, config, debug_level=None):
        self.config = config
        self.debug_level = debug_level
        self.fatal_error = None
        self.ran = False
        FakeEngine.instances.append(self)

    def run(self):
        self.ran = True


@pytest.fixture
def fake_engine(monkeypatch):
    FakeEngine.instances = []
    monkeypatch.setattr(cli, "HopperEngine", FakeEngine)
    return FakeEngine


class TestConfigFromArgs:
    def test_defaults(self):
        config = cli.config_from_args(cli.build_parser().parse_args([]))
        assert config.levels.levels_path == "data/levels.json"
        assert config.levels.selection_policy == "carousel"

    def test_overrides(self):
        args = cli.build_parser().parse_args([
            "--preset", "dramatic", "--levels", "worlds.json",
            "--asset-root", "game", "--policy", "random",
        ])
        config = cli.config_from_args(args)
        assert config.parallax.background_zoom == 1.15
        assert config.levels.levels_path == "worlds.json"
        assert config.levels.asset_root == "game"
        assert config.levels.selection_policy == "random"

    def test_presets_are_not_mutated(self):
        args = cli.build_parser().parse_args(["--levels", "other.json"])
        cli.config_from_args(args)
        assert cli.CONFIGS["default"].levels.levels_path == "data/levels.json"

    def test_unknown_preset(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["--preset", "nope"])


class TestMain:
    def test_runs_engine(self, fake_engine):
        assert cli.main(["--preset", "subtle"]) == 0
        engine = fake_engine.instances[0]
        assert engine.ran
        assert engine.config.parallax.max_pan_px == 20
        assert engine.debug_level is None

    def test_debug_level_needs_debug_flag(self, fake_engine):
        cli.main(["--level", "2"])
        cli.main(["--debug", "--level", "2"])
        assert fake_engine.instances[0].debug_level is None
        assert fake_engine.instances[1].debug_level == "2"

    def test_fatal_exit_code(self, monkeypatch):
        class FailingEngine(FakeEngine):
            def run(self):
                self.fatal_error = LevelConfigError("missing")

        monkeypatch.setattr(cli, "HopperEngine", FailingEngine)
        assert cli.main([]) == 1


class TestAutoplay:
    def test_headless_walker(self, asset_root, capsys):
        code = cli.main([
            "--asset-root", str(asset_root), "--autoplay", "walker",
            "--steps", "50", "--headless", "--seed", "0",
        ])
        assert code == 0
        out = capsys.readouterr().out
        assert "Episode 1: 50 steps" in out
        assert "ended in beta" in out

    def test_debug_start_level(self, asset_root, capsys):
        cli.main([
            "--asset-root", str(asset_root), "--autoplay", "pacer", "--steps", "10",
            "--headless", "--debug", "--level", "3", "--episodes", "2",
        ])
        out = capsys.readouterr().out
        assert out.count("ended in gamma") == 2

    def test_startup_failure(self, tmp_path, fake_engine):
        code = cli.main(["--asset-root", str(tmp_path), "--autoplay", "random", "--headless"])
        assert code == 1
        assert fake_engine.instances == []
