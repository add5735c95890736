"""Tests for the CLI launcher."""

from unittest.mock import patch

from classic_snake.cli import _build_parser, main, simulate
from classic_snake.config import GameConfig


class TestCLIParser:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_serve_defaults(self):
        args = _build_parser().parse_args(["serve"])
        assert args.command == "serve"
        assert args.host == "127.0.0.1"
        assert args.port == 8000
        assert args.tick_rate_ms is None

    def test_simulate_with_flags(self):
        args = _build_parser().parse_args([
            "simulate", "--games", "3", "--width", "12",
            "--height", "9", "--seed", "4",
        ])
        assert args.games == 3
        assert args.width == 12
        assert args.height == 9
        assert args.seed == 4


class TestSimulate:
    def test_all_games_counted(self):
        result = simulate(games=5, width=12, height=10, seed=1)
        assert len(result.scores) == 5
        assert sum(result.outcomes.values()) == 5
        assert result.high_score == max(result.scores)

    def test_timeout_when_ticks_run_out(self):
        result = simulate(
            games=2, width=21, height=21, max_ticks=1, seed=0,
        )
        assert result.outcomes["timeout"] == 2

    def test_summary_format(self):
        result = simulate(games=2, width=12, height=10, seed=3)
        assert result.summary().startswith("games=2 ")

    def test_simulate_command(self, capsys):
        assert main([
            "simulate", "--games", "2", "--width", "10",
            "--height", "10", "--seed", "0",
        ]) == 0
        assert "games=2" in capsys.readouterr().out

    def test_config_file_and_overrides(self, tmp_path):
        path = tmp_path / "cfg.json"
        GameConfig(columns=16, tick_rate_ms=80).save(path)
        with patch("uvicorn.run") as run, patch(
            "classic_snake.server.app.create_app",
        ) as create_app:
            assert main([
                "--config", str(path), "serve", "--tick-rate-ms", "120",
            ]) == 0
        run.assert_called_once()
        assert create_app.call_args.args[0] == GameConfig(
            columns=16, tick_rate_ms=120,
        )
