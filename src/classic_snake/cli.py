"""Command-line launcher for Classic Snake."""

from __future__ import annotations

import argparse
import logging
import sys
from collections import Counter
from dataclasses import dataclass, field, replace

import numpy as np

from classic_snake.config import GameConfig
from classic_snake.engine import GameEngine, GameStatus
from classic_snake.snake import Direction

logger = logging.getLogger(__name__)

_TURNS = [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT]


@dataclass
class SimulationResult:
    """Aggregate outcome of a batch of headless games."""

    scores: list[int] = field(default_factory=list)
    outcomes: Counter = field(default_factory=Counter)
    high_score: int = 0

    def summary(self) -> str:
        mean = float(np.mean(self.scores)) if self.scores else 0.0
        outcomes = ", ".join(
            f"{status}={count}" for status, count in sorted(self.outcomes.items())
        )
        return (
            f"games={len(self.scores)} high_score={self.high_score} "
            f"mean_score={mean:.2f} outcomes[{outcomes}]"
        )


def simulate(
    games: int,
    width: int,
    height: int,
    max_ticks: int = 1_000,
    turn_probability: float = 0.2,
    config: GameConfig | None = None,
    seed: int | None = None,
) -> SimulationResult:
    """Play *games* headless games with a random-turn policy.

    Games still running after *max_ticks* are counted as ``timeout``.
    """
    engine = GameEngine(config, seed=seed)
    policy_rng = np.random.default_rng(seed)
    result = SimulationResult()

    for _ in range(games):
        engine.start(width, height)
        for _ in range(max_ticks):
            if engine.status != GameStatus.PLAYING:
                break
            if policy_rng.random() < turn_probability:
                engine.set_direction(_TURNS[policy_rng.integers(len(_TURNS))])
            engine.tick()

        outcome = (
            engine.status.value
            if engine.status != GameStatus.PLAYING else "timeout"
        )
        result.scores.append(engine.score)
        result.outcomes[outcome] += 1

    result.high_score = engine.high_score
    return result


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="classic-snake",
        description="Classic Snake game server and headless simulator.",
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- serve ---
    serve_p = sub.add_parser("serve", help="Run the game server.")
    serve_p.add_argument("--host", type=str, default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=8000)
    serve_p.add_argument("--tick-rate-ms", type=int, default=None)
    serve_p.add_argument("--columns", type=int, default=None)

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play headless games with a random policy.",
    )
    sim_p.add_argument("--games", type=int, default=10)
    sim_p.add_argument("--width", type=int, default=20)
    sim_p.add_argument("--height", type=int, default=20)
    sim_p.add_argument("--max-ticks", type=int, default=1_000)
    sim_p.add_argument("--seed", type=int, default=None)

    return parser


def _load_config(args: argparse.Namespace) -> GameConfig:
    config = GameConfig.load(args.config) if args.config else GameConfig()

    overrides: dict = {}
    for name in ("tick_rate_ms", "columns", "seed"):
        val = getattr(args, name, None)
        if val is not None:
            overrides[name] = val
    if overrides:
        config = replace(config, **overrides)
    return config


def _run_serve(args: argparse.Namespace, config: GameConfig) -> int:
    import uvicorn

    from classic_snake.server.app import create_app

    logger.info("Serving on %s:%d.", args.host, args.port)
    uvicorn.run(create_app(config), host=args.host, port=args.port)
    return 0


def _run_simulate(args: argparse.Namespace, config: GameConfig) -> int:
    result = simulate(
        games=args.games,
        width=args.width,
        height=args.height,
        max_ticks=args.max_ticks,
        config=config,
        seed=config.seed,
    )
    print(result.summary())  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``classic-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    config = _load_config(args)
    handlers = {
        "serve": _run_serve,
        "simulate": _run_simulate,
    }
    return handlers[args.command](args, config)


if __name__ == "__main__":
    sys.exit(main())
