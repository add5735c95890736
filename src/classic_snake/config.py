"""Game and server configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from classic_snake.errors import ConfigurationError
from classic_snake.grid import MAX_SIZE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    """Tunable settings shared by the engine, server and CLI.

    Supports JSON serialization so a setup can be reproduced.
    """

    # Board
    columns: int = 20
    initial_length: int = 3

    # Food placement
    max_food_attempts: int = 64
    food_fallback_occupancy: float = 0.5

    # Driver
    tick_rate_ms: int = 150

    # Server
    max_sessions: int = 100

    seed: int | None = None

    def __post_init__(self) -> None:
        if not 3 <= self.columns <= MAX_SIZE:
            raise ConfigurationError(
                f"columns must be between 3 and {MAX_SIZE}."
            )
        if self.initial_length < 1:
            raise ConfigurationError("initial_length must be at least 1.")
        if self.max_food_attempts < 0:
            raise ConfigurationError("max_food_attempts must be >= 0.")
        if not 0.0 <= self.food_fallback_occupancy <= 1.0:
            raise ConfigurationError(
                "food_fallback_occupancy must be between 0 and 1."
            )
        if self.tick_rate_ms < 1:
            raise ConfigurationError("tick_rate_ms must be positive.")
        if self.max_sessions < 1:
            raise ConfigurationError("max_sessions must be at least 1.")

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Config in {path} must be a JSON object.")
        unknown = set(raw) - {f.name for f in fields(cls)}
        if unknown:
            raise ConfigurationError(
                f"Unknown config keys in {path}: {sorted(unknown)}."
            )
        try:
            return cls(**raw)
        except TypeError as exc:
            raise ConfigurationError(f"Invalid config in {path}: {exc}") from exc
