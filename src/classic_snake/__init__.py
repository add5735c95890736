"""Classic Snake — core game engine."""

from classic_snake.config import GameConfig
from classic_snake.engine import EngineState, GameEngine, GameStatus, TickResult
from classic_snake.errors import (
    BoardFullError,
    ConfigurationError,
    SessionLimitError,
)
from classic_snake.grid import CellType, Grid
from classic_snake.snake import Direction, Snake

__all__ = [
    "BoardFullError",
    "CellType",
    "ConfigurationError",
    "Direction",
    "EngineState",
    "GameConfig",
    "GameEngine",
    "GameStatus",
    "Grid",
    "SessionLimitError",
    "Snake",
    "TickResult",
]
