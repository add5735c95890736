"""Step-based game engine composing grid, snake, and food logic."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

import numpy as np

from classic_snake.config import GameConfig
from classic_snake.errors import BoardFullError
from classic_snake.food import FoodSpawner
from classic_snake.grid import CellType, Grid
from classic_snake.snake import Direction, Snake

logger = logging.getLogger(__name__)


class GameStatus(str, enum.Enum):
    """Lifecycle states of the engine."""

    MENU = "menu"
    PLAYING = "playing"
    GAME_OVER = "game_over"
    WON = "won"


@dataclass
class EngineState:
    """Everything that belongs to one game and is discarded when it ends."""

    grid: Grid
    snake: Snake
    food_spawner: FoodSpawner
    food: int | None
    direction: Direction = Direction.RIGHT
    pending_direction: Direction | None = None
    score: int = 0
    tick: int = 0


@dataclass(frozen=True)
class TickResult:
    """Outcome of a single :meth:`GameEngine.tick` call."""

    new_head: int | None
    ate_food: bool
    status: GameStatus


class GameEngine:
    """Single-snake, step-based game engine.

    The engine starts in :attr:`GameStatus.MENU`. Each :meth:`start` builds a
    fresh :class:`EngineState`; :meth:`tick` advances it by one step. The
    high score survives across games for the lifetime of the engine.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        seed: int | None = None,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.rng = np.random.default_rng(
            seed if seed is not None else self.config.seed,
        )
        self.state: EngineState | None = None
        self._status = GameStatus.MENU
        self._high_score = 0

    # --- lifecycle ---

    def start(self, width: int, height: int) -> EngineState:
        """Begin a new game on a *width* x *height* grid."""
        grid = Grid(width=width, height=height)
        snake = Snake(self._initial_cells(grid))
        spawner = FoodSpawner(
            grid,
            rng=self.rng,
            max_attempts=self.config.max_food_attempts,
            fallback_occupancy=self.config.food_fallback_occupancy,
        )

        self._status = GameStatus.PLAYING
        try:
            food = spawner.place(snake)
        except BoardFullError:
            # The snake already fills the interior.
            food = None
            self._status = GameStatus.WON

        self.state = EngineState(
            grid=grid, snake=snake, food_spawner=spawner, food=food,
        )
        logger.info(
            "Game started on %dx%d grid, head at %d.",
            width, height, snake.head,
        )
        return self.state

    def _initial_cells(self, grid: Grid) -> list[int]:
        """Lay out the starting snake, moving right, with its head at center.

        The head is clamped into the interior of the center row when the
        run of cells would touch a wall.
        """
        length = min(self.config.initial_length, grid.width - 2)
        center = grid.size // 2
        row, col = grid.row_col(center)
        row = min(max(row, 1), grid.height - 2)
        col = min(max(col, length), grid.width - 2)
        head = grid.index(row, col)
        return list(range(head - length + 1, head + 1))

    # --- input ---

    def set_direction(self, direction: Direction) -> None:
        """Request a turn for the next tick.

        Reversals are ignored while the snake is longer than one cell. The
        last accepted request before a tick wins.
        """
        if self._status != GameStatus.PLAYING or self.state is None:
            return
        state = self.state
        if direction == state.direction.opposite and len(state.snake) > 1:
            return
        state.pending_direction = direction

    # --- simulation ---

    def tick(self) -> TickResult:
        """Advance the game by one step."""
        if self._status != GameStatus.PLAYING or self.state is None:
            return TickResult(new_head=None, ate_food=False, status=self._status)

        state = self.state
        if state.pending_direction is not None:
            state.direction = state.pending_direction
            state.pending_direction = None

        new_head = state.snake.head + state.direction.offset(state.grid.width)
        state.tick += 1

        if state.grid.is_wall(new_head) or new_head in state.snake:
            self._finish(GameStatus.GAME_OVER)
            return TickResult(new_head=None, ate_food=False, status=self._status)

        ate_food = new_head == state.food
        state.snake.advance(new_head, grow=ate_food)
        if ate_food:
            state.score += 1
            try:
                state.food = state.food_spawner.place(state.snake)
            except BoardFullError:
                state.food = None
                self._finish(GameStatus.WON)

        return TickResult(new_head=new_head, ate_food=ate_food, status=self._status)

    def _finish(self, status: GameStatus) -> None:
        """End the current game and fold its score into the high score."""
        assert self.state is not None  # noqa: S101
        self._status = status
        self._high_score = max(self._high_score, self.state.score)
        logger.info(
            "Game ended (%s) at tick %d with score %d.",
            status.value, self.state.tick, self.state.score,
        )

    # --- accessors ---

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def high_score(self) -> int:
        return self._high_score

    @property
    def score(self) -> int:
        return self.state.score if self.state is not None else 0

    @property
    def snake_cells(self) -> tuple[int, ...]:
        """Snake indices ordered tail to head."""
        return self.state.snake.cells() if self.state is not None else ()

    @property
    def food_cell(self) -> int | None:
        return self.state.food if self.state is not None else None

    @property
    def direction(self) -> Direction | None:
        return self.state.direction if self.state is not None else None

    def is_wall(self, index: int) -> bool:
        """Wall predicate for the current grid."""
        if self.state is None:
            raise RuntimeError("No game has been started.")
        return self.state.grid.is_wall(index)

    def render(self) -> np.ndarray:
        """Return a ``(height, width)`` array of :class:`CellType` codes."""
        if self.state is None:
            raise RuntimeError("No game has been started.")
        grid = self.state.grid
        cells = np.full(grid.size, CellType.EMPTY, dtype=np.int8)
        cells[grid.wall_mask().ravel()] = CellType.WALL
        if self.state.food is not None:
            cells[self.state.food] = CellType.FOOD
        body = self.state.snake.cells()
        cells[list(body)] = CellType.SNAKE
        cells[body[-1]] = CellType.HEAD
        return cells.reshape(grid.height, grid.width)

    def get_state(self) -> dict:
        """Return the full, serializable engine state."""
        result: dict = {
            "status": self._status.value,
            "high_score": self._high_score,
        }
        if self.state is None:
            return result
        result.update({
            "tick": self.state.tick,
            "score": self.state.score,
            "direction": self.state.direction.name.lower(),
            "grid": self.state.grid.to_dict(),
            "snake": self.state.snake.to_dict(),
            "food": self.food_cell,
            "cells": self.render().tolist(),
        })
        return result
