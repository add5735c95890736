"""Food placement logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from classic_snake.errors import BoardFullError

if TYPE_CHECKING:
    from classic_snake.grid import Grid
    from classic_snake.snake import Snake

logger = logging.getLogger(__name__)


class FoodSpawner:
    """Chooses food cells on a grid.

    Samples uniformly over the whole index space and rejects walls and snake
    cells. Once the snake covers ``fallback_occupancy`` of the interior, or
    after ``max_attempts`` rejections, it picks directly from the enumerated
    free cells so placement always terminates.
    """

    def __init__(
        self,
        grid: Grid,
        rng: np.random.Generator | None = None,
        max_attempts: int = 64,
        fallback_occupancy: float = 0.5,
    ) -> None:
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_attempts = max_attempts
        self.fallback_occupancy = fallback_occupancy

    def place(self, snake: Snake) -> int:
        """Return a cell that is neither wall nor snake.

        Raises :class:`BoardFullError` when no such cell exists.
        """
        occupancy = len(snake) / self.grid.interior_size
        if occupancy < self.fallback_occupancy:
            for _ in range(self.max_attempts):
                candidate = int(self.rng.integers(self.grid.size))
                if not self.grid.is_wall(candidate) and candidate not in snake:
                    return candidate
            logger.debug(
                "Rejection sampling gave up after %d attempts.",
                self.max_attempts,
            )
        return self._place_from_free_cells(snake)

    def _place_from_free_cells(self, snake: Snake) -> int:
        free = self.grid.free_cells(snake.body)
        if free.size == 0:
            raise BoardFullError("No free cell left for food.")
        return int(self.rng.choice(free))
