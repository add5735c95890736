"""Snake body and movement directions."""

from __future__ import annotations

import enum
from collections import deque


class Direction(enum.Enum):
    """Cardinal movement directions with (row_delta, col_delta) values."""

    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    def offset(self, width: int) -> int:
        """Index delta for one step on a grid *width* cells wide."""
        dr, dc = self.value
        return dr * width + dc


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Snake:
    """A snake stored as an ordered deque of cell indices.

    The tail is ``body[0]`` and the head is ``body[-1]``. A set mirrors the
    deque so occupancy checks are O(1).
    """

    def __init__(self, cells: list[int]) -> None:
        if not cells:
            raise ValueError("Snake length must be at least 1.")
        if len(set(cells)) != len(cells):
            raise ValueError("Snake cells must be distinct.")
        self.body: deque[int] = deque(cells)
        self._occupied: set[int] = set(cells)

    def __len__(self) -> int:
        return len(self.body)

    def __contains__(self, index: int) -> bool:
        return index in self._occupied

    @property
    def head(self) -> int:
        return self.body[-1]

    @property
    def tail(self) -> int:
        return self.body[0]

    def advance(self, new_head: int, grow: bool = False) -> int | None:
        """Move the head onto *new_head*.

        Returns the vacated tail cell, or ``None`` if the snake grew.
        """
        self.body.append(new_head)
        self._occupied.add(new_head)
        if grow:
            return None
        vacated = self.body.popleft()
        self._occupied.discard(vacated)
        return vacated

    def cells(self) -> tuple[int, ...]:
        return tuple(self.body)

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {"body": list(self.body), "head": self.head}
