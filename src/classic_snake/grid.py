"""Bordered grid addressed by a single integer index."""

from __future__ import annotations

import enum
import math
from collections.abc import Iterable

import numpy as np

from classic_snake.errors import ConfigurationError

# Smallest board that still has one interior (non-wall) cell.
MIN_SIZE = 3
# Largest side length; keeps rendered frames and free-cell scans bounded.
MAX_SIZE = 256


class CellType(enum.IntEnum):
    """Integer codes used in rendered cell views."""

    EMPTY = 0
    WALL = 1
    SNAKE = 2
    HEAD = 3
    FOOD = 4


class Grid:
    """Fixed-size grid whose outer ring of cells is wall.

    Cells are addressed as ``index = row * width + col``. Walls are never
    stored; :meth:`is_wall` derives them from the dimensions.
    """

    def __init__(self, width: int, height: int) -> None:
        if width < MIN_SIZE or height < MIN_SIZE:
            raise ConfigurationError(
                f"Grid must be at least {MIN_SIZE}x{MIN_SIZE} to have an "
                f"interior, got {width}x{height}."
            )
        if width > MAX_SIZE or height > MAX_SIZE:
            raise ConfigurationError(
                f"Grid must be at most {MAX_SIZE}x{MAX_SIZE}, "
                f"got {width}x{height}."
            )
        self.width = width
        self.height = height

    @classmethod
    def from_play_area(
        cls, area_width: float, area_height: float, columns: int = 20,
    ) -> Grid:
        """Size a grid to a play area using a fixed column count.

        Cells are square, so the row count is however many cell heights fit.
        """
        if not (math.isfinite(area_width) and math.isfinite(area_height)):
            raise ConfigurationError("Play area must have a finite size.")
        if area_width <= 0 or area_height <= 0:
            raise ConfigurationError("Play area must have a positive size.")
        ratio = area_height * columns / area_width
        if not math.isfinite(ratio) or ratio > MAX_SIZE + 1:
            raise ConfigurationError(
                f"Play area is too tall for {columns} columns; at most "
                f"{MAX_SIZE} rows fit."
            )
        rows = math.floor(ratio)
        return cls(width=columns, height=rows)

    @property
    def size(self) -> int:
        """Total number of cells, walls included."""
        return self.width * self.height

    @property
    def interior_size(self) -> int:
        return (self.width - 2) * (self.height - 2)

    def index(self, row: int, col: int) -> int:
        return row * self.width + col

    def row_col(self, index: int) -> tuple[int, int]:
        return divmod(index, self.width)

    def is_wall(self, index: int) -> bool:
        """Return True for cells on the first/last row or column."""
        row, col = divmod(index, self.width)
        return (
            row == 0
            or row == self.height - 1
            or col == 0
            or col == self.width - 1
        )

    def wall_mask(self) -> np.ndarray:
        """Boolean ``(height, width)`` array, True on the border ring."""
        mask = np.zeros((self.height, self.width), dtype=bool)
        mask[0, :] = True
        mask[-1, :] = True
        mask[:, 0] = True
        mask[:, -1] = True
        return mask

    def free_cells(self, occupied: Iterable[int] = ()) -> np.ndarray:
        """Return the sorted indices of interior cells not in *occupied*."""
        blocked = self.wall_mask().ravel()
        taken = np.fromiter(occupied, dtype=np.intp)
        if taken.size:
            blocked[taken] = True
        return np.flatnonzero(~blocked)

    def to_dict(self) -> dict:
        """Serialize grid dimensions to a dictionary."""
        return {"width": self.width, "height": self.height}
