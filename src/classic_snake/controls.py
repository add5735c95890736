"""Touch-drag input mapping."""

from __future__ import annotations

import math

from classic_snake.snake import Direction

_NAMES: dict[str, Direction] = {d.name.lower(): d for d in Direction}


def direction_from_name(name: str) -> Direction | None:
    """Look up a direction by its case-insensitive name."""
    return _NAMES.get(name.lower())


def direction_from_drag(
    dx: float, dy: float, dead_zone: float = 0.0,
) -> Direction | None:
    """Map a drag delta in screen coordinates (+y is down) to a direction.

    The dominant axis wins. Ties, non-finite deltas and moves no larger
    than *dead_zone* give ``None``.
    """
    if not (math.isfinite(dx) and math.isfinite(dy)):
        return None
    if abs(dx) == abs(dy) or max(abs(dx), abs(dy)) <= dead_zone:
        return None
    if abs(dx) > abs(dy):
        return Direction.RIGHT if dx > 0 else Direction.LEFT
    return Direction.DOWN if dy > 0 else Direction.UP
