"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from classic_snake.engine import GameStatus
from classic_snake.grid import MAX_SIZE

# Largest accepted play area side, in pixels.
_MAX_AREA = 100_000.0


class StartRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/start.

    Either explicit grid dimensions or a play area in pixels.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    width: int | None = Field(default=None, ge=1, le=MAX_SIZE)
    height: int | None = Field(default=None, ge=1, le=MAX_SIZE)
    area_width: float | None = Field(default=None, gt=0, le=_MAX_AREA)
    area_height: float | None = Field(default=None, gt=0, le=_MAX_AREA)

    @model_validator(mode="after")
    def _one_sizing_mode(self) -> StartRequest:
        has_grid = self.width is not None and self.height is not None
        has_area = self.area_width is not None and self.area_height is not None
        if has_grid == has_area:
            raise ValueError(
                "Provide either width and height or area_width and area_height."
            )
        return self


class SessionSummary(BaseModel):
    """Menu view of a session."""

    session_id: str
    status: GameStatus
    score: int
    high_score: int
    tick_rate_ms: int


class DragMessage(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    dx: float
    dy: float
