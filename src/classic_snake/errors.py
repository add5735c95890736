"""Exceptions raised by the game engine."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when grid dimensions or settings cannot produce a playable game."""


class BoardFullError(RuntimeError):
    """Raised when no free cell is left for food."""


class SessionLimitError(RuntimeError):
    """Raised when the session registry is full of active sessions."""
