"""In-memory session registry, game lifecycle and async tick loops."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from classic_snake.config import GameConfig
from classic_snake.engine import GameEngine, GameStatus
from classic_snake.errors import SessionLimitError
from classic_snake.grid import Grid
from classic_snake.server.models import SessionSummary
from classic_snake.snake import Direction

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """One player's engine, its tick loop and its connected sockets."""

    session_id: str
    engine: GameEngine
    tick_rate_ms: int
    sockets: list[WebSocket] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)
    last_active: float = field(default_factory=time.monotonic)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            status=self.engine.status,
            score=self.engine.score,
            high_score=self.engine.high_score,
            tick_rate_ms=self.tick_rate_ms,
        )


class SessionManager:
    """Central registry managing all game sessions."""

    def __init__(self, config: GameConfig | None = None) -> None:
        self.config = config if config is not None else GameConfig()
        self._sessions: dict[str, GameSession] = {}

    def create_session(self) -> GameSession:
        """Create a session sitting at the main menu.

        Raises :class:`SessionLimitError` when every slot is held by an
        active session.
        """
        self._prune_idle_sessions()
        if len(self._sessions) >= self.config.max_sessions:
            raise SessionLimitError(
                f"All {self.config.max_sessions} sessions are in use."
            )
        session_id = uuid.uuid4().hex[:12]
        session = GameSession(
            session_id=session_id,
            engine=GameEngine(self.config),
            tick_rate_ms=self.config.tick_rate_ms,
        )
        self._sessions[session_id] = session
        logger.info("Session %s created.", session_id)
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        return self._sessions.get(session_id)

    def _require(self, session_id: str) -> GameSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        return session

    def list_sessions(self) -> list[SessionSummary]:
        return [s.summary() for s in self._sessions.values()]

    async def start_game(
        self,
        session_id: str,
        width: int | None = None,
        height: int | None = None,
        area_width: float | None = None,
        area_height: float | None = None,
    ) -> GameSession:
        """Start (or restart) the session's game and its tick loop.

        The grid is either given directly or sized from a play area using
        the configured column count.
        """
        session = self._require(session_id)
        if width is None or height is None:
            if area_width is None or area_height is None:
                raise ValueError("Grid dimensions or a play area are required.")
            grid = Grid.from_play_area(
                area_width, area_height, columns=self.config.columns,
            )
            width, height = grid.width, grid.height

        async with session.lock:
            session.engine.start(width, height)
            if session.running:
                session._task.cancel()
            session.last_active = time.monotonic()
            session._task = asyncio.create_task(self._tick_loop(session))

        logger.info(
            "Session %s started a %dx%d game.", session_id, width, height,
        )
        await self._broadcast(session, session.engine.get_state())
        return session

    async def set_direction(self, session_id: str, direction: Direction) -> None:
        session = self._require(session_id)
        async with session.lock:
            session.engine.set_direction(direction)
            session.last_active = time.monotonic()

    async def _tick_loop(self, session: GameSession) -> None:
        """Tick the engine until the game ends, broadcasting each state."""
        tick_interval = session.tick_rate_ms / 1000.0
        try:
            while session.engine.status == GameStatus.PLAYING:
                await asyncio.sleep(tick_interval)
                async with session.lock:
                    session.engine.tick()
                    state = session.engine.get_state()
                await self._broadcast(session, state)
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled for session %s.", session.session_id)
        except Exception:
            logger.exception("Tick loop error in session %s.", session.session_id)
        else:
            logger.info(
                "Session %s game finished: %s, score %d, high score %d.",
                session.session_id,
                session.engine.status.value,
                session.engine.score,
                session.engine.high_score,
            )

    async def _broadcast(self, session: GameSession, state: dict) -> None:
        """Send state to every connected socket, dropping dead ones."""
        payload = json.dumps(state, separators=(",", ":"))
        dead: list[WebSocket] = []

        # Iterate over a snapshot so disconnect handlers can mutate the list.
        for ws in list(session.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)

        for ws in dead:
            if ws in session.sockets:
                session.sockets.remove(ws)

    def _prune_idle_sessions(self) -> None:
        """Drop the least recently active idle sessions to stay under the cap."""
        overflow = len(self._sessions) - self.config.max_sessions + 1
        if overflow <= 0:
            return
        idle = sorted(
            (s for s in self._sessions.values() if not s.running and not s.sockets),
            key=lambda s: s.last_active,
        )
        for stale in idle[:overflow]:
            self._sessions.pop(stale.session_id, None)
        if idle:
            logger.info(
                "Pruned %d idle sessions (retaining up to %d).",
                min(overflow, len(idle)),
                self.config.max_sessions,
            )

    async def cleanup(self) -> None:
        """Cancel all running tick loops."""
        tasks = [s._task for s in self._sessions.values() if s.running]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("SessionManager cleanup complete.")
