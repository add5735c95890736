"""WebSocket handler for real-time play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from classic_snake.controls import direction_from_drag, direction_from_name
from classic_snake.server.models import DragMessage
from classic_snake.server.session_manager import SessionManager
from classic_snake.snake import Direction

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


def _parse_direction(raw: str) -> Direction | None:
    """Decode ``{"direction": ...}`` or ``{"drag": {"dx", "dy"}}`` messages."""
    try:
        msg = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(msg, dict):
        return None

    name = msg.get("direction")
    if isinstance(name, str):
        return direction_from_name(name)

    drag = msg.get("drag")
    if drag is not None:
        try:
            delta = DragMessage.model_validate(drag)
        except ValidationError:
            return None
        return direction_from_drag(delta.dx, delta.dy)
    return None


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Send directions or drags, receive the game state each tick."""
    manager = _get_manager(websocket)
    session = manager.get_session(session_id)
    if session is None:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    session.sockets.append(websocket)
    logger.info("Client connected to session %s.", session_id)

    # Initial snapshot so the client can draw the menu or board at once.
    await websocket.send_text(
        json.dumps(session.engine.get_state(), separators=(",", ":")),
    )

    try:
        while True:
            raw = await websocket.receive_text()
            direction = _parse_direction(raw)
            if direction is None:
                continue
            await manager.set_direction(session_id, direction)
    except WebSocketDisconnect:
        logger.info("Client disconnected from session %s.", session_id)
    finally:
        if websocket in session.sockets:
            session.sockets.remove(websocket)
