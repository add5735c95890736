"""REST API route handlers for the menu and game start."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from classic_snake.errors import ConfigurationError, SessionLimitError
from classic_snake.server.models import SessionSummary, StartRequest

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_manager(request: Request):
    return request.app.state.session_manager


@router.post("", status_code=201)
async def create_session(request: Request) -> SessionSummary:
    """Open a new session at the main menu."""
    try:
        session = _get_manager(request).create_session()
    except SessionLimitError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return session.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Menu view plus the live game state once a game has been started."""
    session = _get_manager(request).get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    result: dict = session.summary().model_dump(mode="json")
    if session.engine.state is not None:
        result["state"] = session.engine.get_state()
    return result


@router.post("/{session_id}/start", status_code=200)
async def start_game(
    session_id: str, body: StartRequest, request: Request,
) -> SessionSummary:
    """Start a new game, sized explicitly or from the client's play area."""
    manager = _get_manager(request)
    try:
        session = await manager.start_game(
            session_id,
            width=body.width,
            height=body.height,
            area_width=body.area_width,
            area_height=body.area_height,
        )
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ConfigurationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return session.summary()
