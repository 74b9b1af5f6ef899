"""POST /api/v1/control/{action} — turn and session controls."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, Query

from gridtactics.api.dependencies import get_session_manager
from gridtactics.api.schemas import ControlResponse
from gridtactics.api.session_manager import SessionManager
from gridtactics.core.enums import Team

router = APIRouter()


class ControlAction(str, Enum):
    end_turn = "end-turn"
    reset = "reset"


def _response(manager: SessionManager, status: str, message: str) -> ControlResponse:
    session = manager.session
    if session is None:
        return ControlResponse(status=status, message=message)
    return ControlResponse(
        status=status,
        message=message,
        turn_number=session.turn_number,
        active_team=session.active_team.name.lower(),
    )


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    seed: int | None = Query(None, description="Seed for a reset battle"),
    manager: SessionManager = Depends(get_session_manager),
) -> ControlResponse:
    with manager.lock:
        match action:
            case ControlAction.end_turn:
                session = manager.session
                if session is None or not session.started:
                    raise HTTPException(status_code=409, detail="Battle not started.")
                if session.active_team != Team.PLAYER:
                    return _response(manager, "noop", "Enemy is still acting.")
                manager.end_turn()
                return _response(manager, "ok", "Turn ended.")

            case ControlAction.reset:
                manager.reset(seed)
                return _response(manager, "ok", "Battle reset.")
