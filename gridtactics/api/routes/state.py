"""GET /api/v1/state and /api/v1/events — dynamic battle data (polled by UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from gridtactics.api.dependencies import get_session_manager
from gridtactics.api.schemas import EventSchema, EventsResponse, StateResponse, UnitSchema
from gridtactics.api.session_manager import SessionManager
from gridtactics.core.units import UnitState

router = APIRouter()


def serialize_unit(u: UnitState) -> UnitSchema:
    return UnitSchema(
        id=u.id,
        team=u.team.name.lower(),
        archetype=u.archetype,
        x=u.position.x,
        y=u.position.y,
        hp=u.current_health,
        max_hp=u.max_health,
        attack_damage=u.attack_damage,
        base_defense=u.base_defense,
        terrain_defense_bonus=u.terrain_defense_bonus,
        movement_range=u.movement_range,
        attack_range=u.attack_range,
        alive=u.alive,
        moved_this_turn=u.moved_this_turn,
        attacked_this_turn=u.attacked_this_turn,
    )


@router.get("/state", response_model=StateResponse)
def get_state(
    include_dead: bool = Query(False, description="Also list units that have died"),
    manager: SessionManager = Depends(get_session_manager),
) -> StateResponse:
    with manager.lock:
        session = manager.session
        if session is None:
            raise HTTPException(status_code=503, detail="Battle not initialized yet.")
        return StateResponse(
            started=session.started,
            turn_number=session.turn_number,
            active_team=session.active_team.name.lower(),
            phase=session.phase.name.lower(),
            outcome=session.outcome.name.lower() if session.outcome is not None else None,
            units=[serialize_unit(u) for u in session.units(alive_only=not include_dead)],
        )


@router.get("/events", response_model=EventsResponse)
def get_events(
    since: int = Query(1, ge=1, description="Return events with seq >= since"),
    limit: int = Query(200, ge=1, le=1000),
    manager: SessionManager = Depends(get_session_manager),
) -> EventsResponse:
    log = manager.event_log
    events = log.since(since)[:limit]
    next_seq = events[-1].seq + 1 if events else max(since, 1)
    return EventsResponse(
        next_seq=next_seq,
        events=[
            EventSchema(
                seq=e.seq, turn=e.turn, category=e.category,
                message=e.message, unit_ids=list(e.unit_ids),
            )
            for e in events
        ],
    )
