"""Unit actions: movement range, move, attack, and attack forecast."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from gridtactics.api.dependencies import get_session_manager
from gridtactics.api.schemas import (
    AttackRequest,
    AttackResponse,
    CoordSchema,
    ForecastResponse,
    MoveRequest,
    MoveResponse,
    RangeResponse,
    UnitSchema,
)
from gridtactics.api.routes.state import serialize_unit
from gridtactics.api.session_manager import SessionManager
from gridtactics.core.errors import SessionNotReady, UnknownUnit
from gridtactics.core.models import Vector2

router = APIRouter(prefix="/units")


@router.get("/{unit_id}", response_model=UnitSchema)
def get_unit(unit_id: int, manager: SessionManager = Depends(get_session_manager)) -> UnitSchema:
    try:
        with manager.lock:
            return serialize_unit(manager.unit(unit_id))
    except UnknownUnit as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.get("/{unit_id}/range", response_model=RangeResponse)
def get_range(unit_id: int, manager: SessionManager = Depends(get_session_manager)) -> RangeResponse:
    try:
        tiles = manager.reachable(unit_id)
    except UnknownUnit as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return RangeResponse(unit_id=unit_id, tiles=[CoordSchema(x=p.x, y=p.y) for p in tiles])


@router.post("/{unit_id}/move", response_model=MoveResponse)
def move_unit(
    unit_id: int,
    body: MoveRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> MoveResponse:
    target = Vector2(body.x, body.y)
    try:
        with manager.lock:
            if not manager.move(unit_id, target):
                raise HTTPException(status_code=409, detail=f"Move to {target} rejected.")
            unit = manager.unit(unit_id)
            return MoveResponse(
                unit_id=unit.id, x=unit.position.x, y=unit.position.y,
                terrain_defense_bonus=unit.terrain_defense_bonus,
            )
    except UnknownUnit as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except SessionNotReady as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


@router.post("/{unit_id}/attack", response_model=AttackResponse)
def attack_unit(
    unit_id: int,
    body: AttackRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> AttackResponse:
    try:
        with manager.lock:
            damage = manager.attack(unit_id, body.target_id)
            if damage == 0:
                raise HTTPException(status_code=409, detail="Attack rejected.")
            target = manager.unit(body.target_id)
            outcome = manager.session.outcome if manager.session else None
            return AttackResponse(
                attacker_id=unit_id,
                target_id=target.id,
                damage=damage,
                target_hp=target.current_health,
                target_alive=target.alive,
                outcome=outcome.name.lower() if outcome is not None else None,
            )
    except UnknownUnit as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except SessionNotReady as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


@router.get("/{unit_id}/forecast/{target_id}", response_model=ForecastResponse)
def forecast_attack(
    unit_id: int,
    target_id: int,
    manager: SessionManager = Depends(get_session_manager),
) -> ForecastResponse:
    try:
        fc = manager.forecast(unit_id, target_id)
    except UnknownUnit as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if fc is None:
        raise HTTPException(status_code=409, detail="No attack possible against this target.")
    return ForecastResponse(
        attacker_id=unit_id,
        target_id=target_id,
        damage=fc.damage,
        effective_defense=fc.effective_defense,
        lethal=fc.lethal,
        in_range=fc.in_range,
    )
