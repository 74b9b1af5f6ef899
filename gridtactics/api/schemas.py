"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Shared ---

class CoordSchema(BaseModel):
    x: int
    y: int


# --- Units ---

class UnitSchema(BaseModel):
    id: int
    team: str
    archetype: str
    x: int
    y: int
    hp: int
    max_hp: int
    attack_damage: int
    base_defense: int
    terrain_defense_bonus: int = 0
    movement_range: int
    attack_range: int
    alive: bool = True
    moved_this_turn: bool = False
    attacked_this_turn: bool = False


class StateResponse(BaseModel):
    started: bool
    turn_number: int
    active_team: str
    phase: str
    outcome: str | None = None
    units: list[UnitSchema] = Field(default_factory=list)


# --- Map ---

class MapResponse(BaseModel):
    width: int
    height: int
    tile_size: int
    # RLE: [terrain_id, count, terrain_id, count, ...]; -1 marks a missing tile
    grid: list[int]


# --- Events ---

class EventSchema(BaseModel):
    seq: int
    turn: int
    category: str
    message: str
    unit_ids: list[int] = Field(default_factory=list)


class EventsResponse(BaseModel):
    next_seq: int
    events: list[EventSchema]


# --- Actions ---

class RangeResponse(BaseModel):
    unit_id: int
    tiles: list[CoordSchema]


class MoveRequest(BaseModel):
    x: int
    y: int


class MoveResponse(BaseModel):
    unit_id: int
    x: int
    y: int
    terrain_defense_bonus: int


class AttackRequest(BaseModel):
    target_id: int


class AttackResponse(BaseModel):
    attacker_id: int
    target_id: int
    damage: int = Field(ge=1)
    target_hp: int
    target_alive: bool
    outcome: str | None = None


class ForecastResponse(BaseModel):
    attacker_id: int
    target_id: int
    damage: int
    effective_defense: int
    lethal: bool
    in_range: bool


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str = ""
    turn_number: int = 1
    active_team: str = "player"


class SessionConfigResponse(BaseModel):
    seed: int
    grid_width: int
    grid_height: int
    tile_size: int
    player_units: list[str]
    enemy_units: list[str]
    enemy_think_seconds: float
