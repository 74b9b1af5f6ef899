"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class Team(IntEnum):
    """Sides a unit can fight for."""

    PLAYER = 0
    ENEMY = 1
    NEUTRAL = 2


@unique
class TerrainId(IntEnum):
    """Terrain identifiers stored in the tile map."""

    PLAIN = 0
    ROAD = 1
    FOREST = 2
    HILL = 3
    MOUNTAIN = 4
    FORT = 5
    RIVER = 6
    WALL = 7


@unique
class TurnPhase(IntEnum):
    """States of the turn cycle."""

    PLAYER_TURN = 0
    ENEMY_TURN = 1


@unique
class BattleOutcome(IntEnum):
    """Result observed after a unit death."""

    VICTORY = 0
    DEFEAT = 1


@unique
class EventKind(IntEnum):
    """Notification categories emitted by the core."""

    UNIT_MOVED = 0
    HEALTH_CHANGED = 1
    DAMAGE_TAKEN = 2
    UNIT_DIED = 3
    ATTACK_PERFORMED = 4
    TURN_STARTED = 5
    TURN_ENDED = 6
    PLAYER_TURN_STARTED = 7
    ENEMY_TURN_STARTED = 8
    VICTORY = 9
    DEFEAT = 10


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    MAP_GEN = 0
    SPAWN = 1
