"""Core data models: terrain, tiles, units, and events."""

from gridtactics.core.enums import BattleOutcome, EventKind, Team, TerrainId, TurnPhase
from gridtactics.core.errors import GridTacticsError, SessionNotReady, UnknownTerrain, UnknownUnit
from gridtactics.core.events import EventBus
from gridtactics.core.grid import TileDataProvider, TileMap
from gridtactics.core.models import Vector2
from gridtactics.core.terrain import FALLBACK_TERRAIN, TerrainCatalog, TerrainType
from gridtactics.core.units import ARCHETYPES, UnitArchetype, UnitState

__all__ = [
    "ARCHETYPES",
    "BattleOutcome",
    "EventBus",
    "EventKind",
    "FALLBACK_TERRAIN",
    "GridTacticsError",
    "SessionNotReady",
    "Team",
    "TerrainCatalog",
    "TerrainId",
    "TerrainType",
    "TileDataProvider",
    "TileMap",
    "TurnPhase",
    "UnitArchetype",
    "UnitState",
    "UnknownTerrain",
    "UnknownUnit",
    "Vector2",
]
