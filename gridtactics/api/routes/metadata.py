"""Metadata endpoints — terrain catalogue and unit archetypes.

``TerrainType`` and ``UnitArchetype`` are pydantic dataclasses defined in
``gridtactics.core``; they are serialized directly so the frontend never
hardcodes terrain costs or unit stats.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, TypeAdapter

from gridtactics.api.dependencies import get_session_manager
from gridtactics.api.session_manager import SessionManager
from gridtactics.core.enums import TerrainId
from gridtactics.core.terrain import TerrainType
from gridtactics.core.units import ARCHETYPES, UnitArchetype

router = APIRouter(prefix="/metadata", tags=["Metadata"])


class TerrainEntry(BaseModel):
    id: int
    key: str
    terrain: dict
    blocks_movement: bool


class TerrainResponse(BaseModel):
    terrain: list[TerrainEntry]


class ArchetypesResponse(BaseModel):
    archetypes: list[dict]


_terrain_ta = TypeAdapter(TerrainType)
_archetype_ta = TypeAdapter(UnitArchetype)


def _terrain_key(terrain_id: int) -> str:
    try:
        return TerrainId(terrain_id).name.lower()
    except ValueError:
        return str(terrain_id)


@router.get("/terrain", response_model=TerrainResponse)
def get_terrain(manager: SessionManager = Depends(get_session_manager)) -> TerrainResponse:
    with manager.lock:
        catalog = manager.session.catalog if manager.session else None
    if catalog is None:
        return TerrainResponse(terrain=[])
    return TerrainResponse(terrain=[
        TerrainEntry(
            id=int(tid),
            key=_terrain_key(tid),
            terrain=_terrain_ta.dump_python(t, mode="json"),
            blocks_movement=t.blocks_movement,
        )
        for tid, t in sorted(catalog.items())
    ])


@router.get("/archetypes", response_model=ArchetypesResponse)
def get_archetypes() -> ArchetypesResponse:
    return ArchetypesResponse(archetypes=[
        _archetype_ta.dump_python(a, mode="json") for a in ARCHETYPES.values()
    ])
