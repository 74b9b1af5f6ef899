"""Terrain types and the read-only terrain catalogue.

Key types:
  TerrainType      — immutable properties of one terrain
  TerrainCatalog   — registry mapping a terrain id to its TerrainType
  FALLBACK_TERRAIN — what callers use when a lookup fails
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterator, Mapping

from pydantic import Field
from pydantic.dataclasses import dataclass as pydantic_dataclass

from gridtactics.core.enums import TerrainId
from gridtactics.core.errors import UnknownTerrain

# Cost that no realistic movement budget can pay.
IMPASSABLE_COST = 999


# ---------------------------------------------------------------------------
# Terrain definition
# ---------------------------------------------------------------------------

@pydantic_dataclass(frozen=True)
class TerrainType:
    """Immutable movement and defence properties of a terrain."""

    name: str
    movement_cost: int = Field(1, ge=1)
    defense_bonus: int = Field(0, ge=0)
    avoid_bonus: int = Field(0, ge=0)
    passable: bool = True

    @property
    def blocks_movement(self) -> bool:
        """True when no unit can enter, either flagged or priced out."""
        return not self.passable or self.movement_cost >= IMPASSABLE_COST


FALLBACK_TERRAIN = TerrainType(
    name="Unknown", movement_cost=1, defense_bonus=0, avoid_bonus=0, passable=True,
)


# ---------------------------------------------------------------------------
# Default definitions
# ---------------------------------------------------------------------------

DEFAULT_TERRAIN: dict[int, TerrainType] = {}


def _reg(terrain_id: TerrainId, t: TerrainType) -> None:
    DEFAULT_TERRAIN[terrain_id] = t


_reg(TerrainId.PLAIN,    TerrainType("Plain",    movement_cost=1))
_reg(TerrainId.ROAD,     TerrainType("Road",     movement_cost=1))
_reg(TerrainId.FOREST,   TerrainType("Forest",   movement_cost=2, defense_bonus=1, avoid_bonus=20))
_reg(TerrainId.HILL,     TerrainType("Hill",     movement_cost=2, defense_bonus=1, avoid_bonus=10))
_reg(TerrainId.MOUNTAIN, TerrainType("Mountain", movement_cost=3, defense_bonus=2, avoid_bonus=30))
_reg(TerrainId.FORT,     TerrainType("Fort",     movement_cost=1, defense_bonus=3, avoid_bonus=20))
# Passable in principle; the cost keeps every unit out.
_reg(TerrainId.RIVER,    TerrainType("River",    movement_cost=IMPASSABLE_COST))
_reg(TerrainId.WALL,     TerrainType("Wall",     movement_cost=IMPASSABLE_COST, passable=False))


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------

class TerrainCatalog:
    """Read-only registry of terrain definitions.

    Populated once at construction.  There is deliberately no way to add or
    replace entries afterwards; build a new catalogue instead.

    Usage:
        catalog = TerrainCatalog.default()
        catalog.lookup(TerrainId.FOREST).movement_cost  # → 2
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[int, TerrainType]) -> None:
        self._entries: Mapping[int, TerrainType] = MappingProxyType(dict(entries))

    @classmethod
    def default(cls) -> TerrainCatalog:
        return cls(DEFAULT_TERRAIN)

    def lookup(self, terrain_id: int) -> TerrainType:
        """Return the terrain for *terrain_id* or raise ``UnknownTerrain``."""
        try:
            return self._entries[terrain_id]
        except KeyError:
            raise UnknownTerrain(terrain_id) from None

    def ids(self) -> list[int]:
        return list(self._entries)

    def items(self) -> Iterator[tuple[int, TerrainType]]:
        return iter(self._entries.items())

    def __contains__(self, terrain_id: object) -> bool:
        return terrain_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
