"""Terrain lookups by grid coordinate.

Pure query layer: resolves the terrain id under a coordinate through the
tile-data provider, then the TerrainType through the catalogue.  Missing
tiles, a missing provider, and unknown ids all resolve to
``FALLBACK_TERRAIN``; the last two are logged as warnings.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gridtactics.core.errors import UnknownTerrain
from gridtactics.core.terrain import FALLBACK_TERRAIN, TerrainType

if TYPE_CHECKING:
    from gridtactics.core.grid import TileDataProvider
    from gridtactics.core.models import Vector2
    from gridtactics.core.terrain import TerrainCatalog

logger = logging.getLogger(__name__)


class TerrainQuery:
    """Read-only terrain view shared by movement and combat."""

    __slots__ = ("_catalog", "_provider", "_warned")

    def __init__(self, catalog: TerrainCatalog, provider: TileDataProvider | None) -> None:
        self._catalog = catalog
        self._provider = provider
        self._warned: set[object] = set()

    @property
    def catalog(self) -> TerrainCatalog:
        return self._catalog

    @property
    def provider(self) -> TileDataProvider | None:
        return self._provider

    def terrain_id_at(self, pos: Vector2) -> int | None:
        if self._provider is None:
            self._warn_once("no-provider", "No tile-data provider set; using fallback terrain")
            return None
        return self._provider.tile_at(pos)

    def in_bounds(self, pos: Vector2) -> bool:
        """Whether *pos* is on the map; without a provider there is no edge."""
        if self._provider is None:
            return True
        return self._provider.in_bounds(pos)

    def terrain_at(self, pos: Vector2) -> TerrainType:
        terrain_id = self.terrain_id_at(pos)
        if terrain_id is None:
            return FALLBACK_TERRAIN
        try:
            return self._catalog.lookup(terrain_id)
        except UnknownTerrain as exc:
            self._warn_once(terrain_id, "%s at %s; using fallback terrain", exc, pos)
            return FALLBACK_TERRAIN

    def is_passable(self, pos: Vector2) -> bool:
        return self.terrain_at(pos).passable

    def movement_cost(self, pos: Vector2) -> int:
        return self.terrain_at(pos).movement_cost

    def defense_bonus(self, pos: Vector2) -> int:
        return self.terrain_at(pos).defense_bonus

    def avoid_bonus(self, pos: Vector2) -> int:
        return self.terrain_at(pos).avoid_bonus

    def coord_at(self, world_x: float, world_y: float) -> Vector2 | None:
        """Grid coordinate under a world-space point, None without a provider."""
        if self._provider is None:
            return None
        return self._provider.coord_at(world_x, world_y)

    def _warn_once(self, key: object, msg: str, *args: object) -> None:
        if key in self._warned:
            return
        self._warned.add(key)
        logger.warning(msg, *args)
