"""Procedural battlefield — deterministic terrain and army placement.

Layout:
  - open plain with a few round patches of forest, hill or mountain
  - optionally a north-south river down the middle, crossed by two roads
  - a fort on each side's deployment edge
  - PLAYER deploys along the west edge, ENEMY along the east edge

All randomness goes through ``DeterministicRNG``; the same seed always
produces the same map and the same placement.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gridtactics.core.enums import Domain, Team, TerrainId
from gridtactics.core.grid import TileMap
from gridtactics.core.models import Vector2
from gridtactics.core.units import UnitState, get_archetype

if TYPE_CHECKING:
    from gridtactics.config import SessionConfig
    from gridtactics.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

_PATCH_TERRAIN = (TerrainId.FOREST, TerrainId.HILL, TerrainId.MOUNTAIN)
_PATCH_FILL_CHANCE = 0.75
# Columns kept clear on each edge for deployment
_DEPLOY_MARGIN = 2


def generate_battlefield(config: SessionConfig, rng: DeterministicRNG) -> TileMap:
    """Build the tile map for *config* from the RNG seed."""
    w, h = config.grid_width, config.grid_height
    if w < 2 * _DEPLOY_MARGIN + 1 or h < 1:
        raise ValueError(f"battlefield {w}x{h} is too small")

    tiles = TileMap(w, h, default=TerrainId.PLAIN, tile_size=config.tile_size)

    _paint_patches(tiles, config, rng)
    if config.river:
        _paint_river(tiles, rng)

    mid = h // 2
    tiles.set(Vector2(1, mid), TerrainId.FORT)
    tiles.set(Vector2(w - 2, mid), TerrainId.FORT)

    logger.info("Generated %dx%d battlefield (seed=%d)", w, h, rng.seed)
    return tiles


def _paint_patches(tiles: TileMap, config: SessionConfig, rng: DeterministicRNG) -> None:
    lo_x, hi_x = _DEPLOY_MARGIN + 1, tiles.width - _DEPLOY_MARGIN - 2
    if lo_x > hi_x:
        return
    radius = config.patch_radius
    for i in range(config.terrain_patch_count):
        key = 1000 + i
        centre = rng.point(Domain.MAP_GEN, key, 0, (lo_x, hi_x), (0, tiles.height - 1))
        terrain = rng.choice(Domain.MAP_GEN, key, 2, _PATCH_TERRAIN)
        for y in range(centre.y - radius, centre.y + radius + 1):
            for x in range(centre.x - radius, centre.x + radius + 1):
                pos = Vector2(x, y)
                if not tiles.in_bounds(pos) or pos.manhattan(centre) > radius:
                    continue
                if x < _DEPLOY_MARGIN or x >= tiles.width - _DEPLOY_MARGIN:
                    continue
                if rng.next_bool(Domain.MAP_GEN, key, 10 + y * tiles.width + x, _PATCH_FILL_CHANCE):
                    tiles.set(pos, terrain)


def _paint_river(tiles: TileMap, rng: DeterministicRNG) -> None:
    rx = tiles.width // 2
    for y in range(tiles.height):
        tiles.set(Vector2(rx, y), TerrainId.RIVER)

    h = tiles.height
    if h < 4:
        crossings = {h // 2}
    else:
        crossings = {
            rng.next_int(Domain.MAP_GEN, 2000, 0, 0, h // 2 - 1),
            rng.next_int(Domain.MAP_GEN, 2000, 1, h // 2, h - 1),
        }
    for y in crossings:
        for x in range(tiles.width):
            tiles.set(Vector2(x, y), TerrainId.ROAD)


def deployment_rows(count: int, height: int) -> list[int]:
    """Evenly spread *count* rows over *height*."""
    if count > height:
        raise ValueError(f"cannot deploy {count} units on {height} rows")
    return [(height * (2 * i + 1)) // (2 * count) for i in range(count)]


def spawn_armies(config: SessionConfig, rng: DeterministicRNG, first_id: int = 1) -> list[UnitState]:
    """Create both armies on their deployment edges."""
    units: list[UnitState] = []
    next_id = first_id
    w, h = config.grid_width, config.grid_height
    for team, names, edge_x, inward in (
        (Team.PLAYER, config.player_units, 0, 1),
        (Team.ENEMY, config.enemy_units, w - 1, -1),
    ):
        for name, y in zip(names, deployment_rows(len(names), h)):
            x = edge_x + inward * rng.next_int(Domain.SPAWN, next_id, 0, 0, 1)
            units.append(UnitState.from_archetype(next_id, get_archetype(name), Vector2(x, y), team))
            next_id += 1
    return units
