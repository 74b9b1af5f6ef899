"""Tests for the terrain catalogue, tile map, and terrain queries."""

import logging
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from gridtactics.core.enums import TerrainId
from gridtactics.core.errors import UnknownTerrain
from gridtactics.core.grid import TileMap
from gridtactics.core.models import Vector2
from gridtactics.core.terrain import (
    DEFAULT_TERRAIN,
    FALLBACK_TERRAIN,
    IMPASSABLE_COST,
    TerrainCatalog,
    TerrainType,
)
from gridtactics.systems.terrain_query import TerrainQuery


# ---------------------------------------------------------------------------
# TerrainType
# ---------------------------------------------------------------------------

class TestTerrainType:
    def test_fields(self):
        t = TerrainType("Forest", movement_cost=2, defense_bonus=1, avoid_bonus=20)
        assert t.name == "Forest"
        assert t.movement_cost == 2
        assert t.defense_bonus == 1
        assert t.avoid_bonus == 20
        assert t.passable is True

    def test_frozen(self):
        t = TerrainType("Plain")
        with pytest.raises(Exception):
            t.movement_cost = 5  # type: ignore

    def test_movement_cost_must_be_at_least_one(self):
        with pytest.raises(Exception):
            TerrainType("Broken", movement_cost=0)

    def test_negative_bonus_rejected(self):
        with pytest.raises(Exception):
            TerrainType("Broken", defense_bonus=-1)

    def test_sentinel_cost_blocks_movement_even_when_passable(self):
        river = TerrainType("River", movement_cost=IMPASSABLE_COST, passable=True)
        assert river.passable
        assert river.blocks_movement

    def test_fallback_terrain_values(self):
        assert FALLBACK_TERRAIN.name == "Unknown"
        assert FALLBACK_TERRAIN.movement_cost == 1
        assert FALLBACK_TERRAIN.defense_bonus == 0
        assert FALLBACK_TERRAIN.avoid_bonus == 0
        assert FALLBACK_TERRAIN.passable is True


# ---------------------------------------------------------------------------
# TerrainCatalog
# ---------------------------------------------------------------------------

class TestTerrainCatalog:
    def test_default_has_every_terrain_id(self):
        catalog = TerrainCatalog.default()
        for tid in TerrainId:
            assert tid in catalog
        assert len(catalog) == len(TerrainId)

    def test_lookup(self):
        catalog = TerrainCatalog.default()
        fort = catalog.lookup(TerrainId.FORT)
        assert fort.name == "Fort"
        assert fort.defense_bonus == 3

    def test_unknown_id_raises(self):
        catalog = TerrainCatalog.default()
        with pytest.raises(UnknownTerrain) as exc_info:
            catalog.lookup(99)
        assert exc_info.value.terrain_id == 99

    def test_unknown_terrain_is_a_key_error(self):
        with pytest.raises(KeyError):
            TerrainCatalog({}).lookup(0)

    def test_catalog_is_a_snapshot_of_its_input(self):
        entries = {1: TerrainType("A")}
        catalog = TerrainCatalog(entries)
        entries[2] = TerrainType("B")
        assert 2 not in catalog

    def test_no_mutation_api(self):
        catalog = TerrainCatalog.default()
        assert not hasattr(catalog, "register")
        with pytest.raises(TypeError):
            catalog._entries[TerrainId.PLAIN] = TerrainType("Hacked")  # type: ignore

    def test_wall_impassable_river_priced_out(self):
        assert DEFAULT_TERRAIN[TerrainId.WALL].passable is False
        river = DEFAULT_TERRAIN[TerrainId.RIVER]
        assert river.passable is True
        assert river.movement_cost == IMPASSABLE_COST


# ---------------------------------------------------------------------------
# TileMap
# ---------------------------------------------------------------------------

class TestTileMap:
    def test_default_fill(self):
        tm = TileMap(3, 2)
        assert tm.tile_at(Vector2(2, 1)) == TerrainId.PLAIN

    def test_out_of_bounds_is_missing(self):
        tm = TileMap(3, 2)
        assert tm.tile_at(Vector2(-1, 0)) is None
        assert tm.tile_at(Vector2(3, 0)) is None

    def test_set_and_clear(self):
        tm = TileMap(3, 3)
        tm.set(Vector2(1, 1), TerrainId.FOREST)
        assert tm.tile_at(Vector2(1, 1)) == TerrainId.FOREST
        tm.clear(Vector2(1, 1))
        assert tm.tile_at(Vector2(1, 1)) is None

    def test_from_rows_legend(self):
        tm = TileMap.from_rows([
            ".f#",
            "~ F",
        ])
        assert tm.width == 3 and tm.height == 2
        assert tm.tile_at(Vector2(1, 0)) == TerrainId.FOREST
        assert tm.tile_at(Vector2(2, 0)) == TerrainId.WALL
        assert tm.tile_at(Vector2(0, 1)) == TerrainId.RIVER
        assert tm.tile_at(Vector2(1, 1)) is None
        assert tm.tile_at(Vector2(2, 1)) == TerrainId.FORT

    def test_coord_at_floors_world_position(self):
        tm = TileMap(10, 10, tile_size=16)
        assert tm.coord_at(0, 0) == Vector2(0, 0)
        assert tm.coord_at(15.9, 16.0) == Vector2(0, 1)
        assert tm.coord_at(40, 70) == Vector2(2, 4)

    def test_copy_is_independent(self):
        tm = TileMap(2, 2)
        cp = tm.copy()
        cp.set(Vector2(0, 0), TerrainId.WALL)
        assert tm.tile_at(Vector2(0, 0)) == TerrainId.PLAIN


# ---------------------------------------------------------------------------
# TerrainQuery
# ---------------------------------------------------------------------------

class TestTerrainQuery:
    def _query(self, rows):
        return TerrainQuery(TerrainCatalog.default(), TileMap.from_rows(rows))

    def test_resolves_through_catalog(self):
        q = self._query(["fM"])
        assert q.terrain_at(Vector2(0, 0)).name == "Forest"
        assert q.movement_cost(Vector2(1, 0)) == 3
        assert q.defense_bonus(Vector2(1, 0)) == 2
        assert q.avoid_bonus(Vector2(0, 0)) == 20

    def test_is_passable(self):
        q = self._query([".#"])
        assert q.is_passable(Vector2(0, 0))
        assert not q.is_passable(Vector2(1, 0))

    def test_missing_tile_uses_fallback(self):
        q = self._query([". "])
        assert q.terrain_at(Vector2(1, 0)) is FALLBACK_TERRAIN
        assert q.terrain_at(Vector2(50, 50)) is FALLBACK_TERRAIN

    def test_unknown_id_falls_back_with_warning(self, caplog):
        tm = TileMap(2, 1)
        tm.set(Vector2(1, 0), 42)
        q = TerrainQuery(TerrainCatalog.default(), tm)
        with caplog.at_level(logging.WARNING, logger="gridtactics.systems.terrain_query"):
            assert q.terrain_at(Vector2(1, 0)) is FALLBACK_TERRAIN
            assert q.movement_cost(Vector2(1, 0)) == 1
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1  # warned once per unknown id
        assert "42" in warnings[0].getMessage()

    def test_no_provider_falls_back(self, caplog):
        q = TerrainQuery(TerrainCatalog.default(), None)
        with caplog.at_level(logging.WARNING, logger="gridtactics.systems.terrain_query"):
            assert q.terrain_at(Vector2(0, 0)) is FALLBACK_TERRAIN
            assert q.is_passable(Vector2(3, 3))
        assert any("provider" in r.getMessage() for r in caplog.records)
        assert q.coord_at(10, 10) is None

    def test_in_bounds_follows_provider(self):
        q = self._query(["..", ". "])
        assert q.in_bounds(Vector2(1, 1))  # missing tile, still on the map
        assert not q.in_bounds(Vector2(2, 0))
        assert not q.in_bounds(Vector2(0, -1))
        assert TerrainQuery(TerrainCatalog.default(), None).in_bounds(Vector2(-3, 9))

    def test_coord_at_delegates_to_provider(self):
        q = TerrainQuery(TerrainCatalog.default(), TileMap(4, 4, tile_size=8))
        assert q.coord_at(17, 9) == Vector2(2, 1)
