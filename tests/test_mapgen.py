"""Tests for the deterministic battlefield generator and RNG."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from gridtactics.config import SessionConfig
from gridtactics.core.enums import Domain, Team, TerrainId
from gridtactics.core.models import Vector2
from gridtactics.systems.mapgen import deployment_rows, generate_battlefield, spawn_armies
from gridtactics.systems.rng import DeterministicRNG


class TestDeterministicRNG:
    def test_same_inputs_same_value(self):
        a = DeterministicRNG(7)
        b = DeterministicRNG(7)
        assert a.next_float(Domain.MAP_GEN, 1, 2) == b.next_float(Domain.MAP_GEN, 1, 2)

    def test_domains_are_separated(self):
        rng = DeterministicRNG(7)
        assert rng.next_float(Domain.MAP_GEN, 1, 2) != rng.next_float(Domain.SPAWN, 1, 2)

    def test_int_bounds(self):
        rng = DeterministicRNG(1)
        values = {rng.next_int(Domain.SPAWN, 0, i, 3, 5) for i in range(200)}
        assert values == {3, 4, 5}


    def test_choice_is_stable_and_in_options(self):
        rng = DeterministicRNG(4)
        options = ("forest", "hill", "mountain")
        picks = [rng.choice(Domain.MAP_GEN, 9, i, options) for i in range(50)]
        assert set(picks) <= set(options)
        assert picks == [DeterministicRNG(4).choice(Domain.MAP_GEN, 9, i, options) for i in range(50)]
        with pytest.raises(IndexError):
            rng.choice(Domain.MAP_GEN, 9, 0, ())

    def test_point_within_ranges(self):
        rng = DeterministicRNG(12)
        for i in range(0, 100, 2):
            p = rng.point(Domain.SPAWN, 3, i, (2, 4), (0, 1))
            assert 2 <= p.x <= 4 and 0 <= p.y <= 1
        assert rng.point(Domain.SPAWN, 3, 0, (0, 9), (0, 9)) == Vector2(
            rng.next_int(Domain.SPAWN, 3, 0, 0, 9), rng.next_int(Domain.SPAWN, 3, 1, 0, 9)
        )


class TestGenerateBattlefield:
    def test_same_seed_same_map(self):
        config = SessionConfig(seed=5)
        a = generate_battlefield(config, DeterministicRNG(5))
        b = generate_battlefield(config, DeterministicRNG(5))
        assert a.raw_tiles() == b.raw_tiles()

    def test_different_seed_differs(self):
        config = SessionConfig()
        a = generate_battlefield(config, DeterministicRNG(1))
        b = generate_battlefield(config, DeterministicRNG(2))
        assert a.raw_tiles() != b.raw_tiles()

    def test_dimensions_and_forts(self):
        config = SessionConfig(grid_width=12, grid_height=8)
        tiles = generate_battlefield(config, DeterministicRNG(config.seed))
        assert (tiles.width, tiles.height) == (12, 8)
        assert tiles.tile_at(Vector2(1, 4)) == TerrainId.FORT
        assert tiles.tile_at(Vector2(10, 4)) == TerrainId.FORT

    def test_river_has_road_crossings(self):
        config = SessionConfig()
        tiles = generate_battlefield(config, DeterministicRNG(config.seed))
        column = [tiles.tile_at(Vector2(config.grid_width // 2, y)) for y in range(config.grid_height)]
        assert TerrainId.RIVER in column
        assert column.count(TerrainId.ROAD) == 2

    def test_no_river_when_disabled(self):
        config = SessionConfig(river=False)
        tiles = generate_battlefield(config, DeterministicRNG(config.seed))
        assert TerrainId.RIVER not in tiles.raw_tiles()

    def test_deployment_columns_stay_open(self):
        config = SessionConfig(seed=99)
        tiles = generate_battlefield(config, DeterministicRNG(config.seed))
        for y in range(config.grid_height):
            for x in (0, config.grid_width - 1):
                assert tiles.tile_at(Vector2(x, y)) in (TerrainId.PLAIN, TerrainId.ROAD)

    def test_too_small_rejected(self):
        with pytest.raises(ValueError):
            generate_battlefield(SessionConfig(grid_width=3), DeterministicRNG(0))


class TestSpawnArmies:
    def test_deployment_rows_spread(self):
        assert deployment_rows(4, 12) == [1, 4, 7, 10]
        with pytest.raises(ValueError):
            deployment_rows(5, 4)

    def test_armies_on_their_edges(self):
        config = SessionConfig()
        units = spawn_armies(config, DeterministicRNG(config.seed))
        players = [u for u in units if u.team == Team.PLAYER]
        enemies = [u for u in units if u.team == Team.ENEMY]
        assert [u.archetype for u in players] == list(config.player_units)
        assert [u.archetype for u in enemies] == list(config.enemy_units)
        assert all(u.position.x in (0, 1) for u in players)
        assert all(u.position.x in (config.grid_width - 1, config.grid_width - 2) for u in enemies)
        assert [u.id for u in units] == list(range(1, len(units) + 1))

    def test_spawn_is_deterministic(self):
        config = SessionConfig(seed=8)
        a = spawn_armies(config, DeterministicRNG(8))
        b = spawn_armies(config, DeterministicRNG(8))
        assert [u.position for u in a] == [u.position for u in b]
