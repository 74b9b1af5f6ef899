"""Tests for MovementRangeSolver (cost-bounded uniform-cost search)."""

import os
import random
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from gridtactics.core.grid import TileMap
from gridtactics.core.models import CARDINAL_OFFSETS, Vector2
from gridtactics.core.terrain import IMPASSABLE_COST, TerrainCatalog, TerrainType
from gridtactics.systems.movement import MovementRangeSolver
from gridtactics.systems.terrain_query import TerrainQuery


def _solver(rows):
    return MovementRangeSolver(TerrainQuery(TerrainCatalog.default(), TileMap.from_rows(rows)))


def _v(x, y):
    return Vector2(x, y)


# ---------------------------------------------------------------------------
# Basic ranges
# ---------------------------------------------------------------------------

class TestReachable:
    def test_zero_budget_reaches_nothing(self):
        solver = _solver(["...", "...", "..."])
        assert solver.reachable(_v(1, 1), 0) == set()

    def test_negative_budget_raises(self):
        solver = _solver(["..."])
        with pytest.raises(ValueError):
            solver.reachable(_v(0, 0), -1)

    def test_origin_excluded(self):
        solver = _solver(["...", "...", "..."])
        tiles = solver.reachable(_v(1, 1), 3)
        assert _v(1, 1) not in tiles
        assert len(tiles) == 8

    def test_open_plain_diamond(self):
        solver = _solver(["." * 7] * 7)
        tiles = solver.reachable(_v(3, 3), 2)
        expected = {
            _v(x, y)
            for x in range(7) for y in range(7)
            if 0 < abs(x - 3) + abs(y - 3) <= 2
        }
        assert tiles == expected

    def test_no_diagonal_steps(self):
        solver = _solver(["...", "...", "..."])
        tiles = solver.reachable(_v(1, 1), 1)
        assert tiles == {_v(1, 0), _v(0, 1), _v(2, 1), _v(1, 2)}

    def test_budget_exactly_equal_is_included(self):
        # Forest costs 2
        solver = _solver([".f"])
        assert _v(1, 0) in solver.reachable(_v(0, 0), 2)
        assert _v(1, 0) not in solver.reachable(_v(0, 0), 1)

    def test_origin_cost_not_charged(self):
        # Standing on a mountain does not cost anything to leave
        solver = _solver(["M."])
        assert solver.reachable(_v(0, 0), 1) == {_v(1, 0)}

    def test_wall_never_entered(self):
        solver = _solver([".#."])
        assert solver.reachable(_v(0, 0), 50) == set()

    def test_river_is_priced_out(self):
        solver = _solver([".~."])
        assert solver.reachable(_v(0, 0), 100) == set()

    def test_missing_tile_is_plain(self):
        solver = _solver([". ."])
        assert solver.reachable(_v(0, 0), 2) == {_v(1, 0), _v(2, 0)}

    def test_map_edge_bounds_search(self):
        solver = _solver(["..", ".."])
        assert solver.reachable(_v(0, 0), 10) == {_v(1, 0), _v(0, 1), _v(1, 1)}

    def test_never_leaves_the_map(self):
        solver = _solver(["..", ".."])
        tiles = solver.reachable(_v(0, 0), 10)
        assert all(0 <= p.x < 2 and 0 <= p.y < 2 for p in tiles)
        assert solver.path_to(_v(0, 0), 10, _v(-5, -4)) is None

    def test_blocked_tiles_not_entered_or_crossed(self):
        solver = _solver(["....."])
        tiles = solver.reachable(_v(0, 0), 4, blocked={_v(2, 0)})
        assert tiles == {_v(1, 0)}

    def test_walled_corridor_detour(self):
        solver = _solver([
            ".~...",
            ".####",
            ".....",
        ])
        tiles = solver.reachable(_v(0, 0), 5)
        assert _v(2, 0) not in tiles
        assert _v(3, 0) not in tiles
        assert _v(4, 0) not in tiles
        assert _v(2, 2) in tiles
        assert _v(3, 2) in tiles
        assert _v(4, 2) not in tiles  # costs 6


# ---------------------------------------------------------------------------
# Costs & paths
# ---------------------------------------------------------------------------

class TestCostsAndPaths:
    def test_costs_are_minimum_entry_costs(self):
        solver = _solver([
            ".h.",
            "...",
        ])
        costs = solver.costs(_v(0, 0), 5)
        assert costs[_v(1, 0)] == 2  # hill
        assert costs[_v(2, 0)] == 3  # through the hill
        assert costs[_v(1, 1)] == 2
        assert _v(0, 0) not in costs

    def test_equal_cost_routes_agree(self):
        # Through the mountain or around the bottom row both cost 4
        solver = _solver([
            ".M.",
            "...",
        ])
        costs = solver.costs(_v(0, 0), 10)
        assert costs[_v(2, 0)] == 4
        assert costs[_v(1, 0)] == 3

    def test_path_to_follows_cheapest_route(self):
        solver = _solver([
            ".MM.",
            "....",
        ])
        path = solver.path_to(_v(0, 0), 10, _v(3, 0))
        assert path == [_v(0, 1), _v(1, 1), _v(2, 1), _v(3, 1), _v(3, 0)]

    def test_path_to_self_is_empty(self):
        solver = _solver(["..."])
        assert solver.path_to(_v(1, 0), 0, _v(1, 0)) == []

    def test_path_to_unreachable_is_none(self):
        solver = _solver([".#."])
        assert solver.path_to(_v(0, 0), 10, _v(2, 0)) is None

    def test_path_steps_are_adjacent(self):
        solver = _solver([
            ".f...",
            ".#.h.",
            ".....",
        ])
        path = solver.path_to(_v(0, 0), 8, _v(4, 0))
        assert path is not None
        prev = _v(0, 0)
        for step in path:
            assert prev.manhattan(step) == 1
            prev = step
        assert path[-1] == _v(4, 0)


# ---------------------------------------------------------------------------
# Exhaustive cross-check on random small grids
# ---------------------------------------------------------------------------

def _random_query(seed, width=4, height=4):
    catalog = TerrainCatalog({
        0: TerrainType("Cheap", movement_cost=1),
        1: TerrainType("Slow", movement_cost=2),
        2: TerrainType("Flooded", movement_cost=IMPASSABLE_COST),
    })
    rnd = random.Random(seed)
    tiles = TileMap(width, height)
    for y in range(height):
        for x in range(width):
            tiles.set(Vector2(x, y), rnd.choice((0, 0, 1, 1, 2)))
    return TerrainQuery(catalog, tiles), tiles


def _brute_force(query, tiles, origin, budget):
    """Minimum cost to every tile by enumerating all simple paths."""
    best = {}

    def walk(pos, spent, seen):
        for d in CARDINAL_OFFSETS:
            nxt = pos + d
            if not tiles.in_bounds(nxt) or nxt in seen or not query.is_passable(nxt):
                continue
            cost = spent + query.movement_cost(nxt)
            if cost > budget:
                continue
            if cost < best.get(nxt, budget + 1):
                best[nxt] = cost
            seen.add(nxt)
            walk(nxt, cost, seen)
            seen.discard(nxt)

    walk(origin, 0, {origin})
    best.pop(origin, None)
    return best


class TestAgainstExhaustiveSearch:
    @pytest.mark.parametrize("seed", range(12))
    def test_matches_brute_force(self, seed):
        query, tiles = _random_query(seed)
        solver = MovementRangeSolver(query)
        origin = Vector2(seed % 4, (seed // 4) % 4)
        for budget in (0, 1, 3, 6):
            expected = _brute_force(query, tiles, origin, budget)
            assert solver.costs(origin, budget) == expected
            assert solver.reachable(origin, budget) == set(expected)

    @pytest.mark.parametrize("seed", range(5))
    def test_paths_cost_what_costs_reports(self, seed):
        query, tiles = _random_query(seed, 5, 5)
        solver = MovementRangeSolver(query)
        origin = Vector2(2, 2)
        costs = solver.costs(origin, 6)
        for target, cost in costs.items():
            path = solver.path_to(origin, 6, target)
            assert path is not None
            assert sum(query.movement_cost(p) for p in path) == cost
