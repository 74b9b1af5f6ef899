"""Movement range under a terrain-cost budget.

Provides a ``MovementRangeSolver`` that answers "which tiles can this unit
reach this turn" with a uniform-cost (Dijkstra) search: the frontier is a
heap keyed by cumulative cost, so every tile's recorded cost is the true
minimum once it is expanded.

Usage:
    solver = MovementRangeSolver(terrain_query)
    tiles = solver.reachable(Vector2(3, 3), budget=5)     # set[Vector2]
    path = solver.path_to(Vector2(3, 3), 5, Vector2(5, 4))  # list[Vector2] or None
"""

from __future__ import annotations

import heapq
from typing import TYPE_CHECKING, AbstractSet

from gridtactics.core.models import CARDINAL_OFFSETS, Vector2

if TYPE_CHECKING:
    from gridtactics.systems.terrain_query import TerrainQuery


class MovementRangeSolver:
    """Cost-bounded flood fill over the terrain grid.

    Entering a tile costs that tile's movement cost; the origin itself is
    free.  Off-map or impassable tiles are never entered, nor are tiles in
    *blocked*.  A missing tile inside the map reads as plain ground.
    """

    __slots__ = ("_terrain",)

    def __init__(self, terrain: TerrainQuery) -> None:
        self._terrain = terrain

    def reachable(
        self,
        origin: Vector2,
        budget: int,
        blocked: AbstractSet[Vector2] | None = None,
    ) -> set[Vector2]:
        """Every tile (origin excluded) whose cheapest path costs <= *budget*."""
        return set(self.costs(origin, budget, blocked))

    def costs(
        self,
        origin: Vector2,
        budget: int,
        blocked: AbstractSet[Vector2] | None = None,
    ) -> dict[Vector2, int]:
        """Minimum entry cost for each reachable tile, origin excluded."""
        best, _ = self._search(origin, budget, blocked)
        del best[(origin.x, origin.y)]
        return {Vector2(x, y): c for (x, y), c in best.items()}

    def path_to(
        self,
        origin: Vector2,
        budget: int,
        target: Vector2,
        blocked: AbstractSet[Vector2] | None = None,
    ) -> list[Vector2] | None:
        """Cheapest path to *target* (origin excluded, target included).

        Returns ``[]`` when target is the origin and None when it cannot be
        reached within the budget.
        """
        if target == origin:
            return []
        best, came_from = self._search(origin, budget, blocked)
        key = (target.x, target.y)
        if key not in best:
            return None
        return self._reconstruct(came_from, key)

    # -- internals --

    def _search(
        self,
        origin: Vector2,
        budget: int,
        blocked: AbstractSet[Vector2] | None,
    ) -> tuple[dict[tuple[int, int], int], dict[tuple[int, int], tuple[int, int]]]:
        if budget < 0:
            raise ValueError(f"movement budget must be >= 0, got {budget}")

        terrain = self._terrain
        blk = blocked or frozenset()

        # Heap entries: (cost, counter, x, y); counter keeps pops stable
        counter = 0
        frontier: list[tuple[int, int, int, int]] = [(0, counter, origin.x, origin.y)]
        best: dict[tuple[int, int], int] = {(origin.x, origin.y): 0}
        came_from: dict[tuple[int, int], tuple[int, int]] = {}

        while frontier:
            cost, _, cx, cy = heapq.heappop(frontier)
            ckey = (cx, cy)
            if cost > best[ckey]:
                continue  # stale entry, a cheaper one was already expanded

            for d in CARDINAL_OFFSETS:
                npos = Vector2(cx + d.x, cy + d.y)
                if not terrain.in_bounds(npos):
                    continue
                if npos in blk or not terrain.is_passable(npos):
                    continue

                candidate = cost + terrain.movement_cost(npos)
                if candidate > budget:
                    continue

                nkey = (npos.x, npos.y)
                if candidate < best.get(nkey, budget + 1):
                    best[nkey] = candidate
                    came_from[nkey] = ckey
                    counter += 1
                    heapq.heappush(frontier, (candidate, counter, npos.x, npos.y))

        return best, came_from

    @staticmethod
    def _reconstruct(
        came_from: dict[tuple[int, int], tuple[int, int]],
        current: tuple[int, int],
    ) -> list[Vector2]:
        """Walk back through came_from to build the path."""
        path: list[Vector2] = []
        while current in came_from:
            path.append(Vector2(current[0], current[1]))
            current = came_from[current]
        path.reverse()
        return path
