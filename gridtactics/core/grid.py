"""Tile map — the tile-data provider backing terrain queries."""

from __future__ import annotations

from typing import Mapping, Protocol, Sequence

from gridtactics.core.enums import TerrainId
from gridtactics.core.models import Vector2


class TileDataProvider(Protocol):
    """Anything that can say which terrain id sits at a grid coordinate."""

    def in_bounds(self, pos: Vector2) -> bool:
        """Whether *pos* lies on the map at all."""

    def tile_at(self, pos: Vector2) -> int | None:
        """Terrain id at *pos*, or None when there is no tile."""

    def coord_at(self, world_x: float, world_y: float) -> Vector2:
        """Grid coordinate containing a world-space point."""


# Default legend for ASCII maps
ASCII_LEGEND: dict[str, TerrainId] = {
    ".": TerrainId.PLAIN,
    "=": TerrainId.ROAD,
    "f": TerrainId.FOREST,
    "h": TerrainId.HILL,
    "M": TerrainId.MOUNTAIN,
    "F": TerrainId.FORT,
    "~": TerrainId.RIVER,
    "#": TerrainId.WALL,
}


class TileMap:
    """2D tile grid backed by a flat list.  ``None`` marks a missing tile."""

    __slots__ = ("width", "height", "tile_size", "_tiles")

    def __init__(
        self,
        width: int,
        height: int,
        default: int | None = TerrainId.PLAIN,
        tile_size: int = 16,
    ) -> None:
        self.width = width
        self.height = height
        self.tile_size = tile_size
        self._tiles: list[int | None] = [default] * (width * height)

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[str],
        legend: Mapping[str, int] | None = None,
        tile_size: int = 16,
    ) -> TileMap:
        """Build a map from equal-length ASCII rows (row 0 is y=0).

        Characters absent from the legend (e.g. a space) become missing tiles.
        """
        legend = ASCII_LEGEND if legend is None else legend
        height = len(rows)
        width = max((len(r) for r in rows), default=0)
        tm = cls(width, height, default=None, tile_size=tile_size)
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                tm._tiles[y * width + x] = legend.get(ch)
        return tm

    # -- access --

    def in_bounds(self, pos: Vector2) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def tile_at(self, pos: Vector2) -> int | None:
        if not self.in_bounds(pos):
            return None
        return self._tiles[pos.y * self.width + pos.x]

    def set(self, pos: Vector2, terrain_id: int) -> None:
        if self.in_bounds(pos):
            self._tiles[pos.y * self.width + pos.x] = terrain_id

    def clear(self, pos: Vector2) -> None:
        if self.in_bounds(pos):
            self._tiles[pos.y * self.width + pos.x] = None

    def coord_at(self, world_x: float, world_y: float) -> Vector2:
        return Vector2(int(world_x // self.tile_size), int(world_y // self.tile_size))

    def coords(self) -> list[Vector2]:
        return [Vector2(x, y) for y in range(self.height) for x in range(self.width)]

    def raw_tiles(self) -> list[int | None]:
        """Flat row-major copy of the tile ids."""
        return list(self._tiles)

    # -- copy --

    def copy(self) -> TileMap:
        new = TileMap.__new__(TileMap)
        new.width = self.width
        new.height = self.height
        new.tile_size = self.tile_size
        new._tiles = list(self._tiles)
        return new
