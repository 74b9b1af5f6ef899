"""GET /api/v1/map — static terrain data (fetch once)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from gridtactics.api.dependencies import get_session_manager
from gridtactics.api.schemas import MapResponse
from gridtactics.api.session_manager import SessionManager

router = APIRouter()

MISSING_TILE = -1


def rle_encode(tiles: list[int | None]) -> list[int]:
    """Run-length encode as [value, count, value, count, ...]."""
    rle: list[int] = []
    if not tiles:
        return rle
    cur_val = MISSING_TILE if tiles[0] is None else int(tiles[0])
    cur_count = 1
    for t in tiles[1:]:
        v = MISSING_TILE if t is None else int(t)
        if v == cur_val:
            cur_count += 1
        else:
            rle.append(cur_val)
            rle.append(cur_count)
            cur_val = v
            cur_count = 1
    rle.append(cur_val)
    rle.append(cur_count)
    return rle


@router.get("/map", response_model=MapResponse)
def get_map(manager: SessionManager = Depends(get_session_manager)) -> MapResponse:
    with manager.lock:
        session = manager.session
        tiles = session.tiles if session else None
        if tiles is None:
            raise HTTPException(status_code=503, detail="Battle not initialized yet.")
        return MapResponse(
            width=tiles.width,
            height=tiles.height,
            tile_size=tiles.tile_size,
            grid=rle_encode(tiles.raw_tiles()),
        )
