"""GET /api/v1/config — expose session configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from gridtactics.api.dependencies import get_session_manager
from gridtactics.api.schemas import SessionConfigResponse
from gridtactics.api.session_manager import SessionManager

router = APIRouter()


@router.get("/config", response_model=SessionConfigResponse)
def get_config(
    manager: SessionManager = Depends(get_session_manager),
) -> SessionConfigResponse:
    cfg = manager.config
    return SessionConfigResponse(
        seed=cfg.seed,
        grid_width=cfg.grid_width,
        grid_height=cfg.grid_height,
        tile_size=cfg.tile_size,
        player_units=list(cfg.player_units),
        enemy_units=list(cfg.enemy_units),
        enemy_think_seconds=cfg.enemy_think_seconds,
    )
