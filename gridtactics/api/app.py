"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gridtactics.api.dependencies import set_session_manager
from gridtactics.api.routes import api_router
from gridtactics.api.session_manager import SessionManager
from gridtactics.config import SessionConfig
from gridtactics.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: SessionConfig | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = SessionConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = SessionManager(_config)
        set_session_manager(manager)
        manager.start()
        logger.info("API server started — battle running.")
        yield
        manager.stop()
        set_session_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Grid Tactics Engine",
        description=(
            "Turn-based tactical grid simulation — driver API.\n\n"
            "## API Groups\n\n"
            "- **State** — Turn, active side, outcome, units, and the event feed\n"
            "- **Map** — Static terrain grid (fetch once)\n"
            "- **Units** — Movement range, move, attack, attack forecast\n"
            "- **Control** — End the player turn, reset the battle\n"
            "- **Config** — Read-only session configuration\n"
            "- **Metadata** — Terrain catalogue and unit archetypes\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Live battle state polled by the frontend."},
            {"name": "Map", "description": "Static terrain data. The tile layout does not change during a battle."},
            {"name": "Units", "description": "Per-unit queries and actions for the active side."},
            {"name": "Control", "description": "Turn hand-over and battle reset."},
            {"name": "Config", "description": "Read-only session configuration parameters."},
            {"name": "Metadata", "description": "Terrain definitions and unit archetype presets."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app
