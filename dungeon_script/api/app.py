"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dungeon_script.api.dependencies import set_run_manager
from dungeon_script.api.run_manager import RunManager
from dungeon_script.api.routes import api_router
from dungeon_script.config import EngineConfig, instant
from dungeon_script.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: EngineConfig | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    _config = config if config is not None else instant()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level, narration=False)
        set_run_manager(RunManager(_config))
        logger.info("API server started (seed=%d).", _config.seed)
        yield
        set_run_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Dungeon Script Engine",
        description=(
            "Runs learner scripts against dungeon levels and returns every step frame.\n\n"
            "## API Groups\n\n"
            "- **Levels**: Built-in level catalog: layout, objective, hints, starter code\n"
            "- **Runs**: Execute a script against a catalog level or an inline level\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Levels", "description": "Level catalog. Static data; fetch once per level."},
            {"name": "Runs", "description": "Script execution. Each run uses a fresh world built from the level."},
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
