"""Versioned API route modules."""

from fastapi import APIRouter

from dungeon_script.api.routes.levels import router as levels_router
from dungeon_script.api.routes.runs import router as runs_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(levels_router, tags=["Levels"])
api_router.include_router(runs_router, tags=["Runs"])

__all__ = ["api_router"]
