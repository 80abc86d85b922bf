"""GET /api/v1/levels: the built-in level catalog."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from dungeon_script.api.dependencies import get_run_manager
from dungeon_script.api.run_manager import RunManager
from dungeon_script.api.schemas import LevelSchema, LevelSummary
from dungeon_script.core.levels import LevelNotFoundError

router = APIRouter()


@router.get("/levels", response_model=list[LevelSummary])
def list_levels(manager: RunManager = Depends(get_run_manager)) -> list[LevelSummary]:
    return [LevelSummary.model_validate(level) for level in manager.levels()]


@router.get("/levels/{level_id}", response_model=LevelSchema)
def get_level(level_id: int, manager: RunManager = Depends(get_run_manager)) -> LevelSchema:
    try:
        level = manager.level(level_id)
    except LevelNotFoundError:
        raise HTTPException(status_code=404, detail=f"Level {level_id} not found.") from None
    return LevelSchema.model_validate(level)
