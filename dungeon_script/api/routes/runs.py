"""POST /api/v1/runs: execute a script against a level and return every frame."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from dungeon_script.api.dependencies import get_run_manager
from dungeon_script.api.run_manager import RunManager
from dungeon_script.api.schemas import FrameSchema, RunRequest, RunResponse, WorldStateSchema
from dungeon_script.core.levels import LevelNotFoundError

router = APIRouter()


@router.post("/runs", response_model=RunResponse)
async def create_run(
    request: RunRequest,
    manager: RunManager = Depends(get_run_manager),
) -> RunResponse:
    try:
        level = manager.resolve_level(request)
    except LevelNotFoundError:
        raise HTTPException(status_code=404, detail=f"Level {request.level_id} not found.") from None

    result = await manager.run(level, request.script)
    runner = result.runner
    frames = result.recorder.frames if request.include_frames else []
    return RunResponse(
        status=runner.status,
        is_complete=runner.world.is_complete,
        game_over=runner.world.game_over,
        logs=runner.logs,
        code_lines=result.code_lines,
        final_state=WorldStateSchema.from_world(runner.world),
        frames=[FrameSchema.from_frame(f) for f in frames],
    )
