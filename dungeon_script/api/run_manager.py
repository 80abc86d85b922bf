"""RunManager: builds worlds from levels and drives scripts for the API.

Every request gets its own world and ScriptRunner, so concurrent requests
never share mutable state.  Runs use the manager's config, normally with
pacing delays removed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dungeon_script.config import EngineConfig, instant
from dungeon_script.core.levels import LEVEL_CATALOG, Level, get_level
from dungeon_script.core.snapshot import FrameRecorder
from dungeon_script.core.world_state import WorldState
from dungeon_script.engine.rules import rules_for
from dungeon_script.engine.scheduler import ScriptRunner

if TYPE_CHECKING:
    from dungeon_script.api.schemas import RunRequest

logger = logging.getLogger(__name__)


class RunResult:
    """Outcome of one API-driven run."""

    __slots__ = ("runner", "recorder", "code_lines")

    def __init__(self, runner: ScriptRunner, recorder: FrameRecorder) -> None:
        self.runner = runner
        self.recorder = recorder
        last = recorder.last
        self.code_lines = list(last.code_lines) if last else []


class RunManager:
    """Level catalog access plus one-shot script execution."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config if config is not None else instant()

    def levels(self) -> list[Level]:
        return sorted(LEVEL_CATALOG.values(), key=lambda lvl: lvl.id)

    def level(self, level_id: int) -> Level:
        return get_level(level_id)

    def resolve_level(self, request: RunRequest) -> Level:
        if request.level is not None:
            return request.level.to_level()
        return get_level(request.level_id)

    async def run(self, level: Level, script: str) -> RunResult:
        world = WorldState.from_level(level)
        runner = ScriptRunner(world, rules=rules_for(level.rules), config=self.config)
        recorder = FrameRecorder()
        status = await runner.run(script, recorder)
        logger.info("API run on level %d finished: %s", level.id, status.value)
        return RunResult(runner, recorder)
