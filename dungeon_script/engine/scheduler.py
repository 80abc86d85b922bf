"""ScriptRunner: the statement scheduler that drives one script run.

Lifecycle: idle -> running -> (completed | failed)

Per statement unit:
  1. on_update(pre)    highlight the unit's header line
  2. sleep(step_delay)
  3. execute the unit against the command surface (atomic)
  4. rule-set upkeep at the current clock reading
  5. on_update(post)
  6. stop if a terminal flag is set, otherwise sleep(settle_delay)

After the last unit the outcome is evaluated once, and a final
on_update is always delivered with ``current_line == -1``.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import Any, Awaitable, Callable

from dungeon_script.config import EngineConfig
from dungeon_script.core.enums import RunStatus
from dungeon_script.core.world_state import WorldState
from dungeon_script.engine.commands import HeroCommands
from dungeon_script.engine.context import RunContext
from dungeon_script.engine.errors import RunInProgressError, ScriptError
from dungeon_script.engine.evaluator import ScriptEvaluator
from dungeon_script.engine.expander import MacroExpander
from dungeon_script.engine.outcome import OutcomeEvaluator
from dungeon_script.engine.rules import BasicRules, RuleSet
from dungeon_script.engine.statements import split_units
from dungeon_script.systems.rng import DeterministicRNG
from dungeon_script.utils.narration import NarrationLog

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[WorldState, list[str], int, list[str]], Any]
Sleep = Callable[[float], Awaitable[Any]]


class ScriptRunner:
    """Runs scripts against one world, one at a time.

    The world is mutated in place; callbacks receive deep copies so a
    consumer may keep them as animation frames.
    """

    __slots__ = ("_world", "_rules", "_config", "_clock", "_sleep", "_narration", "_rng", "_status")

    def __init__(
        self,
        world: WorldState,
        rules: RuleSet | None = None,
        config: EngineConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
        narration: NarrationLog | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._world = world
        self._rules = rules or BasicRules()
        self._config = config or EngineConfig()
        self._clock = clock
        self._sleep = sleep
        self._narration = narration if narration is not None else NarrationLog()
        self._rng = DeterministicRNG(self._config.seed)
        self._status = RunStatus.IDLE

    @property
    def world(self) -> WorldState:
        return self._world

    @property
    def rules(self) -> RuleSet:
        return self._rules

    @property
    def status(self) -> RunStatus:
        return self._status

    @property
    def logs(self) -> list[str]:
        return self._narration.entries()

    async def run(self, script: str, on_update: UpdateCallback | None = None) -> RunStatus:
        """Execute *script* to completion, failure or a terminal flag."""
        if self._status is RunStatus.RUNNING:
            raise RunInProgressError("a script is already running on this world")
        self._status = RunStatus.RUNNING

        world = self._world
        cfg = self._config
        narration = self._narration
        narration.clear()
        world.is_running = True

        ctx = RunContext(
            world=world,
            rules=self._rules,
            config=cfg,
            narration=narration,
            clock=self._clock,
            rng=self._rng,
            start_time=self._clock(),
        )
        evaluator = ScriptEvaluator(
            HeroCommands(ctx),
            object_name=self._rules.object_name,
            halted=lambda: world.terminal,
            max_loop_iterations=cfg.max_loop_iterations,
            max_statement_steps=cfg.max_statement_steps,
        )
        expander = MacroExpander(
            object_name=self._rules.object_name,
            commands=self._rules.commands,
            max_repeat=cfg.max_repeat,
            narration=narration,
        )

        code_lines: list[str] = []
        current = ""
        try:
            expanded = expander.expand(script)
            code_lines = expanded.code_lines
            narration.add("Starting step-by-step execution...")
            self._rules.begin(ctx)

            for unit in split_units(expanded.text):
                current = unit.header
                await self._emit(on_update, unit.index, code_lines)
                await self._sleep(cfg.step_delay)

                narration.add(f"Executing: {unit.header}")
                evaluator.execute(unit.source)
                self._rules.tick(ctx, ctx.now())

                await self._emit(on_update, unit.index, code_lines)
                if world.terminal:
                    logger.debug("Terminal flag set after line %d; stopping", unit.index)
                    break
                await self._sleep(cfg.settle_delay)

            narration.add("Code execution completed successfully!")
            OutcomeEvaluator.check(ctx)

        except ScriptError as exc:
            narration.warn(f'Error: Failed to execute "{current}": {exc}')
            world.game_over = True

        finally:
            world.is_running = False
            self._status = RunStatus.FAILED if world.game_over else RunStatus.COMPLETED
            logger.info(
                "Run finished: %s (complete=%s, game_over=%s, moves=%d, score=%d)",
                self._status.value, world.is_complete, world.game_over, world.moves, world.score,
            )
            await self._emit(on_update, -1, code_lines)

        return self._status

    def run_sync(self, script: str, on_update: UpdateCallback | None = None) -> RunStatus:
        """Blocking wrapper for callers without an event loop."""
        return asyncio.run(self.run(script, on_update))

    async def _emit(self, on_update: UpdateCallback | None, current_line: int, code_lines: list[str]) -> None:
        if on_update is None:
            return
        result = on_update(self._world.copy(), self._narration.entries(), current_line, list(code_lines))
        if inspect.isawaitable(result):
            await result
