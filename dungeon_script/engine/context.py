"""Per-run context threaded through commands, resolver, and rule hooks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from dungeon_script.config import EngineConfig
from dungeon_script.core.world_state import WorldState
from dungeon_script.systems.rng import DeterministicRNG
from dungeon_script.utils.narration import NarrationLog

if TYPE_CHECKING:
    from dungeon_script.engine.rules import RuleSet


@dataclass(slots=True)
class RunContext:
    """Everything one run needs, passed explicitly instead of living in globals."""

    world: WorldState
    rules: RuleSet
    config: EngineConfig
    narration: NarrationLog
    clock: Callable[[], float]
    rng: DeterministicRNG
    start_time: float = 0.0
    pattern_draws: int = field(default=0)

    def now(self) -> float:
        return self.clock()

    def elapsed(self) -> float:
        return self.clock() - self.start_time

    def say(self, message: str) -> None:
        self.narration.add(message)
