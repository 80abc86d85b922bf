"""DungeonArena: test fixture for actions, rules and full script runs.

Builds a small world with a controllable clock, exposes the run context
for calling actions and rule hooks directly, and can drive whole scripts
through a ScriptRunner.

Usage:
    arena = DungeonArena(rules="gauntlet")
    arena.add_enemy(EnemyType.GRUNT, 1, 0)
    arena.commands.attack()
    assert arena.world.score == 50
"""

from __future__ import annotations

import asyncio
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from dungeon_script.config import EngineConfig, instant
from dungeon_script.core.enums import CharacterClass, CollectibleType, EnemyType, ObstacleType, RunStatus
from dungeon_script.core.models import Character, Collectible, Enemy, Obstacle, Vector2
from dungeon_script.core.world_state import WorldState
from dungeon_script.engine.commands import HeroCommands
from dungeon_script.engine.context import RunContext
from dungeon_script.engine.rules import rules_for
from dungeon_script.engine.scheduler import ScriptRunner
from dungeon_script.systems.rng import DeterministicRNG
from dungeon_script.utils.narration import NarrationLog


class FakeClock:
    """Manually advanced clock; ``sleep`` advances it instead of waiting."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.slept: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.slept.append(seconds)
        self.advance(seconds)


class DungeonArena:
    """A world, a rule set and a fake clock wired together."""

    def __init__(
        self,
        width: int = 10,
        height: int = 10,
        rules: str = "basic",
        hero_at: tuple[int, int] = (0, 0),
        exit_at: tuple[int, int] | None = None,
        hero_class: CharacterClass = CharacterClass.WARRIOR,
        health: int = 100,
        food: int | None = None,
        paced: bool = False,
        **config_overrides,
    ):
        config = EngineConfig(**config_overrides)
        self.config = config if paced else instant(config)
        self.clock = FakeClock()
        self.narration = NarrationLog()
        self.rules = rules_for(rules)

        ex, ey = exit_at if exit_at is not None else (width - 1, height - 1)
        self.world = WorldState(
            character=Character(
                position=Vector2(*hero_at),
                hero_class=hero_class,
                health=health,
                food=food,
                max_food=100 if food is not None else None,
            ),
            exit=Vector2(ex, ey),
            grid_width=width,
            grid_height=height,
        )
        self.ctx = RunContext(
            world=self.world,
            rules=self.rules,
            config=self.config,
            narration=self.narration,
            clock=self.clock,
            rng=DeterministicRNG(self.config.seed),
            start_time=self.clock(),
        )
        self.commands = HeroCommands(self.ctx)
        self.runner: ScriptRunner | None = None
        self.frames: list[tuple[WorldState, list[str], int, list[str]]] = []

    # -- world building --

    def add_wall(self, x: int, y: int) -> Obstacle:
        obstacle = Obstacle(position=Vector2(x, y), type=ObstacleType.WALL)
        self.world.obstacles.append(obstacle)
        return obstacle

    def add_hazard(self, kind: ObstacleType, x: int, y: int, damage: int | None = None) -> Obstacle:
        obstacle = Obstacle(position=Vector2(x, y), type=kind, damage=damage)
        self.world.obstacles.append(obstacle)
        return obstacle

    def add_generator(
        self,
        x: int,
        y: int,
        generates: EnemyType | None = None,
        rate: float | None = None,
        health: int | None = None,
    ) -> Obstacle:
        obstacle = Obstacle(
            position=Vector2(x, y),
            type=ObstacleType.GENERATOR,
            generates_type=generates,
            generation_rate=rate,
            health=health,
        )
        self.world.obstacles.append(obstacle)
        return obstacle

    def add_item(self, kind: CollectibleType, x: int, y: int, value: int = 0, **extra) -> Collectible:
        item = Collectible(
            id=f"{kind.value}{len(self.world.collectibles)}",
            position=Vector2(x, y),
            type=kind,
            value=value,
            **extra,
        )
        self.world.collectibles.append(item)
        return item

    def add_enemy(self, kind: EnemyType, x: int, y: int, health: int = 20, damage: int = 10) -> Enemy:
        enemy = Enemy(
            id=f"{kind.value}{len(self.world.enemies)}",
            type=kind,
            position=Vector2(x, y),
            health=health,
            max_health=health,
            damage=damage,
        )
        self.world.enemies.append(enemy)
        return enemy

    # -- driving --

    @property
    def hero(self) -> Character:
        return self.world.character

    @property
    def logs(self) -> list[str]:
        return self.narration.entries()

    def log_count(self, fragment: str) -> int:
        return sum(1 for entry in self.logs if fragment in entry)

    def begin(self) -> None:
        """Run the rule set's start-of-run hook (generators, hunger timer)."""
        self.rules.begin(self.ctx)

    def tick(self, seconds: float = 0.0) -> None:
        """Advance the clock and run one statement-boundary upkeep."""
        self.clock.advance(seconds)
        self.rules.tick(self.ctx, self.clock())

    def run(self, script: str) -> RunStatus:
        self.frames = []

        def record(state, logs, current_line, code_lines):
            self.frames.append((state, logs, current_line, code_lines))

        self.runner = ScriptRunner(
            self.world,
            rules=self.rules,
            config=self.config,
            clock=self.clock,
            narration=self.narration,
            sleep=self.clock.sleep,
        )
        return asyncio.run(self.runner.run(script, record))
