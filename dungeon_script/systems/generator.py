"""Enemy generators: spawners derived from ``generator`` obstacles."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dungeon_script.core.enums import Domain, EnemyType, ObstacleType
from dungeon_script.core.models import Enemy, Generator, Vector2

if TYPE_CHECKING:
    from dungeon_script.engine.context import RunContext

logger = logging.getLogger(__name__)


class EnemyGenerator:
    """Builds runtime generators and spawns their enemies when due.

    There is no background timer: ``tick`` is called at each statement
    boundary with the current clock reading, so spawn granularity is
    bounded by the scheduler's pacing.
    """

    __slots__ = ()

    def initialize(self, ctx: RunContext) -> list[Generator]:
        """Create one Generator per generator obstacle, timers starting now."""
        cfg = ctx.config
        now = ctx.now()
        generators: list[Generator] = []
        for index, obstacle in enumerate(ctx.world.obstacles):
            if obstacle.type != ObstacleType.GENERATOR:
                continue
            health = obstacle.health or cfg.generator_default_health
            generators.append(Generator(
                id=f"gen{index}",
                position=obstacle.position,
                type=obstacle.generates_type or EnemyType(cfg.generator_default_type),
                health=health,
                max_health=health,
                generation_rate=obstacle.generation_rate or cfg.generator_default_rate,
                last_generated=now,
            ))
        ctx.world.generators = generators
        logger.debug("Initialized %d generators", len(generators))
        return generators

    def tick(self, ctx: RunContext, now: float) -> list[Enemy]:
        spawned: list[Enemy] = []
        for gen in ctx.world.generators:
            if not gen.due(now):
                continue
            enemy = self.spawn(ctx, gen)
            if enemy is not None:
                spawned.append(enemy)
            gen.last_generated = now
        return spawned

    def free_cells(self, ctx: RunContext, gen: Generator) -> list[Vector2]:
        world = ctx.world
        hero_pos = world.character.position
        return [
            pos for pos in gen.position.neighbors()
            if world.in_bounds(pos)
            and pos != hero_pos
            and world.obstacle_at(pos) is None
            and world.live_enemy_at(pos) is None
        ]

    def spawn(self, ctx: RunContext, gen: Generator) -> Enemy | None:
        cells = self.free_cells(ctx, gen)
        if not cells:
            logger.debug("Generator %s has no free cell to spawn into", gen.id)
            return None

        key = ctx.world.generators.index(gen)
        pos = ctx.rng.choice(Domain.SPAWN, key, gen.spawned, cells)
        cfg = ctx.config
        enemy = Enemy(
            id=f"{gen.type.value}{ctx.world.next_serial()}",
            type=gen.type,
            position=pos,
            health=cfg.spawned_enemy_health,
            max_health=cfg.spawned_enemy_health,
            damage=cfg.spawned_enemy_damage,
            spawned_from_generator=True,
            generator_id=gen.id,
        )
        ctx.world.enemies.append(enemy)
        gen.spawned += 1
        ctx.say(f"A {gen.type.value} spawned from generator at ({gen.position.x}, {gen.position.y})!")
        return enemy
