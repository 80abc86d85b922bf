"""CombatAction: resolves ``attack()`` and ability hits.

Target priority for ``attack()``:
  1. an undefeatable enemy (Death) within reach, which only drains the hero
  2. an active generator within one cell
  3. the first live enemy within reach

A surviving enemy always strikes back with its own damage.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dungeon_script.systems.resolver import InteractionResolver

if TYPE_CHECKING:
    from dungeon_script.core.models import Enemy, Generator
    from dungeon_script.engine.context import RunContext

logger = logging.getLogger(__name__)


class CombatAction:
    """Stateless handler for hero attacks."""

    @staticmethod
    def targets_in_reach(ctx: RunContext) -> list[Enemy]:
        origin = ctx.world.character.position
        return [e for e in ctx.world.live_enemies() if ctx.rules.in_reach(origin, e.position)]

    @staticmethod
    def attack(ctx: RunContext) -> None:
        world = ctx.world
        targets = CombatAction.targets_in_reach(ctx)

        death = next((e for e in targets if e.undefeatable), None)
        if death is not None:
            CombatAction.touch_death(ctx, death)
            return

        generator = world.active_generator_near(world.character.position)
        if generator is not None:
            CombatAction.strike_generator(ctx, generator)
            return

        if not targets:
            ctx.say("No enemies nearby to attack!")
            return

        CombatAction.strike(ctx, targets[0])

    @staticmethod
    def strike(ctx: RunContext, enemy: Enemy) -> None:
        damage = ctx.rules.hero_damage(ctx)
        enemy.health -= damage
        ctx.say(f"Attacked {enemy.type.value} for {damage} damage!")

        if enemy.health <= 0:
            CombatAction.defeat(ctx, enemy)
            return

        InteractionResolver.damage_hero(
            ctx,
            enemy.damage,
            f"{enemy.type.value} attacks back for {enemy.damage} damage!",
            "You have been defeated!",
        )

    @staticmethod
    def touch_death(ctx: RunContext, death: Enemy) -> None:
        ctx.say("Death cannot be defeated! Only avoided!")
        InteractionResolver.damage_hero(
            ctx,
            death.damage,
            f"Death drains {death.damage} health!",
            "You have been defeated by Death!",
        )

    @staticmethod
    def strike_generator(ctx: RunContext, generator: Generator) -> None:
        cfg = ctx.config
        generator.health -= cfg.generator_hit_damage
        ctx.say(f"Attacked generator for {cfg.generator_hit_damage} damage!")
        if generator.health > 0:
            return

        generator.is_active = False
        ctx.world.score += cfg.generator_destroy_score
        ctx.world.remove_generator_obstacle(generator)
        ctx.say(f"Destroyed the {generator.type.value} generator!")
        logger.info("Generator %s destroyed after %d spawns", generator.id, generator.spawned)

    @staticmethod
    def ability_hit(ctx: RunContext, enemy: Enemy, damage: int, weapon: str) -> None:
        """Damage from a class special; no counter-attack, Death is immune."""
        if enemy.undefeatable:
            ctx.say(f"The {weapon} passes straight through Death!")
            return
        enemy.health -= damage
        ctx.say(f"{weapon.capitalize()} hits {enemy.type.value} for {damage} damage!")
        if enemy.health <= 0:
            CombatAction.defeat(ctx, enemy, f" with {weapon}")

    @staticmethod
    def defeat(ctx: RunContext, enemy: Enemy, suffix: str = "") -> None:
        enemy.is_alive = False
        value = ctx.rules.enemy_value(enemy.type)
        ctx.world.score += value
        ctx.say(f"Defeated {enemy.type.value}{suffix}!")
        logger.debug("Enemy %s defeated (+%d)", enemy.id, value)
