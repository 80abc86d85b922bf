"""InteractionResolver: applies the consequences of the hero arriving on a cell.

Order on arrival:
  1. collectible pickup
  2. damaging obstacle (hazard), and the ``it`` tag
  3. enemy collision (only when the rule set enables it)

Every hit to the hero goes through ``damage_hero`` so defeat is flagged
eagerly the moment health reaches zero.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dungeon_script.core.enums import CollectibleType, ObstacleType, PowerUpType
from dungeon_script.core.models import Vector2

if TYPE_CHECKING:
    from dungeon_script.engine.context import RunContext

logger = logging.getLogger(__name__)


class InteractionResolver:
    """Stateless handler for everything that happens at a destination cell."""

    @staticmethod
    def arrive(ctx: RunContext, pos: Vector2) -> None:
        InteractionResolver.collect(ctx, pos)
        InteractionResolver.hazard(ctx, pos)
        if ctx.rules.enemy_collision and not ctx.world.game_over:
            InteractionResolver.collide(ctx, pos)

    # -- 1. collectibles --

    @staticmethod
    def collect(ctx: RunContext, pos: Vector2) -> None:
        world = ctx.world
        item = world.collectible_at(pos)
        if item is None:
            return
        item.collected = True
        hero = world.character

        match item.type:
            case CollectibleType.GEM:
                hero.gems += item.value
                world.score += item.value
                ctx.say(f"Collected gem! +{item.value} gems")
            case CollectibleType.HEART:
                hero.health = min(hero.max_health, hero.health + item.value)
                ctx.say(f"Collected heart! +{item.value} health")
            case CollectibleType.KEY:
                hero.has_key = True
                world.keys += 1
                ctx.say("Collected key! You can now exit.")
            case CollectibleType.COIN:
                world.score += item.value
                ctx.say(f"Collected coin! +{item.value} points")
            case CollectibleType.FOOD:
                if hero.food is not None:
                    cap = hero.max_food if hero.max_food is not None else hero.food + item.value
                    hero.food = min(cap, hero.food + item.value)
                ctx.say(f"Collected food! +{item.value} food")
            case CollectibleType.POTION:
                world.potions += 1
                effect = item.effect.value if item.effect else ctx.config.potion_default_effect
                ctx.say(f"Collected {effect} potion!")
            case CollectibleType.TREASURE:
                world.score += item.value
                ctx.say(f"Collected treasure! +{item.value} points")

    # -- 2. obstacles --

    @staticmethod
    def hazard(ctx: RunContext, pos: Vector2) -> None:
        world = ctx.world
        obstacle = world.obstacle_at(pos)
        if obstacle is not None and obstacle.type == ObstacleType.IT and not world.it_tagged:
            world.it_tagged = True
            ctx.say("You've been tagged as 'It'! All enemies will target you!")

        hazard = world.hazard_at(pos)
        if hazard is None:
            return
        if InteractionResolver.protected(ctx):
            ctx.say(f"Invincibility protected you from the {hazard.type.value}!")
            return
        InteractionResolver.damage_hero(
            ctx,
            hazard.damage or 0,
            f"Hit {hazard.type.value}! Lost {hazard.damage} health.",
            "You have been defeated by the environment!",
        )

    # -- 3. enemies --

    @staticmethod
    def collide(ctx: RunContext, pos: Vector2) -> None:
        enemy = ctx.world.live_enemy_at(pos)
        if enemy is None:
            return
        if InteractionResolver.protected(ctx):
            ctx.say(f"Invincibility protected you from the {enemy.type.value}!")
            return
        InteractionResolver.damage_hero(
            ctx,
            enemy.damage,
            f"Collided with {enemy.type.value}! Lost {enemy.damage} health.",
            "You have been defeated!",
        )

    # -- shared --

    @staticmethod
    def protected(ctx: RunContext) -> bool:
        return ctx.world.has_power_up(PowerUpType.INVINCIBILITY)

    @staticmethod
    def damage_hero(ctx: RunContext, amount: int, message: str, defeat_message: str) -> None:
        """Subtract *amount* from the hero's health and flag defeat at zero."""
        hero = ctx.world.character
        hero.health -= amount
        ctx.say(message)
        if hero.health <= 0 and not ctx.world.game_over:
            ctx.say(defeat_message)
            ctx.world.game_over = True
            logger.info("Hero defeated (health=%d)", hero.health)
