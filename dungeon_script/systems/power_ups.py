"""Power-up lifecycle: granting from potions and specials, expiry per tick."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dungeon_script.core.effects import PowerUp, potion_power_up, special_power_up
from dungeon_script.core.enums import PowerUpType

if TYPE_CHECKING:
    from dungeon_script.engine.context import RunContext

logger = logging.getLogger(__name__)


class PowerUpSystem:
    """Stateless; every power-up lives on ``WorldState.power_ups``."""

    @staticmethod
    def grant(ctx: RunContext, effect: PowerUpType, duration: float, special: bool = False) -> PowerUp:
        factory = special_power_up if special else potion_power_up
        power_up = factory(effect, duration, ctx.now(), ctx.world.next_serial())
        ctx.world.power_ups.append(power_up)
        ctx.world.refresh_active_effects()
        logger.debug("Granted %s for %.1fs", power_up.id, duration)
        return power_up

    @staticmethod
    def use_potion(ctx: RunContext) -> PowerUp | None:
        world = ctx.world
        potion = world.potion_in_inventory()
        if potion is None:
            ctx.say("No potion in inventory!")
            return None

        potion.consumed = True
        world.potions = max(0, world.potions - 1)
        effect = potion.effect or PowerUpType(ctx.config.potion_default_effect)
        duration = potion.duration or ctx.config.potion_default_duration
        power_up = PowerUpSystem.grant(ctx, effect, duration)
        ctx.say(f"Used {effect.value} potion! Effect active for {duration:g} seconds.")
        return power_up

    @staticmethod
    def expire(ctx: RunContext, now: float) -> list[PowerUp]:
        """Drop power-ups whose duration has elapsed; returns the expired ones."""
        world = ctx.world
        kept: list[PowerUp] = []
        expired: list[PowerUp] = []
        for power_up in world.power_ups:
            if power_up.is_active and power_up.expired(now):
                power_up.is_active = False
                expired.append(power_up)
                ctx.say(f"{power_up.type.value} power-up has expired!")
            else:
                kept.append(power_up)
        world.power_ups = kept
        world.refresh_active_effects()
        return expired
