"""Food decay and starvation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dungeon_script.systems.announcer import announce
from dungeon_script.systems.resolver import InteractionResolver

if TYPE_CHECKING:
    from dungeon_script.engine.context import RunContext

logger = logging.getLogger(__name__)


class HungerSystem:
    """Drains the food meter by whole elapsed seconds.

    Once the meter is empty, each elapsed second costs health instead.
    Heroes without a food meter are never hungry.
    """

    __slots__ = ("_last_decay",)

    def __init__(self) -> None:
        self._last_decay = 0.0

    def reset(self, now: float) -> None:
        self._last_decay = now

    def tick(self, ctx: RunContext, now: float) -> int:
        """Apply decay for whole seconds since the last decay; returns seconds applied."""
        hero = ctx.world.character
        if hero.food is None:
            return 0
        seconds = int(now - self._last_decay)
        if seconds < 1:
            return 0
        self._last_decay = now

        cfg = ctx.config
        hero.food = max(0, hero.food - cfg.food_decay_per_second * seconds)
        if hero.food < cfg.food_warning_threshold:
            announce(ctx, "food")

        if hero.food <= 0 and hero.health > 0:
            InteractionResolver.damage_hero(
                ctx,
                cfg.starvation_damage_per_second * seconds,
                "No food left! Losing health!",
                "You have starved to death!",
            )
        logger.debug("Hunger tick: %ds, food=%s, health=%d", seconds, hero.food, hero.health)
        return seconds
