"""Win/loss evaluation, run once after the script finishes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dungeon_script.engine.context import RunContext

logger = logging.getLogger(__name__)


class OutcomeEvaluator:
    """Sets ``is_complete`` when the hero stands on the exit with any required key.

    Defeat is flagged eagerly by the resolver; a world already in
    ``game_over`` is never marked complete.
    """

    @staticmethod
    def check(ctx: RunContext) -> bool:
        world = ctx.world
        hero = world.character
        if world.game_over or hero.position != world.exit:
            return False

        if world.key_required() and not hero.has_key:
            ctx.say("You need a key to exit!")
            return False

        world.is_complete = True
        ctx.say("Level completed! Well done!")
        logger.info("Level %d completed in %d moves (score %d)", world.current_level, world.moves, world.score)
        return True
