"""MoveAction: validates and applies single-cell hero moves.

A blocked move (grid edge or wall) is narration, never an exception:
position and move counter stay untouched and the script carries on.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dungeon_script.core.enums import Direction
from dungeon_script.core.models import DIRECTION_OFFSETS, Vector2
from dungeon_script.systems.resolver import InteractionResolver

if TYPE_CHECKING:
    from dungeon_script.core.world_state import WorldState
    from dungeon_script.engine.context import RunContext

logger = logging.getLogger(__name__)


class MoveAction:
    """Stateless handler for hero movement."""

    @staticmethod
    def blocked_reason(world: WorldState, direction: Direction, target: Vector2) -> str | None:
        if not world.in_bounds(target):
            return f"Cannot move {direction.value} - outside the grid!"
        if world.is_wall(target):
            return f"Cannot move {direction.value} - wall blocking!"
        return None

    @staticmethod
    def step(ctx: RunContext, direction: Direction) -> bool:
        """Try to move one cell; returns True when the hero actually moved."""
        world = ctx.world
        hero = world.character
        target = hero.position + DIRECTION_OFFSETS[direction]

        reason = MoveAction.blocked_reason(world, direction, target)
        if reason is not None:
            logger.debug("Hero blocked at %s heading %s", hero.position, direction.value)
            ctx.say(reason)
            return False

        hero.position = target
        hero.direction = direction
        world.moves += 1
        ctx.say(f"Moved {direction.value} to ({target.x}, {target.y})")

        InteractionResolver.arrive(ctx, target)
        return True
