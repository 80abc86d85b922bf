"""Voice-line announcements, each played at most once per run."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dungeon_script.engine.context import RunContext

VOICE_LINES: dict[str, str] = {
    "welcome": "Welcome to the Gauntlet, {name}!",
    "food": "{name} needs food, badly!",
    "dying": "{name} is about to die!",
}


def announce(ctx: RunContext, key: str) -> bool:
    """Play the voice line *key* unless it already played this run."""
    world = ctx.world
    if key in world.announcements:
        return False
    world.announcements.add(key)
    text = VOICE_LINES[key].format(name=world.character.name)
    ctx.say(f'Voice: "{text}"')
    return True
