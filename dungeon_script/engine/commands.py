"""HeroCommands: the command surface a script sees as ``hero``.

Built fresh for every run and bound to the live world through the run
context; nothing is attached to module or global state.  Which names are
callable or readable is decided by the active rule set.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from dungeon_script.actions.combat import CombatAction
from dungeon_script.actions.move import MoveAction
from dungeon_script.actions.specials import get_special_ability
from dungeon_script.core.enums import Direction, Domain, EnemyType
from dungeon_script.core.models import as_position
from dungeon_script.engine.errors import ScriptError
from dungeon_script.systems.power_ups import PowerUpSystem

if TYPE_CHECKING:
    from dungeon_script.engine.context import RunContext

logger = logging.getLogger(__name__)

# Script name -> (method name, positional argument count)
COMMAND_TABLE: dict[str, tuple[str, int]] = {
    "moveRight": ("move_right", 0),
    "moveLeft": ("move_left", 0),
    "moveUp": ("move_up", 0),
    "moveDown": ("move_down", 0),
    "attack": ("attack", 0),
    "useSpecial": ("use_special", 0),
    "usePotion": ("use_potion", 0),
    "isEnemyNear": ("is_enemy_near", 0),
    "detectEnemy": ("detect_enemy", 1),
    "distanceTo": ("distance_to", 1),
    "checkForDeath": ("check_for_death", 0),
    "observePattern": ("observe_pattern", 0),
    "dodge": ("dodge", 1),
    "findPath": ("find_path", 2),
    "say": ("say", 1),
}

PROPERTY_NAMES = frozenset({"health", "gems", "hasKey", "position", "food", "heroClass"})

BOSS_PATTERNS = ("fire", "ice", "lightning", "teleport")


class HeroCommands:
    """Fixed vocabulary of actions and queries against the live world."""

    __slots__ = ("_ctx",)

    def __init__(self, ctx: RunContext) -> None:
        self._ctx = ctx

    # -- dispatch (used by the evaluator) --

    def has_command(self, name: str) -> bool:
        return name in self._ctx.rules.commands and name in COMMAND_TABLE

    def has_property(self, name: str) -> bool:
        return name in self._ctx.rules.properties and name in PROPERTY_NAMES

    def read_property(self, name: str) -> Any:
        if not self.has_property(name):
            raise ScriptError(f"'{name}' is not a readable property")
        hero = self._ctx.world.character
        match name:
            case "health":
                return hero.health
            case "gems":
                return hero.gems
            case "hasKey":
                return hero.has_key
            case "position":
                return hero.position
            case "food":
                return hero.food
            case "heroClass":
                return hero.hero_class.value

    def invoke(self, name: str, args: list[Any]) -> Any:
        if not self.has_command(name):
            raise ScriptError(f"'{self._ctx.rules.object_name}.{name}' is not a command")
        method_name, arity = COMMAND_TABLE[name]
        logger.debug("invoke %s%r", name, tuple(args))
        if len(args) != arity:
            raise ScriptError(f"{name}() takes {arity} argument(s) but {len(args)} were given")
        return getattr(self, method_name)(*args)

    # -- movement --

    def move_right(self) -> None:
        MoveAction.step(self._ctx, Direction.RIGHT)

    def move_left(self) -> None:
        MoveAction.step(self._ctx, Direction.LEFT)

    def move_up(self) -> None:
        MoveAction.step(self._ctx, Direction.UP)

    def move_down(self) -> None:
        MoveAction.step(self._ctx, Direction.DOWN)

    def dodge(self, direction: Any) -> None:
        try:
            heading = Direction(direction)
        except ValueError:
            self._ctx.say(f"Unknown dodge direction: {direction}")
            return
        MoveAction.step(self._ctx, heading)

    def find_path(self, x: int, y: int) -> bool:
        """One greedy step toward (x, y): x axis first, then y.  Not real pathfinding."""
        ctx = self._ctx
        ctx.say(f"Finding path to ({x}, {y})...")
        pos = ctx.world.character.position
        if pos.x < x:
            heading = Direction.RIGHT
        elif pos.x > x:
            heading = Direction.LEFT
        elif pos.y < y:
            heading = Direction.DOWN
        elif pos.y > y:
            heading = Direction.UP
        else:
            return False
        MoveAction.step(ctx, heading)
        return True

    # -- combat & abilities --

    def attack(self) -> None:
        CombatAction.attack(self._ctx)

    def use_special(self) -> None:
        hero = self._ctx.world.character
        ability = get_special_ability(hero.hero_class)
        if ability is None:
            self._ctx.say("No special ability available for this character.")
            return
        ability.activate(self._ctx)

    def use_potion(self) -> None:
        PowerUpSystem.use_potion(self._ctx)

    # -- queries --

    def is_enemy_near(self) -> bool:
        return bool(CombatAction.targets_in_reach(self._ctx))

    def detect_enemy(self, enemy_type: Any) -> bool:
        try:
            kind = EnemyType(enemy_type)
        except ValueError:
            return False
        world = self._ctx.world
        return bool(world.enemies_within(world.character.position, self._ctx.config.detection_range, kind))

    def check_for_death(self) -> bool:
        world = self._ctx.world
        return bool(world.enemies_within(
            world.character.position, self._ctx.config.detection_range, EnemyType.DEATH,
        ))

    def distance_to(self, target: Any) -> int:
        return self._ctx.world.character.position.manhattan(as_position(target))

    def observe_pattern(self) -> str:
        """Random boss hint; unrelated to any actual boss state."""
        ctx = self._ctx
        draw = ctx.pattern_draws
        ctx.pattern_draws += 1
        return ctx.rng.choice(Domain.PATTERN, ctx.world.current_level, draw, BOSS_PATTERNS)

    # -- narration --

    def say(self, message: Any) -> None:
        self._ctx.say(f'{self._ctx.world.character.name} says: "{message}"')
