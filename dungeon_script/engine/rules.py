"""Rule sets: the capability objects that parameterize the single interpreter core.

A RuleSet decides:
  - which commands and properties the script object exposes
  - how far ``attack()`` reaches and how hard the hero hits
  - what each enemy type is worth
  - whether walking into an enemy hurts
  - what upkeep runs at every statement boundary (food, generators, power-ups)

To add a variant:
  1. Subclass RuleSet.
  2. Register a factory in RULE_SETS.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable

from dungeon_script.core.enums import CharacterClass, EnemyType, PowerUpType
from dungeon_script.systems.announcer import announce
from dungeon_script.systems.generator import EnemyGenerator
from dungeon_script.systems.hunger import HungerSystem
from dungeon_script.systems.power_ups import PowerUpSystem

if TYPE_CHECKING:
    from dungeon_script.core.models import Vector2
    from dungeon_script.engine.context import RunContext

logger = logging.getLogger(__name__)


MOVE_COMMANDS = frozenset({"moveRight", "moveLeft", "moveUp", "moveDown"})

BASIC_COMMANDS = MOVE_COMMANDS | {"attack", "isEnemyNear", "distanceTo", "say"}
GAUNTLET_COMMANDS = BASIC_COMMANDS | {
    "useSpecial",
    "usePotion",
    "detectEnemy",
    "checkForDeath",
    "observePattern",
    "dodge",
    "findPath",
}

BASIC_PROPERTIES = frozenset({"health", "gems", "hasKey", "position"})
GAUNTLET_PROPERTIES = BASIC_PROPERTIES | {"food", "heroClass"}


# ---------------------------------------------------------------------------
# Abstract rule set
# ---------------------------------------------------------------------------

class RuleSet(ABC):
    """Base class for game-rule variants.

    Subclass and implement:
      - name: registry key ("basic", "gauntlet")
      - hero_damage(): damage of one ``attack()``
      - enemy_value(): score for defeating an enemy type
    """

    object_name: str = "hero"
    commands: frozenset[str] = BASIC_COMMANDS
    properties: frozenset[str] = BASIC_PROPERTIES
    enemy_collision: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key of this rule set."""

    @abstractmethod
    def hero_damage(self, ctx: RunContext) -> int:
        """Damage dealt by one ``attack()`` right now."""

    @abstractmethod
    def enemy_value(self, enemy_type: EnemyType) -> int:
        """Score awarded for defeating an enemy of *enemy_type*."""

    def in_reach(self, origin: Vector2, target: Vector2) -> bool:
        return origin.manhattan(target) <= 1

    def begin(self, ctx: RunContext) -> None:
        """Called once before the first statement of a run."""

    def tick(self, ctx: RunContext, now: float) -> None:
        """Called after every statement with the current clock reading."""


# ---------------------------------------------------------------------------
# Basic dungeon lessons
# ---------------------------------------------------------------------------

_BASIC_VALUES: dict[EnemyType, int] = {
    EnemyType.DRAGON: 100,
    EnemyType.ORC: 50,
}


class BasicRules(RuleSet):
    """Move, fight and collect.  No hunger, generators or power-ups."""

    hero_damage_amount = 25

    @property
    def name(self) -> str:
        return "basic"

    def hero_damage(self, ctx: RunContext) -> int:
        return self.hero_damage_amount

    def enemy_value(self, enemy_type: EnemyType) -> int:
        return _BASIC_VALUES.get(enemy_type, 30)

    def in_reach(self, origin: Vector2, target: Vector2) -> bool:
        return origin.manhattan(target) == 1


# ---------------------------------------------------------------------------
# Gauntlet
# ---------------------------------------------------------------------------

CLASS_DAMAGE: dict[CharacterClass, int] = {
    CharacterClass.WARRIOR: 25,
    CharacterClass.VALKYRIE: 20,
    CharacterClass.WIZARD: 15,
    CharacterClass.ELF: 18,
}
DEFAULT_CLASS_DAMAGE = 20

GAUNTLET_VALUES: dict[EnemyType, int] = {
    EnemyType.GRUNT: 50,
    EnemyType.GHOST: 75,
    EnemyType.DEMON: 100,
    EnemyType.SORCERER: 150,
    EnemyType.LOBBER: 125,
    EnemyType.DRAGON: 500,
    EnemyType.ORC: 60,
    EnemyType.SKELETON: 80,
}
DEFAULT_GAUNTLET_VALUE = 50


class GauntletRules(RuleSet):
    """Class-based combat, food decay, generators and timed power-ups."""

    commands = GAUNTLET_COMMANDS
    properties = GAUNTLET_PROPERTIES
    enemy_collision = True

    def __init__(self) -> None:
        self.generator = EnemyGenerator()
        self.hunger = HungerSystem()

    @property
    def name(self) -> str:
        return "gauntlet"

    def hero_damage(self, ctx: RunContext) -> int:
        damage = CLASS_DAMAGE.get(ctx.world.character.hero_class, DEFAULT_CLASS_DAMAGE)
        if ctx.world.has_power_up(PowerUpType.POWER):
            damage *= 2
            ctx.say("Power-up doubles your attack damage!")
        return damage

    def enemy_value(self, enemy_type: EnemyType) -> int:
        return GAUNTLET_VALUES.get(enemy_type, DEFAULT_GAUNTLET_VALUE)

    def begin(self, ctx: RunContext) -> None:
        self.generator.initialize(ctx)
        self.hunger.reset(ctx.now())
        logger.debug("Gauntlet rules armed with %d generators", len(ctx.world.generators))
        announce(ctx, "welcome")

    def tick(self, ctx: RunContext, now: float) -> None:
        world = ctx.world
        self.hunger.tick(ctx, now)
        self.generator.tick(ctx, now)
        PowerUpSystem.expire(ctx, now)
        world.time = int(now - ctx.start_time)

        hero = world.character
        if 0 < hero.health < ctx.config.critical_health_threshold:
            announce(ctx, "dying")


# ---------------------------------------------------------------------------
# Registry: maps name -> factory (rule sets may hold per-run state)
# ---------------------------------------------------------------------------

RULE_SETS: dict[str, Callable[[], RuleSet]] = {
    "basic": BasicRules,
    "gauntlet": GauntletRules,
}


def rules_for(name: str) -> RuleSet:
    """Build a fresh rule set by name."""
    try:
        return RULE_SETS[name]()
    except KeyError:
        raise ValueError(f"unknown rule set {name!r}; expected one of {sorted(RULE_SETS)}") from None
