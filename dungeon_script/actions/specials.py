"""Class special abilities: strategy pattern keyed by hero class.

To add a new class ability:
  1. Create a SpecialAbility subclass.
  2. Register it in SPECIAL_ABILITIES.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from dungeon_script.actions.combat import CombatAction
from dungeon_script.core.enums import CharacterClass, Direction, PowerUpType
from dungeon_script.systems.power_ups import PowerUpSystem

if TYPE_CHECKING:
    from dungeon_script.core.models import Enemy
    from dungeon_script.engine.context import RunContext


# ---------------------------------------------------------------------------
# Abstract ability
# ---------------------------------------------------------------------------

class SpecialAbility(ABC):
    """Base class for ``useSpecial()`` behaviours."""

    @property
    @abstractmethod
    def hero_class(self) -> CharacterClass:
        """The class this ability belongs to."""

    @abstractmethod
    def activate(self, ctx: RunContext) -> None:
        """Apply the ability to the live world."""


# ---------------------------------------------------------------------------
# Timed buffs
# ---------------------------------------------------------------------------

class BerserkerRage(SpecialAbility):

    @property
    def hero_class(self) -> CharacterClass:
        return CharacterClass.WARRIOR

    def activate(self, ctx: RunContext) -> None:
        duration = ctx.config.special_duration
        ctx.say(f"Warrior uses Berserker Rage! Double damage for {duration:g} seconds!")
        PowerUpSystem.grant(ctx, PowerUpType.POWER, duration, special=True)


class Shield(SpecialAbility):

    @property
    def hero_class(self) -> CharacterClass:
        return CharacterClass.VALKYRIE

    def activate(self, ctx: RunContext) -> None:
        duration = ctx.config.special_duration
        ctx.say(f"Valkyrie uses Shield! Damage blocked for {duration:g} seconds!")
        PowerUpSystem.grant(ctx, PowerUpType.INVINCIBILITY, duration, special=True)


# ---------------------------------------------------------------------------
# Attacks
# ---------------------------------------------------------------------------

def _in_line(hero_x: int, hero_y: int, facing: Direction, enemy: Enemy) -> bool:
    ex, ey = enemy.position.x, enemy.position.y
    match facing:
        case Direction.RIGHT:
            return ey == hero_y and ex > hero_x
        case Direction.LEFT:
            return ey == hero_y and ex < hero_x
        case Direction.UP:
            return ex == hero_x and ey < hero_y
        case Direction.DOWN:
            return ex == hero_x and ey > hero_y
    return False


class Fireball(SpecialAbility):
    """Hits the nearest live enemy along the facing direction, at any range."""

    @property
    def hero_class(self) -> CharacterClass:
        return CharacterClass.WIZARD

    def activate(self, ctx: RunContext) -> None:
        hero = ctx.world.character
        ctx.say("Wizard casts Fireball!")
        in_line = [
            e for e in ctx.world.live_enemies()
            if _in_line(hero.position.x, hero.position.y, hero.direction, e)
        ]
        if not in_line:
            ctx.say("Fireball missed! No enemies in that direction.")
            return
        target = min(in_line, key=lambda e: e.position.manhattan(hero.position))
        CombatAction.ability_hit(ctx, target, ctx.config.fireball_damage, "fireball")


class RapidShot(SpecialAbility):
    """One arrow into every enemy within reach."""

    @property
    def hero_class(self) -> CharacterClass:
        return CharacterClass.ELF

    def activate(self, ctx: RunContext) -> None:
        ctx.say("Elf uses Rapid Shot! Multiple arrows fired!")
        targets = CombatAction.targets_in_reach(ctx)
        if not targets:
            ctx.say("No enemies nearby to hit with arrows!")
            return
        for enemy in targets:
            CombatAction.ability_hit(ctx, enemy, ctx.config.rapid_shot_damage, "arrow")


# ---------------------------------------------------------------------------
# Registry: maps CharacterClass -> ability instance
# ---------------------------------------------------------------------------

SPECIAL_ABILITIES: dict[CharacterClass, SpecialAbility] = {
    ability.hero_class: ability
    for ability in (BerserkerRage(), Shield(), Fireball(), RapidShot())
}


def get_special_ability(hero_class: CharacterClass) -> SpecialAbility | None:
    return SPECIAL_ABILITIES.get(hero_class)
