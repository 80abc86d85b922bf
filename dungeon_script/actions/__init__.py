"""Hero actions: movement, combat, and class specials."""

from dungeon_script.actions.move import MoveAction
from dungeon_script.actions.combat import CombatAction
from dungeon_script.actions.specials import SpecialAbility, get_special_ability

__all__ = ["CombatAction", "MoveAction", "SpecialAbility", "get_special_ability"]
