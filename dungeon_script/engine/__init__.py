"""Engine layer: macro expander, evaluator, command surface, rules, scheduler."""

from dungeon_script.engine.errors import RunInProgressError, ScriptError, ScriptLimitError, UnsafeScriptError
from dungeon_script.engine.expander import MacroExpander
from dungeon_script.engine.rules import BasicRules, GauntletRules, RuleSet, rules_for
from dungeon_script.engine.scheduler import ScriptRunner

__all__ = [
    "BasicRules",
    "GauntletRules",
    "MacroExpander",
    "RuleSet",
    "RunInProgressError",
    "ScriptError",
    "ScriptLimitError",
    "ScriptRunner",
    "UnsafeScriptError",
    "rules_for",
]
