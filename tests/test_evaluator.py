"""Tests for the restricted script evaluator.

Covers:
- Commands and properties reached through the bound hero object
- Variables persisting across statement units
- Rejection of constructs outside the allowed subset
- Loop and statement caps
- Halting a unit once the world reaches a terminal flag
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from dungeon_script.core.enums import ObstacleType
from dungeon_script.core.models import Vector2
from dungeon_script.engine.errors import ScriptError, ScriptLimitError, UnsafeScriptError
from dungeon_script.engine.evaluator import ScriptEvaluator
from tests.helpers.dungeon_arena import DungeonArena


def _make_evaluator(arena: DungeonArena, **kwargs) -> ScriptEvaluator:
    return ScriptEvaluator(
        arena.commands,
        object_name=arena.rules.object_name,
        halted=lambda: arena.world.terminal,
        **kwargs,
    )


class TestCommandSurface:
    def test_command_call_moves_hero(self):
        arena = DungeonArena()
        _make_evaluator(arena).execute("hero.moveRight()")
        assert arena.hero.position == Vector2(1, 0)

    def test_property_read(self):
        arena = DungeonArena(health=80)
        ev = _make_evaluator(arena)
        ev.execute("h = hero.health\npx = hero.position.x + 2")
        assert ev.namespace["h"] == 80
        assert ev.namespace["px"] == 2

    def test_distance_accepts_tuple(self):
        arena = DungeonArena()
        ev = _make_evaluator(arena)
        ev.execute("d = hero.distanceTo((3, 4))")
        assert ev.namespace["d"] == 7

    def test_unknown_property_is_error(self):
        with pytest.raises(ScriptError, match="no command or property"):
            _make_evaluator(DungeonArena()).execute("x = hero.mana")

    def test_command_without_call_is_error(self):
        with pytest.raises(ScriptError, match="is a command"):
            _make_evaluator(DungeonArena()).execute("hero.attack")

    def test_command_gated_by_rule_set(self):
        with pytest.raises(ScriptError, match="not a command"):
            _make_evaluator(DungeonArena(rules="basic")).execute("hero.useSpecial()")

    def test_gauntlet_exposes_class_property(self):
        arena = DungeonArena(rules="gauntlet")
        ev = _make_evaluator(arena)
        ev.execute("c = hero.heroClass")
        assert ev.namespace["c"] == "warrior"

    def test_wrong_arity_is_error(self):
        with pytest.raises(ScriptError, match="takes 0 argument"):
            _make_evaluator(DungeonArena()).execute("hero.moveRight(1, 2)")


class TestControlFlow:
    def test_variables_persist_across_units(self):
        arena = DungeonArena()
        ev = _make_evaluator(arena)
        ev.execute("n = 2")
        ev.execute("for _ in range(n):\n    hero.moveDown()")
        assert arena.hero.position == Vector2(0, 2)

    def test_aug_assign(self):
        ev = _make_evaluator(DungeonArena())
        ev.execute("total = 1")
        ev.execute("total += 4")
        assert ev.namespace["total"] == 5

    def test_break_and_continue(self):
        arena = DungeonArena()
        ev = _make_evaluator(arena)
        ev.execute(
            "for i in range(6):\n"
            "    if i == 1:\n"
            "        continue\n"
            "    if i == 4:\n"
            "        break\n"
            "    hero.moveRight()"
        )
        assert arena.hero.position == Vector2(3, 0)

    def test_while_condition_reads_world(self):
        arena = DungeonArena()
        ev = _make_evaluator(arena)
        ev.execute("while hero.position.x < 4:\n    hero.moveRight()")
        assert arena.hero.position == Vector2(4, 0)

    def test_if_else(self):
        arena = DungeonArena()
        ev = _make_evaluator(arena)
        ev.execute("if hero.isEnemyNear():\n    hero.attack()\nelse:\n    hero.moveDown()")
        assert arena.hero.position == Vector2(0, 1)

    def test_runtime_error_is_wrapped(self):
        with pytest.raises(ScriptError):
            _make_evaluator(DungeonArena()).execute("x = 1 / 0")

    def test_undefined_name(self):
        with pytest.raises(ScriptError, match="'mystery' is not defined"):
            _make_evaluator(DungeonArena()).execute("x = mystery + 1")

    def test_syntax_error(self):
        with pytest.raises(ScriptError, match="Syntax error"):
            _make_evaluator(DungeonArena()).execute("hero.moveRight(")


class TestUnsafeConstructs:
    @pytest.mark.parametrize("source", [
        "import os",
        "from os import path",
        "def f():\n    pass",
        "class A:\n    pass",
        "f = lambda: 1",
        "xs = [i for i in range(3)]",
        "x = hero.__class__",
        "__import__('os')",
        "hero = 3",
        "range = 3",
        "hero.say(message='hi')",
        "global x",
        "with open('f') as f:\n    pass",
    ])
    def test_rejected(self, source):
        with pytest.raises(UnsafeScriptError):
            _make_evaluator(DungeonArena()).execute(source)

    def test_unknown_builtin_not_callable(self):
        with pytest.raises(ScriptError, match="not a callable command"):
            _make_evaluator(DungeonArena()).execute("open('x')")

    def test_nothing_runs_when_validation_fails(self):
        arena = DungeonArena()
        with pytest.raises(UnsafeScriptError):
            _make_evaluator(arena).execute("hero.moveRight()\nimport os")
        assert arena.hero.position == Vector2(0, 0)


class TestGuards:
    def test_infinite_while_hits_loop_cap(self):
        ev = _make_evaluator(DungeonArena(), max_loop_iterations=50)
        with pytest.raises(ScriptLimitError):
            ev.execute("while True:\n    pass")

    def test_for_loop_cap(self):
        ev = _make_evaluator(DungeonArena(), max_loop_iterations=10)
        with pytest.raises(ScriptLimitError):
            ev.execute("for i in range(11):\n    pass")

    def test_statement_cap(self):
        ev = _make_evaluator(DungeonArena(), max_statement_steps=20)
        with pytest.raises(ScriptLimitError):
            ev.execute("for i in range(30):\n    x = i")

    def test_step_counter_resets_per_unit(self):
        ev = _make_evaluator(DungeonArena(), max_statement_steps=20)
        ev.execute("for i in range(8):\n    x = i")
        ev.execute("for i in range(8):\n    x = i")
        assert ev.namespace["x"] == 7

    def test_unit_halts_when_hero_dies(self):
        arena = DungeonArena(health=10)
        arena.add_hazard(ObstacleType.SPIKE, 1, 0, damage=20)
        ev = _make_evaluator(arena)
        ev.execute("hero.moveRight()\nhero.moveRight()\nhero.moveRight()")
        assert arena.world.game_over
        assert arena.hero.position == Vector2(1, 0)
        assert arena.world.moves == 1

    def test_loop_halts_when_hero_dies(self):
        arena = DungeonArena(health=10)
        arena.add_hazard(ObstacleType.FIRE, 2, 0, damage=20)
        ev = _make_evaluator(arena)
        ev.execute("while True:\n    hero.moveRight()")
        assert arena.hero.position == Vector2(2, 0)
