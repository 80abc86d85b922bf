"""Tests for the ScriptRunner.

Covers:
- Step callback contract: two frames per executed unit plus a final -1
- Pacing delays and async callbacks
- Early termination on a terminal flag
- Script errors: narrated, fatal, never raised to the caller
- Re-entrancy guard and status lifecycle
"""

import sys
import os
import asyncio
import re

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from dungeon_script.core.enums import ObstacleType, RunStatus
from dungeon_script.core.models import Vector2
from dungeon_script.engine.errors import RunInProgressError
from dungeon_script.engine.scheduler import ScriptRunner
from tests.helpers.dungeon_arena import DungeonArena


class TestCallbackContract:
    def test_two_frames_per_unit_plus_final(self):
        arena = DungeonArena()
        arena.run("hero.moveRight()\nhero.moveDown()")
        assert [f[2] for f in arena.frames] == [0, 0, 1, 1, -1]

    def test_code_lines_are_expanded_lines(self):
        arena = DungeonArena()
        arena.run("// go\nhero.moveRight(2)")
        code_lines = arena.frames[-1][3]
        assert code_lines == ["hero.moveRight();", "hero.moveRight();"]

    def test_block_is_one_step(self):
        arena = DungeonArena()
        arena.run("for i in range(3):\n    hero.moveRight()\nhero.moveDown()")
        assert [f[2] for f in arena.frames] == [0, 0, 2, 2, -1]
        assert arena.hero.position == Vector2(3, 1)

    def test_frames_are_snapshots(self):
        arena = DungeonArena()
        arena.run("hero.moveRight()\nhero.moveRight()")
        positions = [f[0].character.position for f in arena.frames]
        assert positions == [Vector2(0, 0), Vector2(1, 0), Vector2(1, 0), Vector2(2, 0), Vector2(2, 0)]

    def test_logs_accumulate_in_frames(self):
        arena = DungeonArena()
        arena.run("hero.moveRight()")
        pre, post, final = (f[1] for f in arena.frames)
        assert len(pre) < len(post) < len(final)
        assert any("Executing: hero.moveRight()" in entry for entry in post)

    def test_log_entries_are_timestamped(self):
        arena = DungeonArena()
        arena.run("hero.moveRight()")
        assert all(re.match(r"^\[\d{2}:\d{2}:\d{2}\] ", entry) for entry in arena.logs)

    def test_async_callback_is_awaited(self):
        arena = DungeonArena()
        seen = []

        async def on_update(state, logs, current_line, code_lines):
            await asyncio.sleep(0)
            seen.append(current_line)

        runner = ScriptRunner(arena.world, rules=arena.rules, config=arena.config, clock=arena.clock)
        asyncio.run(runner.run("hero.moveUp()\nhero.moveDown()", on_update))
        assert seen == [0, 0, 1, 1, -1]

    def test_empty_script_emits_final_only(self):
        arena = DungeonArena()
        status = arena.run("// nothing here\n")
        assert status is RunStatus.COMPLETED
        assert [f[2] for f in arena.frames] == [-1]


class TestPacing:
    def test_delays_around_each_unit(self):
        arena = DungeonArena(paced=True)
        arena.run("hero.moveRight()\nhero.moveRight()")
        assert arena.clock.slept == [0.8, 0.4, 0.8, 0.4]

    def test_no_settle_after_terminal_unit(self):
        arena = DungeonArena(paced=True, width=3, height=3, exit_at=(1, 0), health=10)
        arena.add_hazard(ObstacleType.SPIKE, 1, 0, damage=50)
        arena.run("hero.moveRight()\nhero.moveDown()")
        assert arena.clock.slept == [0.8]


class TestTermination:
    def test_death_stops_remaining_lines(self):
        arena = DungeonArena(health=10)
        arena.add_hazard(ObstacleType.SPIKE, 3, 0, damage=20)
        status = arena.run("hero.moveRight()\n" * 10)

        assert status is RunStatus.FAILED
        assert arena.world.game_over
        assert arena.world.moves == 3
        assert arena.hero.position == Vector2(3, 0)
        assert arena.log_count("Executing:") == 3
        assert arena.frames[-1][2] == -1
        assert [f[2] for f in arena.frames[:-1]] == [0, 0, 1, 1, 2, 2]

    def test_script_error_is_fatal_and_narrated(self):
        arena = DungeonArena()
        status = arena.run("hero.moveRight()\nhero.fly()\nhero.moveRight()")

        assert status is RunStatus.FAILED
        assert arena.world.game_over
        assert arena.hero.position == Vector2(1, 0)
        assert arena.narration.contains('Error: Failed to execute "hero.fly()"')
        assert arena.frames[-1][2] == -1

    def test_unsafe_script_fails_run(self):
        arena = DungeonArena()
        status = arena.run("import os")
        assert status is RunStatus.FAILED
        assert arena.narration.contains("is not allowed")

    def test_infinite_loop_fails_run(self):
        arena = DungeonArena(max_loop_iterations=25)
        status = arena.run("while True:\n    hero.moveRight()\n    hero.moveLeft()")
        assert status is RunStatus.FAILED
        assert arena.narration.contains("Loop exceeded 25 iterations")

    def test_clamped_count_does_not_abort(self):
        arena = DungeonArena()
        status = arena.run("hero.moveRight(99)\nhero.moveDown()")
        assert status is RunStatus.COMPLETED
        assert arena.hero.position == Vector2(1, 1)
        assert arena.narration.contains("Invalid repeat count: 99")

    def test_negative_count_does_not_abort(self):
        arena = DungeonArena()
        status = arena.run("hero.moveRight(-2)\nhero.moveDown()")
        assert status is RunStatus.COMPLETED
        assert arena.hero.position == Vector2(1, 1)
        assert arena.narration.contains("Invalid repeat count: -2")

    def test_floor_division_is_evaluated(self):
        arena = DungeonArena()
        status = arena.run("steps = 7 // 2\nfor i in range(steps):\n    hero.moveRight()")
        assert status is RunStatus.COMPLETED
        assert arena.hero.position == Vector2(3, 0)

    def test_completion_messages(self):
        arena = DungeonArena(width=3, height=3, exit_at=(1, 0))
        arena.run("hero.moveRight()")
        logs = " ".join(arena.logs)
        assert "Starting step-by-step execution..." in logs
        assert "Code execution completed successfully!" in logs
        assert "Level completed! Well done!" in logs


class TestLifecycle:
    def test_status_transitions(self):
        arena = DungeonArena()
        runner = ScriptRunner(arena.world, config=arena.config, clock=arena.clock)
        assert runner.status is RunStatus.IDLE
        runner.run_sync("hero.moveRight()")
        assert runner.status is RunStatus.COMPLETED
        assert not arena.world.is_running

    def test_second_run_while_running_is_rejected(self):
        arena = DungeonArena()

        async def scenario():
            gate = asyncio.Event()

            async def held_sleep(seconds):
                await gate.wait()

            runner = ScriptRunner(arena.world, config=arena.config, clock=arena.clock, sleep=held_sleep)
            first = asyncio.create_task(runner.run("hero.moveRight()"))
            await asyncio.sleep(0)
            assert runner.status is RunStatus.RUNNING
            assert arena.world.is_running

            with pytest.raises(RunInProgressError):
                await runner.run("hero.moveDown()")

            gate.set()
            return await first

        status = asyncio.run(scenario())
        assert status is RunStatus.COMPLETED
        assert arena.hero.position == Vector2(1, 0)

    def test_narration_is_cleared_between_runs(self):
        arena = DungeonArena()
        arena.run("hero.say(\"first\")")
        arena.run("hero.say(\"second\")")
        assert not arena.narration.contains("first")
        assert arena.narration.contains('Hero says: "second"')

    def test_world_persists_between_runs(self):
        arena = DungeonArena()
        arena.run("hero.moveRight()")
        arena.run("hero.moveRight()")
        assert arena.hero.position == Vector2(2, 0)
        assert arena.world.moves == 2

    def test_injected_narration_receives_entries(self):
        arena = DungeonArena()
        assert arena.narration.entries() == []
        arena.run("hero.moveRight()")
        assert arena.runner.logs == arena.narration.entries()
        assert arena.log_count("Executing:") == 1
