"""Immutable frame: one step-callback payload captured for later replay."""

from __future__ import annotations

from dataclasses import dataclass

from dungeon_script.core.world_state import WorldState


@dataclass(frozen=True, slots=True)
class Frame:
    """Read-only record of a single ``on_update`` invocation.

    The world is deep-copied so frames captured earlier in a run are not
    affected by later mutation.
    """

    state: WorldState
    logs: tuple[str, ...]
    current_line: int
    code_lines: tuple[str, ...]

    @classmethod
    def capture(
        cls,
        world: WorldState,
        logs: list[str],
        current_line: int,
        code_lines: list[str],
    ) -> Frame:
        return cls(
            state=world.copy(),
            logs=tuple(logs),
            current_line=current_line,
            code_lines=tuple(code_lines),
        )

    @property
    def final(self) -> bool:
        return self.current_line == -1


class FrameRecorder:
    """Step callback that keeps every frame it receives."""

    __slots__ = ("frames",)

    def __init__(self) -> None:
        self.frames: list[Frame] = []

    def __call__(
        self,
        state: WorldState,
        logs: list[str],
        current_line: int,
        code_lines: list[str],
    ) -> None:
        self.frames.append(Frame.capture(state, logs, current_line, code_lines))

    @property
    def last(self) -> Frame | None:
        return self.frames[-1] if self.frames else None
