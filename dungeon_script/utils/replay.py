"""Replay serialization: records every step-callback frame of a run to JSON."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from dungeon_script.core.world_state import WorldState

logger = logging.getLogger(__name__)


class ReplayRecorder:
    """Step callback that accumulates compact frames and flushes them to a file.

    Only the log entries added since the previous frame are stored, so the
    file stays linear in the length of the run.
    """

    __slots__ = ("_path", "_seed", "_frames", "_code_lines", "_seen_logs")

    def __init__(self, path: str | Path, seed: int) -> None:
        self._path = Path(path)
        self._seed = seed
        self._frames: list[dict[str, Any]] = []
        self._code_lines: list[str] = []
        self._seen_logs = 0

    @property
    def frames(self) -> list[dict[str, Any]]:
        return self._frames

    def __call__(self, state: WorldState, logs: list[str], current_line: int, code_lines: list[str]) -> None:
        self.record(state, logs, current_line, code_lines)

    def record(self, state: WorldState, logs: list[str], current_line: int, code_lines: list[str]) -> None:
        hero = state.character
        self._code_lines = list(code_lines)
        new_logs = logs[self._seen_logs:]
        self._seen_logs = len(logs)
        self._frames.append(
            {
                "line": current_line,
                "hero": {
                    "pos": [hero.position.x, hero.position.y],
                    "hp": hero.health,
                    "food": hero.food,
                    "dir": hero.direction.value,
                    "key": hero.has_key,
                },
                "enemies": [
                    {"id": e.id, "type": e.type.value, "pos": [e.position.x, e.position.y], "hp": e.health}
                    for e in state.enemies
                    if e.is_alive
                ],
                "effects": [effect.value for effect in state.active_effects],
                "score": state.score,
                "moves": state.moves,
                "complete": state.is_complete,
                "game_over": state.game_over,
                "logs": new_logs,
            }
        )

    def flush(self) -> None:
        """Write accumulated data to disk."""
        replay = {
            "version": "1.0",
            "seed": self._seed,
            "code_lines": self._code_lines,
            "total_frames": len(self._frames),
            "frames": self._frames,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(replay, indent=2), encoding="utf-8")
        logger.info("Replay saved to %s (%d frames)", self._path, len(self._frames))
