"""Macro expander: rewrites repeat-count notation into primitive calls.

    hero.moveRight(3)   ->  hero.moveRight();  x3
    hero.attack[2];     ->  hero.attack();     x2
    hero.moveUp         ->  hero.moveUp();

Comment and blank lines pass through unchanged, as does every line that
does not match (control flow, assignments, calls with real arguments).
Out-of-range counts are clamped to 1 with a warning; they never abort
the script.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable

from dungeon_script.utils.narration import NarrationLog

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ("//", "#")


def is_comment_or_blank(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith(COMMENT_PREFIXES)


def executable_lines(text: str) -> list[str]:
    """Non-blank, non-comment lines; what the UI highlights step by step."""
    return [line for line in text.split("\n") if not is_comment_or_blank(line)]


@dataclass(slots=True)
class ExpandedScript:
    text: str
    code_lines: list[str]
    expansions: int = 0
    warnings: list[str] = field(default_factory=list)


class MacroExpander:
    """Expands ``<object>.<command>(n)`` / ``<object>.<command>[n]`` lines."""

    __slots__ = ("_object_name", "_commands", "_max_repeat", "_narration", "_repeat_re", "_bare_re")

    def __init__(
        self,
        object_name: str = "hero",
        commands: Iterable[str] = (),
        max_repeat: int = 20,
        narration: NarrationLog | None = None,
    ) -> None:
        self._object_name = object_name
        self._commands = frozenset(commands)
        self._max_repeat = max_repeat
        self._narration = narration
        obj = re.escape(object_name)
        self._repeat_re = re.compile(
            rf"^(?P<indent>\s*)(?P<command>{obj}\.\w+)\s*[\(\[](?P<count>-?\d+)[\)\]]\s*;?\s*(?:(?://|#).*)?$"
        )
        self._bare_re = re.compile(rf"^(?P<indent>\s*)(?P<command>{obj}\.(?P<name>\w+))\s*;?\s*$")

    def expand(self, code: str) -> ExpandedScript:
        out: list[str] = []
        expansions = 0
        warnings: list[str] = []

        for line in code.split("\n"):
            if is_comment_or_blank(line):
                out.append(line)
                continue

            match = self._repeat_re.match(line)
            if match:
                indent, command = match.group("indent"), match.group("command")
                count = int(match.group("count"))
                if 1 <= count <= self._max_repeat:
                    out.extend(f"{indent}{command}();" for _ in range(count))
                    expansions += 1
                    self._note(f'Expanded: "{command}" repeated {count} times')
                else:
                    out.append(f"{indent}{command}();")
                    message = f"Invalid repeat count: {count}. Using 1 instead."
                    warnings.append(message)
                    self._note(message, warning=True)
                continue

            bare = self._bare_re.match(line)
            if bare and bare.group("name") in self._commands:
                out.append(f"{bare.group('indent')}{bare.group('command')}();")
                continue

            out.append(line)

        text = "\n".join(out)
        return ExpandedScript(
            text=text,
            code_lines=executable_lines(text),
            expansions=expansions,
            warnings=warnings,
        )

    def _note(self, message: str, warning: bool = False) -> None:
        if self._narration is None:
            if warning:
                logger.warning(message)
            else:
                logger.debug(message)
        elif warning:
            self._narration.warn(message)
        else:
            self._narration.add(message)
