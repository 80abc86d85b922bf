"""Split expanded script text into statement units.

A unit is what the scheduler executes atomically.  Most units are a
single line.  A line ending in ``:`` opens a block: every following line
indented deeper than the header, plus ``elif``/``else`` clauses at the
header's own indent, belongs to the same unit.
"""

from __future__ import annotations

import ast
import textwrap
from dataclasses import dataclass

from dungeon_script.engine.expander import is_comment_or_blank

_CONTINUATION_KEYWORDS = ("elif ", "elif(", "else:", "else :")


@dataclass(frozen=True, slots=True)
class StatementUnit:
    index: int          # position of the header in the executable-line list
    header: str         # header line as written (for error messages)
    source: str         # dedented source handed to the evaluator


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def _uses_floor_division(line: str) -> bool:
    """True if *line* is valid Python whose ``//`` feeds a value somewhere.

    A bare ``a // b`` expression statement discards its result, so
    ``hero.attack() // hit`` reads as a call plus a comment.
    """
    code = line.strip()
    if code.startswith("elif"):
        code = code[2:]
    if code.endswith(":"):
        code += "\n    pass"
    try:
        tree = ast.parse(code)
    except SyntaxError:
        return False
    first = tree.body[0]
    return not (
        isinstance(first, ast.Expr)
        and isinstance(first.value, ast.BinOp)
        and isinstance(first.value.op, ast.FloorDiv)
    )


def strip_slash_comment(line: str) -> str:
    """Drop a trailing ``// ...`` comment that sits outside string literals.

    ``//`` stays when it is floor division (``steps = 7 // 2``).
    """
    if "//" not in line or _uses_floor_division(line):
        return line
    quote: str | None = None
    escaped = False
    for i, ch in enumerate(line):
        if escaped:
            escaped = False
            continue
        if ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == "/" and line[i:i + 2] == "//":
            return line[:i].rstrip()
    return line


def _opens_block(line: str) -> bool:
    code = strip_slash_comment(line).split("#", 1)[0].rstrip()
    return code.endswith(":")


def split_units(text: str) -> list[StatementUnit]:
    lines = [line.rstrip("\r") for line in text.split("\n") if not is_comment_or_blank(line)]
    units: list[StatementUnit] = []
    i = 0
    while i < len(lines):
        header = lines[i]
        body = [strip_slash_comment(header)]
        j = i + 1
        if _opens_block(header):
            base = _indent_of(header)
            while j < len(lines):
                candidate = lines[j]
                indent = _indent_of(candidate)
                if indent > base or (
                    indent == base and candidate.strip().startswith(_CONTINUATION_KEYWORDS)
                ):
                    body.append(strip_slash_comment(candidate))
                    j += 1
                else:
                    break
        units.append(StatementUnit(
            index=i,
            header=header.strip(),
            source=textwrap.dedent("\n".join(body)),
        ))
        i = j
    return units
