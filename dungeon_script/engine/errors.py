"""Exceptions raised while interpreting learner scripts."""

from __future__ import annotations


class ScriptError(Exception):
    """A user script failed.  Fatal to the run; caught only by the scheduler."""

    def __init__(self, message: str, *, line: str | None = None) -> None:
        super().__init__(message)
        self.line = line


class UnsafeScriptError(ScriptError):
    """The script used a construct outside the allowed subset."""


class ScriptLimitError(ScriptError):
    """A loop or the statement budget exceeded its cap."""


class RunInProgressError(RuntimeError):
    """``run()`` was called again before the previous run settled."""
