"""Append-only narration log: the user-facing record of a script run."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)


def wall_clock_stamp() -> str:
    return time.strftime("%H:%M:%S")


class NarrationLog:
    """Timestamped, append-only list of narration strings.

    Ordering is the single source of truth for what happened when.
    Every entry is mirrored to the module logger so headless runs
    show the same story on stdout.  Thread-safe via a simple lock;
    readers always receive a copy.
    """

    __slots__ = ("_entries", "_lock", "_stamp")

    def __init__(self, stamp: Callable[[], str] = wall_clock_stamp) -> None:
        self._entries: list[str] = []
        self._lock = threading.Lock()
        self._stamp = stamp

    def add(self, message: str, level: int = logging.INFO) -> str:
        entry = f"[{self._stamp()}] {message}"
        with self._lock:
            self._entries.append(entry)
        logger.log(level, message)
        return entry

    def warn(self, message: str) -> str:
        return self.add(message, logging.WARNING)

    def entries(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def latest(self, count: int = 1) -> list[str]:
        with self._lock:
            return self._entries[-count:]

    def contains(self, fragment: str) -> bool:
        """True if any entry contains *fragment* (case-insensitive)."""
        needle = fragment.lower()
        with self._lock:
            return any(needle in e.lower() for e in self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
