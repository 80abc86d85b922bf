"""Structured logging configuration."""

from __future__ import annotations

import logging
import sys

NARRATION_LOGGER = "dungeon_script.utils.narration"


def setup_logging(level: str = "INFO", narration: bool = True) -> None:
    """Configure the root logger for engine output.

    Narration lines are mirrored to their own logger at INFO.  Pass
    ``narration=False`` when the caller already returns the log to a
    client (the API does) so each run does not echo twice.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s [%(levelname)-5s] %(name)-32s | %(message)s",
        datefmt="%H:%M:%S",
    ))

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    logging.getLogger(NARRATION_LOGGER).setLevel(
        logging.NOTSET if narration else logging.WARNING
    )
