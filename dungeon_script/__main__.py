"""Entry point: ``python -m dungeon_script``.

Supports two modes:
  - ``python -m dungeon_script serve``   Launch the FastAPI server (default)
  - ``python -m dungeon_script run``     Run one script headless against a level
"""

from __future__ import annotations

import argparse
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dungeon script interpretation engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless run ---
    run = sub.add_parser("run", help="Run a script against a level headless")
    source = run.add_mutually_exclusive_group(required=True)
    source.add_argument("--level", type=int, help="Catalog level id")
    source.add_argument("--level-file", type=str, help="JSON level definition")
    run.add_argument("script", nargs="?", help="Script file (default: the level's solution, '-' for stdin)")
    run.add_argument("--seed", type=int, default=42)
    run.add_argument("--paced", action="store_true", help="Keep the step delays instead of running instantly")
    run.add_argument("--replay", type=str, default=None, help="Write a JSON replay of every frame")
    run.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from dungeon_script.api.app import create_app
    from dungeon_script.config import EngineConfig, instant

    config = instant(EngineConfig(seed=args.seed, log_level=args.log_level))
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _read_script(path: str | None, fallback: str) -> str:
    if path is None:
        return fallback
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as fh:
        return fh.read()


def _run_headless(args: argparse.Namespace) -> int:
    from dataclasses import replace

    from dungeon_script.api.schemas import load_level
    from dungeon_script.config import EngineConfig, instant
    from dungeon_script.core.levels import get_level
    from dungeon_script.core.world_state import WorldState
    from dungeon_script.engine.rules import rules_for
    from dungeon_script.engine.scheduler import ScriptRunner
    from dungeon_script.utils.logging import setup_logging
    from dungeon_script.utils.replay import ReplayRecorder

    config = EngineConfig(seed=args.seed, log_level=args.log_level)
    if not args.paced:
        config = instant(config)
    if args.replay:
        config = replace(config, replay_file=args.replay)

    setup_logging(config.log_level)

    level = load_level(args.level_file) if args.level_file else get_level(args.level)
    script = _read_script(args.script, level.solution)
    logger.info("Level %d: %s (%s rules)", level.id, level.name, level.rules)

    world = WorldState.from_level(level)
    runner = ScriptRunner(world, rules=rules_for(level.rules), config=config)
    recorder = ReplayRecorder(config.replay_file, config.seed) if args.replay else None

    status = runner.run_sync(script, recorder)

    if recorder is not None:
        recorder.flush()
    logger.info(
        "Done: %s. complete=%s moves=%d score=%d health=%d",
        status.value, world.is_complete, world.moves, world.score, world.character.health,
    )
    return 0 if world.is_complete else 1


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "run":
        sys.exit(_run_headless(args))


if __name__ == "__main__":
    main()
