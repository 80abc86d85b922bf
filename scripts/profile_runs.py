#!/usr/bin/env python3
"""Script-run profiler.

Usage:
    python scripts/profile_runs.py --repeat 200
    python scripts/profile_runs.py --repeat 500 --level 102 --cprofile runs.prof
    python scripts/profile_runs.py --repeat 200 --memory

Reports:
    - Per-run timing statistics (min, max, mean, p50, p95, p99)
    - Per-level average run time and executed units
    - Throughput (runs/sec)
    - Optional: cProfile dump for flame graph generation
    - Optional: tracemalloc memory snapshot
"""

from __future__ import annotations

import argparse
import cProfile
import io
import os
import pstats
import statistics
import sys
import time
import tracemalloc

# Ensure project root is on path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dungeon_script.config import EngineConfig, instant
from dungeon_script.core.levels import LEVEL_CATALOG, Level
from dungeon_script.core.world_state import WorldState
from dungeon_script.engine.rules import rules_for
from dungeon_script.engine.scheduler import ScriptRunner


def _run_levels(cfg: EngineConfig, levels: list[Level], repeat: int) -> dict:
    """Run each level's solution *repeat* times and collect per-run timings."""
    run_times: list[float] = []
    per_level: dict[int, list[float]] = {lvl.id: [] for lvl in levels}
    frame_counts: dict[int, int] = {}
    failures = 0

    for _ in range(repeat):
        for level in levels:
            frames = 0

            def count(state, logs, current_line, code_lines):
                nonlocal frames
                frames += 1

            world = WorldState.from_level(level)
            runner = ScriptRunner(world, rules=rules_for(level.rules), config=cfg)

            t_start = time.perf_counter()
            runner.run_sync(level.solution, count)
            elapsed = time.perf_counter() - t_start

            run_times.append(elapsed)
            per_level[level.id].append(elapsed)
            frame_counts[level.id] = frames
            if not world.is_complete:
                failures += 1

    return {
        "run_times": run_times,
        "per_level": per_level,
        "frame_counts": frame_counts,
        "failures": failures,
    }


def _percentile(data: list[float], p: float) -> float:
    """Simple percentile calculation."""
    if not data:
        return 0.0
    sorted_data = sorted(data)
    k = (len(sorted_data) - 1) * (p / 100.0)
    f = int(k)
    c = f + 1
    if c >= len(sorted_data):
        return sorted_data[f]
    return sorted_data[f] + (k - f) * (sorted_data[c] - sorted_data[f])


def _print_report(data: dict, wall_time: float) -> None:
    """Print a formatted performance report."""
    run_times = data["run_times"]
    num_runs = len(run_times)

    if num_runs == 0:
        print("No runs executed.")
        return

    print("\n" + "=" * 70)
    print("  SCRIPT RUN PERFORMANCE REPORT")
    print("=" * 70)

    print(f"\n  Runs executed:     {num_runs}")
    print(f"  Failed solutions:  {data['failures']}")
    print(f"  Wall clock time:   {wall_time:.3f}s")
    print(f"  Throughput:        {num_runs / wall_time:.1f} runs/sec")

    print(f"\n  {'Metric':<16} {'Time (ms)':>10}")
    print(f"  {'-' * 16} {'-' * 10}")
    print(f"  {'Min':<16} {min(run_times) * 1000:>10.3f}")
    print(f"  {'P50 (median)':<16} {_percentile(run_times, 50) * 1000:>10.3f}")
    print(f"  {'P95':<16} {_percentile(run_times, 95) * 1000:>10.3f}")
    print(f"  {'P99':<16} {_percentile(run_times, 99) * 1000:>10.3f}")
    print(f"  {'Max':<16} {max(run_times) * 1000:>10.3f}")
    if num_runs > 1:
        print(f"  {'StdDev':<16} {statistics.stdev(run_times) * 1000:>10.3f}")

    print(f"\n  {'Level':<8} {'Frames':>8} {'Avg (ms)':>10} {'P95 (ms)':>10}")
    print(f"  {'-' * 8} {'-' * 8} {'-' * 10} {'-' * 10}")
    for level_id, times in data["per_level"].items():
        frames = data["frame_counts"].get(level_id, 0)
        print(
            f"  {level_id:<8} {frames:>8} "
            f"{statistics.mean(times) * 1000:>10.3f} {_percentile(times, 95) * 1000:>10.3f}"
        )

    print("\n" + "=" * 70)


def main() -> None:
    parser = argparse.ArgumentParser(description="Profile script runs over the level catalog")
    parser.add_argument("--repeat", type=int, default=100, help="Runs per level")
    parser.add_argument("--level", type=int, default=None, help="Profile a single catalog level")
    parser.add_argument("--seed", type=int, default=42, help="RNG seed")
    parser.add_argument("--cprofile", type=str, default=None, help="Save cProfile output to file")
    parser.add_argument("--memory", action="store_true", help="Enable tracemalloc memory profiling")
    args = parser.parse_args()

    cfg = instant(EngineConfig(seed=args.seed, log_level="WARNING"))
    levels = sorted(LEVEL_CATALOG.values(), key=lambda lvl: lvl.id)
    if args.level is not None:
        levels = [lvl for lvl in levels if lvl.id == args.level]

    print(f"Profiling: {args.repeat} runs x {len(levels)} levels, seed={args.seed}")

    # --- Optional: memory tracking ---
    if args.memory:
        tracemalloc.start()

    # --- Optional: cProfile ---
    profiler = None
    if args.cprofile:
        profiler = cProfile.Profile()
        profiler.enable()

    wall_start = time.perf_counter()
    data = _run_levels(cfg, levels, args.repeat)
    wall_time = time.perf_counter() - wall_start

    if profiler:
        profiler.disable()

    _print_report(data, wall_time)

    # --- cProfile output ---
    if profiler and args.cprofile:
        profiler.dump_stats(args.cprofile)
        print(f"\n  cProfile data saved to: {args.cprofile}")
        print(f"  View with: python -m pstats {args.cprofile}")

        print("\n  Top 20 functions by cumulative time:")
        stream = io.StringIO()
        ps = pstats.Stats(profiler, stream=stream)
        ps.sort_stats("cumulative")
        ps.print_stats(20)
        print(stream.getvalue())

    # --- Memory output ---
    if args.memory:
        snapshot = tracemalloc.take_snapshot()
        print("\n  Top 15 memory allocations by size:")
        print(f"  {'File:Line':<60} {'Size':>10}")
        print(f"  {'-' * 60} {'-' * 10}")
        for stat in snapshot.statistics("lineno")[:15]:
            print(f"  {str(stat.traceback):<60} {stat.size / 1024:>8.1f} KB")

        current, peak = tracemalloc.get_traced_memory()
        print(f"\n  Current memory: {current / 1024:.1f} KB")
        print(f"  Peak memory:    {peak / 1024:.1f} KB")
        tracemalloc.stop()


if __name__ == "__main__":
    main()
