"""
Command-Line Runner
===================

Builds a run from a JSON document and, when an objective is given,
executes it one or more times.

Examples:
    adapt-de --config configs/jde.json
    adapt-de --config configs/jde.json --objective mypkg.problems:sphere --runs 5
    adapt-de --config configs/sade.json --objective mypkg.problems:sphere --output results

The objective is any importable callable ``f(X) -> y`` taking an ``(n, D)``
array and returning ``n`` fitness values. Without ``--objective`` the
document is only built, which validates every classname and value in it.

Exit status is 1 when the document cannot be built or a run aborts.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

import numpy as np

from .constants import DEFAULT_LOG_INTERVAL
from .errors import ConfigurationError, FeedbackRejectedError, ParameterIndexError, RangeExhaustedError
from .loader import load_system
from .logger import (
    Colors,
    RunLogger,
    format_scientific,
    format_time,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from .utils import ensure_dir, resolve_callable, timestamp_now, write_json


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="adapt-de",
        description="Configuration-driven DE with adaptive parameter control",
    )
    parser.add_argument("--config", required=True, type=Path, help="JSON run document")
    parser.add_argument("--objective", default=None,
                        help="objective callable as 'module:function'")
    parser.add_argument("--runs", type=int, default=1, help="independent runs")
    parser.add_argument("--seed", type=int, default=None,
                        help="base seed (run r uses seed + r); defaults to the document's")
    parser.add_argument("--output", type=Path, default=None,
                        help="directory for summary.json and per-run history CSV files")
    parser.add_argument("--log-interval", type=int, default=DEFAULT_LOG_INTERVAL)
    parser.add_argument("--quiet", action="store_true", help="no per-generation output")
    parser.add_argument("--no-color", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.no_color:
        Colors.disable()

    try:
        system = load_system(args.config)
    except ConfigurationError as e:
        print_error(f"{args.config}: {e}")
        return 1
    print_success(f"Built {args.config}")

    if args.objective is None:
        if args.output is not None:
            print_warning("--output is ignored without --objective")
        print_info("No --objective given; configuration validated only")
        return 0
    if args.runs < 1:
        print_error(f"--runs must be at least 1, got {args.runs}")
        return 1

    try:
        objective = resolve_callable(args.objective)
    except (ImportError, AttributeError, ValueError) as e:
        print_error(f"Cannot load objective '{args.objective}': {e}")
        return 1

    base_seed = args.seed if args.seed is not None else system.random.seed
    output = ensure_dir(args.output / timestamp_now()) if args.output is not None else None
    results = []

    for run in range(args.runs):
        system = load_system(system.config)
        if base_seed is not None:
            system.random.reseed(base_seed + run)
        logger = RunLogger(
            verbosity=1 if args.quiet else 2,
            log_interval=args.log_interval,
            use_colors=not args.no_color,
        )
        print_info(f"Run {run + 1}/{args.runs} (seed={system.random.seed})")
        start = time.time()
        try:
            result = system.run(objective, logger=logger)
        except (FeedbackRejectedError, RangeExhaustedError, ParameterIndexError) as e:
            print_error(f"Run {run + 1} aborted: {e}")
            return 1
        runtime = time.time() - start

        results.append({
            'run': run + 1,
            'seed': system.random.seed,
            'best_f': result.best_f,
            'best_x': result.best_x,
            'generations': result.generations,
            'nfes': result.nfes_used,
            'runtime': runtime,
        })
        if output is not None:
            result.history_frame().to_csv(output / f"history_run{run + 1:03d}.csv", index=False)

    best = np.array([r['best_f'] for r in results])
    print_success(
        f"{len(results)} run(s): best={format_scientific(best.min())}, "
        f"mean={format_scientific(best.mean())}, "
        f"time={format_time(sum(r['runtime'] for r in results))}"
    )
    if output is not None:
        write_json(output / "summary.json", {
            'config': str(args.config),
            'objective': args.objective,
            'runs': results,
        })
        print_info(f"Results written to {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
