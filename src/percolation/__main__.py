"""Command line entry point for the percolation simulator."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .runner import run_to_file
from .trials import TrialConfig


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Estimate the site percolation threshold of a square grid.")
    parser.add_argument("side", type=int, help="Side length of the square grid")
    parser.add_argument("--trials", type=int, default=1000, help="Number of simulations to run (default: 1000)")
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of parallel batches (default: PERCOLATION_WORKERS or CPU count)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed; a time-derived seed is used and reported when omitted",
    )
    parser.add_argument(
        "--executor",
        choices=["process", "thread"],
        default="process",
        help="Pool used for parallel batches (default: process)",
    )
    parser.add_argument(
        "--time-limit",
        type=float,
        default=None,
        help="Stop starting new trials after this many seconds",
    )
    parser.add_argument("--output", type=Path, default=None, help="Write per-trial results to a .csv or .xlsx file")
    parser.add_argument("--disable-tqdm", action="store_true", help="Disable progress bars")
    parser.add_argument("--quiet", action="store_true", help="Only print errors")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])

    try:
        config = TrialConfig(
            side=args.side,
            trials=args.trials,
            workers=args.workers,
            seed=args.seed,
            executor=args.executor,
            time_limit=args.time_limit,
            use_tqdm=not args.disable_tqdm,
            verbose=not args.quiet,
        )
    except ValueError as exc:
        print(f"ERROR: {exc}")
        return 1

    result = run_to_file(args.output, config)
    return 0 if result is not None else 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
