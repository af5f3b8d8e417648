#!/usr/bin/env python3
"""Run one Live Score refresh cycle from the command line.

Prints a JSON summary of the run. Exit code 0 when no venue failed, 2 when
at least one venue failed.
"""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from livescore.config import settings  # noqa: E402
from livescore.logging_config import setup_logging  # noqa: E402


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return value


def _positive_float(raw: str) -> float:
    value = float(raw)
    if value <= 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--batch-size", type=_positive_int, default=settings.REFRESH_BATCH_SIZE)
    parser.add_argument("--all", action="store_true", help="ignore the batch size limit")
    parser.add_argument("--stale-hours", type=_positive_float, default=settings.REFRESH_STALE_HOURS)
    parser.add_argument("--time-budget", type=_positive_float, default=settings.REFRESH_TIME_BUDGET_S)
    parser.add_argument("--concurrency", type=_positive_int, default=settings.REFRESH_CONCURRENCY)
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        type=str.upper,
        default=None,
        help="overrides APP_LOG_LEVEL",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    from livescore.workers.refresh import _run_refresh, build_refresher

    refresher = build_refresher(
        batch_size=None if args.all else args.batch_size,
        stale_hours=args.stale_hours,
        time_budget_s=args.time_budget,
        concurrency=args.concurrency,
    )
    stats = asyncio.run(_run_refresh(refresher))
    print(json.dumps(stats.as_dict(), ensure_ascii=False))
    return 2 if stats.failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
