"""Command-line trigger: ``python -m signal_story <job> [options]``."""

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from .logging_config import logging as _  # noqa: F401  # ensure config applied early
from .models import EventState, RunOptions
from .services.calendar import parse_state
from .workflows.jobs import JOBS, build_job


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="signal_story", description="Run one signal-to-story job once.")
    parser.add_argument("job", nargs="?", choices=sorted(JOBS), help="Job to run.")
    parser.add_argument("--list", action="store_true", help="List available jobs and exit.")
    parser.add_argument("--days", type=int, default=None, help="Ingestion window in days (default: per job).")
    parser.add_argument("--target", default=None, help="Restrict the run to one logical target id.")
    parser.add_argument("--sample", action="store_true", help="Use synthetic records instead of live data.")
    parser.add_argument(
        "--state",
        default=None,
        choices=[s.value.lower() for s in EventState],
        help="Event state for calendar sample runs (default: live).",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = _parser()
    args = parser.parse_args(argv)

    if args.list:
        for name, spec in JOBS.items():
            print(f"{name:16} {spec.description}")
        return 0
    if not args.job:
        parser.error("a job name is required (see --list)")
    if args.days is not None and args.days < 1:
        parser.error("--days must be at least 1")

    options = RunOptions(
        days=args.days,
        target=args.target,
        sample=args.sample,
        sample_state=parse_state(args.state),
    )
    summary = build_job(args.job).run(options)
    print(json.dumps(summary.to_response(), indent=2))
    return 0 if summary.success else 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
