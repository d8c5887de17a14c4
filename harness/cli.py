"""
Command-line entry point for the listing load harness.

Runs one named scenario, prints a summary table, and exits with a code
CI can act on.  Exit codes follow a three-state convention so that a
breached threshold can be told apart from a crashed harness:

- ``0``: every threshold check passed
- ``1``: at least one threshold was breached
- ``2``: the harness itself failed (bad arguments, unreadable policy, ...)

Usage examples::

    python -m harness list
    python -m harness run high_load --base-url http://localhost:5000
    python -m harness run continuous --thresholds my_thresholds.yml
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from harness import create_harness
from harness.report import format_summary
from harness.scenarios import SCENARIOS
from harness.thresholds import load_policy

EXIT_PASS = 0
EXIT_THRESHOLD_BREACH = 1
EXIT_SCRIPT_ERROR = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for the harness."""
    parser = argparse.ArgumentParser(
        prog="harness",
        description="Load-test a paginated listing endpoint and gate on thresholds.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List available scenarios")

    run = subparsers.add_parser("run", help="Run one scenario")
    run.add_argument("scenario", help="Scenario name (see 'list')")
    run.add_argument("--env", default=None, help="Configuration environment name")
    run.add_argument("--base-url", default=None, help="Overrides HARNESS_BASE_URL")
    run.add_argument(
        "--thresholds",
        type=Path,
        default=None,
        help=(
            "YAML thresholds file replacing the scenario's own limits "
            "(default: HARNESS_THRESHOLDS_FILE)"
        ),
    )
    run.add_argument("--workers", type=int, default=None, dest="worker_count")
    run.add_argument("--requests", type=int, default=None, dest="requests_per_worker")
    run.add_argument("--size", type=int, default=None)
    run.add_argument("--run-timeout", type=float, default=None)
    return parser.parse_args(argv)


def _list_scenarios() -> int:
    for name in sorted(SCENARIOS):
        print(f"{name:<16}{SCENARIOS[name].description}")
    return EXIT_PASS


def main(argv: list[str] | None = None) -> int:
    """
    Entry point: build the harness, run the scenario, print results.

    Returns:
        ``EXIT_PASS`` (0) if all thresholds are met,
        ``EXIT_THRESHOLD_BREACH`` (1) if any are breached, or
        ``EXIT_SCRIPT_ERROR`` (2) on unexpected failures.
    """
    args = parse_args(argv)
    if args.command == "list":
        return _list_scenarios()

    try:
        harness = create_harness(args.env, base_url=args.base_url)
        thresholds_file = args.thresholds or harness.config.THRESHOLDS_FILE
        policy = load_policy(thresholds_file) if thresholds_file else None
        result = harness.run(
            args.scenario,
            policy=policy,
            worker_count=args.worker_count,
            requests_per_worker=args.requests_per_worker,
            size=args.size,
            run_timeout=args.run_timeout,
        )
    except Exception as exc:  # pragma: no cover - defensive CLI guard
        print(f"Harness run failed: {exc}", file=sys.stderr)
        return EXIT_SCRIPT_ERROR

    print(format_summary(result))
    return EXIT_PASS if result.passed else EXIT_THRESHOLD_BREACH
