"""CLI tool for running the product-matching contract catalog."""

import argparse
import asyncio
import json
import sys

from matchguard.errors.errors import HarnessError
from matchguard.harness.executor import run_catalog
from matchguard.harness.scenarios import (
    BOUNDARY_SCENARIOS,
    all_scenarios,
    load_quality_scenarios,
    select,
)
from matchguard.models.matching_models import CatalogReport, Outcome
from matchguard.utils.config import get_settings
from matchguard.utils.logging_utils import setup_logging

logger = setup_logging(__name__)

_MARKS = {
    Outcome.PASSED: "✅",
    Outcome.REJECTED_AS_EXPECTED: "✅",
    Outcome.CONTRACT_VIOLATION: "❌",
    Outcome.INFRASTRUCTURE_FAILURE: "⚠️ ",
    Outcome.HARNESS_ERROR: "💥",
}


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def _catalog(quality_file: str | None):
    if quality_file is None:
        return all_scenarios()
    return [*load_quality_scenarios(quality_file), *BOUNDARY_SCENARIOS]


def list_scenarios(args) -> None:
    """Print the scenarios that would run."""
    scenarios = select(_catalog(args.quality_file), suite=args.suite, ids=args.ids)
    print(f"\n📋 Scenarios ({len(scenarios)}):")
    for scenario in scenarios:
        print(
            f"  {scenario.id:<6} [{scenario.suite.value}] "
            f"{scenario.intent.kind.value:<4} -> {scenario.expected_status}  "
            f"{scenario.description}"
        )


def print_report(catalog: CatalogReport) -> None:
    print("\n🔍 Contract results:")
    for report in catalog.reports:
        line = f"  {_MARKS[report.outcome]} {report.scenario_id:<6} {report.outcome.value}"
        if report.status_code is not None:
            line += f" (status {report.status_code})"
        print(line)
        if report.message and not report.ok:
            print(f"      {report.message}")

    print("\n📊 Summary:")
    for outcome, count in catalog.counts().items():
        print(f"  {outcome.value}: {count}")


def run(args) -> bool:
    """Run the selected scenarios and return True when all of them held."""
    settings = get_settings()
    scenarios = select(_catalog(args.quality_file), suite=args.suite, ids=args.ids)
    logger.info(f"Running {len(scenarios)} scenarios against {settings.base_url}")
    catalog = asyncio.run(run_catalog(scenarios, settings, workers=args.workers))
    print_report(catalog)

    if args.json:
        with open(args.json, "w", encoding="utf-8") as f:
            json.dump(catalog.model_dump(mode="json"), f, indent=2)
        logger.info(f"Wrote JSON report to {args.json}")
    return catalog.ok


def main():
    parser = argparse.ArgumentParser(description="Product Matching Contract CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for name, help_text in (
        ("list", "List catalog scenarios"),
        ("run", "Run catalog scenarios against the service"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--suite", "-s", choices=["quality", "boundary"], help="Only one suite"
        )
        sub.add_argument(
            "--id", dest="ids", action="append", help="Scenario id (repeatable)"
        )
        sub.add_argument(
            "--quality-file", "-q", help="JSON file replacing the packaged quality cases"
        )
        if name == "run":
            sub.add_argument(
                "--workers",
                "-w",
                type=_positive_int,
                help="Scenarios executed concurrently",
            )
            sub.add_argument("--json", help="Write the report as JSON to this path")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command == "list":
            list_scenarios(args)
        elif args.command == "run":
            if not run(args):
                sys.exit(1)
    except (HarnessError, KeyError, OSError, ValueError) as e:
        logger.error(f"Error: {str(e)}")
        sys.exit(2)


if __name__ == "__main__":
    main()
