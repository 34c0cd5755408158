"""
Command-line entry point for the FHIR samples harness.

Usage:
    fhir-harness --samples-dir fhir --datasets-dir datasets
    fhir-harness --json --output results/run.json
    python -m fhir_harness --timeout 120 --log-level DEBUG
"""

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from fhir_harness.config.logging import configure_logging
from fhir_harness.config.settings import Settings, get_settings
from fhir_harness.errors import ConfigurationError
from fhir_harness.models import RunReport, StepStatus
from fhir_harness.sequencer import TestSequencer

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2

STATUS_LABELS = {
    StepStatus.PASSED: "PASS",
    StepStatus.FAILED: "FAIL",
    StepStatus.SKIPPED: "SKIP",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fhir-harness",
        description="Run the FHIR resource samples against a fresh dataset and FHIR store",
    )
    parser.add_argument("--samples-dir", type=Path, help="Directory holding the FHIR samples")
    parser.add_argument("--datasets-dir", type=Path, help="Directory holding the dataset samples")
    parser.add_argument("--region", dest="cloud_region", help="Cloud region (default: us-central1)")
    parser.add_argument("--fhir-version", help="FHIR store version (default: STU3)")
    parser.add_argument("--resource-type", help="Resource type to exercise (default: Patient)")
    parser.add_argument("--bundle-file", help="Bundle file passed to the bundle sample")
    parser.add_argument("--interpreter", help="Program used to run each sample script")
    parser.add_argument(
        "--timeout",
        dest="command_timeout",
        type=float,
        help="Per-command timeout in seconds (default: none)",
    )
    parser.add_argument("--log-level", help="Log level (default: INFO)")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the run report as JSON instead of a summary",
    )
    parser.add_argument("--output", type=Path, help="Also write the JSON report to this file")
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Build settings from the environment, overridden by any CLI options given."""
    overrides = {
        key: value
        for key, value in vars(args).items()
        if key in Settings.model_fields and value is not None
    }
    if not overrides:
        return get_settings()
    return Settings(**overrides)


def format_summary(report: RunReport) -> str:
    lines = [
        f"Run {report.run_id}: dataset {report.dataset_id}, FHIR store {report.fhir_store_id}",
        "-" * 60,
    ]
    for step in report.steps:
        line = f"  {STATUS_LABELS[step.status]}  {step.description}"
        if step.status == StepStatus.PASSED:
            line += f" ({step.duration_ms:.0f} ms)"
        elif step.message:
            line += f"\n        {step.message}"
        lines.append(line)

    passed = sum(1 for step in report.steps if step.status == StepStatus.PASSED)
    skipped = sum(1 for step in report.steps if step.status == StepStatus.SKIPPED)
    lines.extend(
        [
            "",
            "Summary:",
            f"  Passed: {passed}",
            f"  Failed: {report.failed_count}",
            f"  Skipped: {skipped}",
        ]
    )
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args)
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_CONFIG

    configure_logging(level=settings.log_level, json_format=settings.log_json)

    try:
        report = TestSequencer(settings).run()
    except ConfigurationError as e:
        print(e.message, file=sys.stderr)
        return EXIT_CONFIG

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(report.model_dump_json(indent=2))

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print(format_summary(report))

    return EXIT_OK if report.passed else EXIT_FAILED
