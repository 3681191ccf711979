"""Command-line entry point for farmaguardia."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from farmaguardia.config import local_tz
from farmaguardia.fs.paths import qa_dir
from farmaguardia.headless import HeadlessOptions, HeadlessResult, execute_headless
from farmaguardia.model.regions import REGIONS, ZBS_CATALOGUE

REGION_CHOICES = tuple(region.id for region in REGIONS)
ZONE_CHOICES = tuple(zone.id for zone in ZBS_CATALOGUE)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find the on-duty pharmacy in a Segovia duty calendar")
    parser.add_argument(
        "--region",
        choices=REGION_CHOICES,
        required=True,
        help="Region whose calendar layout the PDF follows.",
    )
    parser.add_argument(
        "--input",
        dest="input_pdf",
        required=True,
        help="Absolute or relative path to the calendar PDF.",
    )
    parser.add_argument(
        "--at",
        dest="at",
        help="Instant to resolve in ISO 8601 (default: now, or FARMAGUARDIA_NOW).",
    )
    parser.add_argument(
        "--zone",
        choices=ZONE_CHOICES,
        help="Rural health zone to report (segovia-rural only).",
    )
    parser.add_argument(
        "--list",
        dest="list_entries",
        action="store_true",
        help="Print every parsed entry before the lookup.",
    )
    parser.add_argument(
        "--qa-png",
        dest="qa_png",
        nargs="?",
        const="",
        help="PNG path or directory for scan overlay images (default: <data home>/qa).",
    )
    parser.add_argument(
        "--log-dir",
        dest="log_dir",
        help="Directory for per-run logs (default: <data home>/logs).",
    )
    parser.add_argument(
        "--log-file",
        dest="log_file",
        help="Optional explicit log file path.",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Log at DEBUG level.",
    )
    return parser


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def create_headless_options(args: argparse.Namespace) -> HeadlessOptions:
    """Return ``HeadlessOptions`` derived from parsed ``args``."""

    return HeadlessOptions(
        input_pdf=Path(args.input_pdf).expanduser().resolve(),
        region=args.region,
        at=_parse_instant(args.at) if args.at else None,
        zone=args.zone,
        list_entries=bool(args.list_entries),
        qa_png=_qa_target(args.qa_png),
        log_dir=Path(args.log_dir).expanduser() if args.log_dir else None,
        log_file=Path(args.log_file).expanduser() if args.log_file else None,
        trace=bool(args.trace),
    )


def _qa_target(raw: Optional[str]) -> Optional[Path]:
    if raw is None:
        return None
    return Path(raw).expanduser() if raw else qa_dir()


def _parse_instant(raw: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(raw.strip())
    except ValueError as exc:
        raise ValueError("--at must be an ISO 8601 date-time, e.g. 2025-01-01T15:00") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=local_tz())
    return parsed


def _print_result(result: HeadlessResult) -> None:
    for line in result.lines:
        print(line, flush=True)
    print(result.summary_line, flush=True)
    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr, flush=True)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    try:
        result = execute_headless(create_headless_options(args))
    except FileNotFoundError as exc:
        print(f"HEADLESS_MISS reason=input_missing\nError: {exc}", file=sys.stderr, flush=True)
        return 2
    except ValueError as exc:
        print(f"HEADLESS_MISS reason=invalid_args\nError: {exc}", file=sys.stderr, flush=True)
        return 2
    _print_result(result)
    return result.exit_code


__all__ = ["REGION_CHOICES", "ZONE_CHOICES", "build_parser", "parse_arguments", "create_headless_options", "main"]


if __name__ == "__main__":
    sys.exit(main())
