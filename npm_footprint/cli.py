"""
npm_footprint/cli.py — Command-line interface.

Two modes:
  1. --npm a,b,c     estimate listed packages using their registry download
                     counts over the window (default: last calendar month)
  2. --repo PATH     estimate every dependency of PATH/package.json, one
                     transfer each (download counts are ignored)

The report goes to stdout; --out additionally writes it as JSON, and
--condensed aggregates it into a single summary. Logging goes to stderr.

Usage:
    python -m npm_footprint --npm react,lodash --condensed
    python -m npm_footprint --repo ./my-app --out footprint.json
"""

from __future__ import annotations

import argparse
import logging
import sys

from npm_footprint import __version__
from npm_footprint.config import DEFAULT_CONFIG, FootprintConfig, contribution_total, is_balanced
from npm_footprint.errors import FootprintError
from npm_footprint.timespan import Timespan, last_month_span, parse_base_time


# ── Logging setup ─────────────────────────────────────────────────────────────

def _setup_logging(level: str = "WARNING") -> None:
    """Configure root logger with timestamps, writing to stderr."""
    numeric = getattr(logging, level.upper(), logging.WARNING)
    fmt = "%(asctime)s  %(levelname)-8s  %(name)s — %(message)s"
    datefmt = "%H:%M:%S"
    logging.basicConfig(level=numeric, format=fmt, datefmt=datefmt, stream=sys.stderr)
    # Silence noisy urllib3 / httplib debug output
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("urllib.request").setLevel(logging.WARNING)


logger = logging.getLogger("npm_footprint.cli")


# ── Helpers ───────────────────────────────────────────────────────────────────

def _base_time(value: str) -> Timespan:
    try:
        return parse_base_time(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def _config_from_args(args: argparse.Namespace) -> FootprintConfig:
    config = FootprintConfig(
        grid_intensities=DEFAULT_CONFIG.grid_intensities,
        contributions=DEFAULT_CONFIG.contributions,
        max_workers=args.workers,
    )
    if not is_balanced(config.contributions):
        logger.info(
            "Contribution shares sum to %g%%, not 100%%; estimates are scaled accordingly.",
            contribution_total(config.contributions),
        )
    return config


# ── Command ───────────────────────────────────────────────────────────────────

def cmd_footprint(args: argparse.Namespace) -> int:
    """Resolve packages → fan-out lookups → (condense) → print / write."""
    from npm_footprint.ingestion.manifest import parse_npm_list, read_package_json_dependencies
    from npm_footprint.ingestion.orchestrator import collect_footprints
    from npm_footprint.reports.footprint_report import (
        condense,
        emit_report,
        footprints_to_records,
    )

    config = _config_from_args(args)
    timespan = args.base_time or last_month_span()

    if args.npm:
        packages = parse_npm_list(args.npm)
        ignore_downloads = False
        logger.info("Mode: npm list (%d packages)", len(packages))
    else:
        packages = read_package_json_dependencies(args.repo or ".")
        ignore_downloads = True
        logger.info("Mode: repository %s (%d dependencies)", args.repo or ".", len(packages))

    logger.info("Timespan: %s → %s", timespan.start, timespan.end)

    footprints = collect_footprints(
        packages,
        timespan,
        ignore_downloads=ignore_downloads,
        config=config,
    )

    if args.condensed:
        report = condense(footprints, timespan, config)
    else:
        report = footprints_to_records(footprints)

    emit_report(report, args.out or None)
    return 0


# ── Argument parser ───────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="npm-footprint",
        description=(
            "Estimate energy use and CO2 emissions caused by downloading npm packages.\n"
            "Sizes come from bundlephobia.com, download counts from api.npmjs.org."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Listed packages, downloads over last month
  python -m npm_footprint --npm react,lodash

  # Aggregate into one summary and save it
  python -m npm_footprint --npm react,@babel/core --condensed --out footprint.json

  # Window = month before 2026-03-15 (i.e. February 2026)
  python -m npm_footprint --npm express --base-time 2026-03-15

  # Dependencies of a local repository (one transfer each)
  python -m npm_footprint --repo ../my-app --condensed
        """,
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--npm",
        default="",
        metavar="LIST",
        help="Comma-separated npm packages to check, optionally name@version",
    )
    source.add_argument(
        "--repo",
        default=None,
        metavar="PATH",
        help="Repository whose package.json dependencies to check (default: .)",
    )
    parser.add_argument(
        "--base-time",
        type=_base_time,
        default=None,
        metavar="YYYY-MM-DD",
        help="Date whose previous calendar month is the download window (default: last month)",
    )
    parser.add_argument(
        "--out",
        default="",
        metavar="PATH",
        help="Also write the report as JSON to PATH",
    )
    parser.add_argument(
        "--condensed",
        action="store_true",
        help="Aggregate all packages into a single summary",
    )
    parser.add_argument(
        "--workers",
        type=_positive_int,
        default=DEFAULT_CONFIG.max_workers,
        metavar="N",
        help=f"Concurrent lookup threads (default: {DEFAULT_CONFIG.max_workers})",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.set_defaults(func=cmd_footprint)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.log_level)
    try:
        return args.func(args)
    except FootprintError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
