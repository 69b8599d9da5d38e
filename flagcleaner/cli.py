#!/usr/bin/env python3
"""cli.py - Command line entry point for flagcleaner

Usage:
    flagcleaner -f FEATURE_FLAG -p path/to/project [--dry-run] [-v]
"""

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import List, Optional

from flagcleaner import __version__
from flagcleaner.core.cleaner import Cleaner, log_report
from flagcleaner.utils.config import PRECEDENCE_MODES, load_settings
from flagcleaner.utils.errors import ConfigError, SearchError

logger = logging.getLogger(__name__)

_FLAG_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flagcleaner",
        description="Remove a feature flag and its #if scaffolding from Swift and Objective-C sources",
    )
    parser.add_argument("-f", "--flag", required=True, help="Flag to resolve as enabled")
    parser.add_argument(
        "-p",
        "--path",
        type=Path,
        default=Path.cwd(),
        help="Project directory to clean (default: current directory)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    parser.add_argument(
        "--dry-run", action="store_true", help="Report changes without writing files"
    )
    parser.add_argument("--config", type=Path, help="YAML settings file")
    parser.add_argument("--jobs", type=int, help="Number of files processed in parallel")
    parser.add_argument(
        "--precedence",
        choices=PRECEDENCE_MODES,
        help="Grouping of && and || in #if conditions",
    )
    parser.add_argument("--report", type=Path, help="Write a JSON report to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not _FLAG_NAME.match(args.flag):
        parser.error(f"invalid flag name: {args.flag!r}")

    logging.basicConfig(
        format="%(asctime)s %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    root = args.path.resolve()
    try:
        settings = load_settings(args.config, search_root=root)
        settings = settings.with_overrides(
            max_workers=args.jobs, condition_precedence=args.precedence
        )
    except ConfigError as e:
        logger.error(f"⛔ {e}")
        return EXIT_USAGE

    cleaner = Cleaner(root, args.flag, settings, dry_run=args.dry_run, verbose=args.verbose)
    try:
        report = cleaner.clean()
    except SearchError as e:
        logger.error(f"⛔ {e}")
        return EXIT_USAGE

    log_report(report, limit=settings.report_limit, verbose=args.verbose)

    if args.report:
        try:
            args.report.write_text(report.to_json(), encoding="utf-8")
        except OSError as e:
            logger.error(f"⛔ Cannot write report {args.report}: {e}")
            return EXIT_FAILURES
        logger.info(f"Report saved → {args.report}")

    return EXIT_FAILURES if report.failed_files else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
