#!/usr/bin/env python3
"""cleaner.py - Orchestrates one flag-removal run over a directory tree

Finds the files that mention the flag, routes each one to the Swift or the
Objective-C cleaner by extension, and folds the per-file outcomes into a
CleanReport.
"""

import logging
import time
from pathlib import Path
from typing import List, Optional

from flagcleaner.components.file_search import FileSearch
from flagcleaner.components.file_store import FileStore
from flagcleaner.components.objc_cleaner import ObjcCleaner
from flagcleaner.core.swift_cleaner import SwiftCleaner
from flagcleaner.utils.config import CleanerSettings
from flagcleaner.utils.models import CleanReport

logger = logging.getLogger(__name__)


class Cleaner:
    """
    Removes one feature flag from every Swift and Objective-C file under a path.

    Args:
        path: Root directory to scan
        flag: Flag to resolve as permanently enabled
        settings: Validated settings; defaults when omitted
        dry_run: Report what would change without touching files
        verbose: Log every changed file as well as the summary
    """

    def __init__(
        self,
        path: Path,
        flag: str,
        settings: Optional[CleanerSettings] = None,
        dry_run: bool = False,
        verbose: bool = False,
    ):
        self.path = path
        self.flag = flag
        self.settings = settings or CleanerSettings()
        self.dry_run = dry_run
        self.verbose = verbose

        store = FileStore(self.settings.encoding)
        self.search = FileSearch(self.settings)
        self.swift_cleaner = SwiftCleaner(
            file_store=store,
            precedence=self.settings.condition_precedence,
            dry_run=dry_run,
            max_workers=self.settings.max_workers,
        )
        self.objc_cleaner = ObjcCleaner(
            file_store=store, dry_run=dry_run, max_workers=self.settings.max_workers
        )

    def clean(self) -> CleanReport:
        """
        Run search and both cleaners.

        Raises:
            SearchError: the root is missing or the search tool failed
        """
        report = CleanReport(root=self.path, flag=self.flag, dry_run=self.dry_run)
        started = time.perf_counter()

        logger.info(f"Searching for {self.flag} in {self.path}")
        candidates = self.search.find_files_containing(self.path, self.flag)
        report.total_files = len(candidates)
        if self.verbose:
            for path in candidates:
                logger.info(f"  Candidate: {path}")

        swift_files: List[Path] = []
        objc_files: List[Path] = []
        for path in candidates:
            if path.suffix in self.settings.swift_extensions:
                swift_files.append(path)
            elif path.suffix in self.settings.objc_extensions:
                objc_files.append(path)

        logger.info(
            f"Found {len(swift_files)} Swift and {len(objc_files)} Objective-C file(s)"
        )
        for outcome in self.swift_cleaner.process_files(swift_files, self.flag).values():
            report.add(outcome)
        for outcome in self.objc_cleaner.process_files(objc_files, self.flag).values():
            report.add(outcome)

        report.elapsed_seconds = time.perf_counter() - started
        return report


def log_report(report: CleanReport, limit: int = 0, verbose: bool = False) -> None:
    """
    Log the run summary.

    Args:
        report: Finished run
        limit: Max unchanged files listed per extension, 0 for all
        verbose: Also list every written and deleted file
    """
    prefix = "[DRY-RUN] " if report.dry_run else ""

    if verbose:
        for path in report.changed_files:
            outcome = report.outcomes[path]
            logger.info(f"  ✓ {outcome.status.value.capitalize()} {path}")

    groups = report.unchanged_by_extension()
    if groups:
        logger.warning("⚠️  Files mentioning the flag that were left unchanged:")
        for extension, paths in groups.items():
            logger.warning(f"  {extension} ({len(paths)})")
            shown = paths[:limit] if limit else paths
            for path in shown:
                logger.warning(f"    {path}")
            if len(shown) < len(paths):
                logger.warning(f"    ... and {len(paths) - len(shown)} more")

    for path in report.failed_files:
        outcome = report.outcomes[path]
        logger.error(f"⛔ {path}: {outcome.error.value} ({outcome.reason})")

    changed = len(report.changed_files)
    logger.info(
        f"{prefix}✓ Removed {report.flag} from {changed} of {report.total_files} file(s) "
        f"({len(report.deleted_files)} deleted) in {report.elapsed_seconds:.2f}s"
    )
    if report.failed_files:
        logger.error(f"⛔ {len(report.failed_files)} file(s) failed")
