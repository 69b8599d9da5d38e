#!/usr/bin/env python3
"""swift_cleaner.py - Remove a feature flag from Swift sources

Per file: parse, rewrite the `#if` blocks on the flag, re-parse the result
and either write it back or delete the file when nothing meaningful is
left. Every file ends in exactly one FileOutcome.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Sequence

from flagcleaner.components.file_store import FileStore
from flagcleaner.core.batch import run_in_pool
from flagcleaner.core.emptiness import is_empty_file
from flagcleaner.core.rewriter import BlockRewriter
from flagcleaner.syntax.parser import parse_source
from flagcleaner.utils.errors import ParseFailure, TransformFailure
from flagcleaner.utils.models import ErrorKind, FileOutcome, FileStatus, ProcessResult

logger = logging.getLogger(__name__)


def process_source(source: str, flag: str, precedence: str = "sequential") -> ProcessResult:
    """
    Rewrite one Swift source text in memory.

    Args:
        source: File contents
        flag: Flag to resolve as permanently enabled
        precedence: Grouping mode for `&&` / `||` in conditions

    Returns:
        ProcessResult; `new_text` is set only when a block was resolved

    Raises:
        ParseFailure: the input does not parse
        TransformFailure: the rewritten text does not parse
    """
    tree = parse_source(source, precedence)
    rewriter = BlockRewriter(flag)
    rewritten = rewriter.rewrite(tree)
    if not rewriter.is_edited:
        return ProcessResult(edited=False)

    new_text = str(rewritten)
    try:
        reparsed = parse_source(new_text, precedence)
    except ParseFailure as e:
        raise TransformFailure(f"rewritten text no longer parses: {e}") from e

    logger.debug(f"Resolved {rewriter.resolved_blocks} block(s) on {flag}")
    return ProcessResult(
        edited=True, new_text=new_text, delete_requested=is_empty_file(reparsed)
    )


class SwiftCleaner:
    """
    Applies process_source to files on disk.

    Args:
        file_store: Filesystem access; swapped out in tests
        precedence: Grouping mode for conditions
        dry_run: Decide outcomes without writing or deleting
        max_workers: Thread pool size for process_files
    """

    def __init__(
        self,
        file_store: Optional[FileStore] = None,
        precedence: str = "sequential",
        dry_run: bool = False,
        max_workers: int = 1,
    ):
        self.file_store = file_store or FileStore()
        self.precedence = precedence
        self.dry_run = dry_run
        self.max_workers = max_workers

    def process_file(self, path: Path, flag: str) -> FileOutcome:
        if not self.file_store.exists(path):
            logger.error(f"⛔ File not found: {path}")
            return FileOutcome.failure(path, ErrorKind.NOT_FOUND, "file does not exist")

        try:
            source = self.file_store.read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"⛔ Cannot read {path}: {e}")
            return FileOutcome.failure(path, ErrorKind.READ_FAILURE, str(e))

        try:
            result = process_source(source, flag, self.precedence)
        except ParseFailure as e:
            logger.error(f"⛔ Cannot parse {path}: {e}")
            return FileOutcome.failure(path, ErrorKind.PARSE_FAILURE, str(e))
        except TransformFailure as e:
            logger.error(f"⛔ {path}: {e}")
            return FileOutcome.failure(path, ErrorKind.TRANSFORM_FAILURE, str(e))

        if not result.edited:
            logger.debug(f"No {flag} block in {path}")
            return FileOutcome(path=path, status=FileStatus.UNCHANGED)

        if result.delete_requested:
            return self._delete(path)
        return self._write(path, result.new_text)

    def _delete(self, path: Path) -> FileOutcome:
        if self.dry_run:
            logger.info(f"[DRY-RUN] Would delete {path}")
            return FileOutcome(path=path, status=FileStatus.DELETED, applied=False)
        try:
            self.file_store.remove(path)
        except OSError as e:
            logger.error(f"⛔ Cannot delete {path}: {e}")
            return FileOutcome.failure(path, ErrorKind.DELETE_FAILURE, str(e))
        logger.debug(f"Deleted empty file {path}")
        return FileOutcome(path=path, status=FileStatus.DELETED)

    def _write(self, path: Path, content: str) -> FileOutcome:
        if self.dry_run:
            logger.info(f"[DRY-RUN] Would write to {path}")
            return FileOutcome(path=path, status=FileStatus.WRITTEN, applied=False)
        try:
            self.file_store.write_text_atomic(path, content)
        except (OSError, UnicodeEncodeError) as e:
            logger.error(f"⛔ Cannot write {path}: {e}")
            return FileOutcome.failure(path, ErrorKind.WRITE_FAILURE, str(e))
        return FileOutcome(path=path, status=FileStatus.WRITTEN)

    def process_files(self, paths: Sequence[Path], flag: str) -> Dict[Path, FileOutcome]:
        """Process every path independently and collect the outcomes."""
        return run_in_pool(lambda path: self.process_file(path, flag), paths, self.max_workers)
