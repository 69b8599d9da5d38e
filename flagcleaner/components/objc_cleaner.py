#!/usr/bin/env python3
"""objc_cleaner.py - Textual flag removal for Objective-C sources

Objective-C files are not parsed. A regular expression matches each
`#if FLAG` / `#ifdef FLAG` block and keeps its first body; `#elif` and
`#else` bodies are dropped together with the `#endif` line. Nested blocks
are not understood.
"""

import logging
import re
from pathlib import Path
from typing import Dict, Optional, Pattern, Sequence, Tuple

from flagcleaner.components.file_store import FileStore
from flagcleaner.core.batch import run_in_pool
from flagcleaner.utils.models import ErrorKind, FileOutcome, FileStatus

logger = logging.getLogger(__name__)

_BLOCK_TEMPLATE = (
    r"(#{directive} {flag}(?![A-Za-z0-9_]).*\n)"
    r"([\s\S]*?)"
    r"(#elif.*\n[\s\S]*?)?"
    r"(#else.*\n[\s\S]*?)?"
    r"(#endif.*\n?)"
)


def block_pattern(directive: str, flag: str) -> Pattern:
    return re.compile(_BLOCK_TEMPLATE.format(directive=directive, flag=re.escape(flag)))


def clean_objc_source(source: str, flag: str) -> Tuple[str, int]:
    """
    Strip the flag's blocks from Objective-C text.

    Returns:
        (new_text, number_of_blocks_replaced)
    """
    total = 0
    for directive in ("if", "ifdef"):
        source, count = block_pattern(directive, flag).subn(r"\2", source)
        total += count
    return source, total


class ObjcCleaner:
    """Runs clean_objc_source over files, mirroring SwiftCleaner's outcomes."""

    def __init__(
        self,
        file_store: Optional[FileStore] = None,
        dry_run: bool = False,
        max_workers: int = 1,
    ):
        self.file_store = file_store or FileStore()
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

        new_text, count = clean_objc_source(source, flag)
        if new_text == source:
            return FileOutcome(path=path, status=FileStatus.UNCHANGED)

        logger.debug(f"Replaced {count} {flag} block(s) in {path}")
        if self.dry_run:
            logger.info(f"[DRY-RUN] Would write to {path}")
            return FileOutcome(path=path, status=FileStatus.WRITTEN, applied=False)
        try:
            self.file_store.write_text_atomic(path, new_text)
        except (OSError, UnicodeEncodeError) as e:
            logger.error(f"⛔ Cannot write {path}: {e}")
            return FileOutcome.failure(path, ErrorKind.WRITE_FAILURE, str(e))
        return FileOutcome(path=path, status=FileStatus.WRITTEN)

    def process_files(self, paths: Sequence[Path], flag: str) -> Dict[Path, FileOutcome]:
        return run_in_pool(lambda path: self.process_file(path, flag), paths, self.max_workers)
