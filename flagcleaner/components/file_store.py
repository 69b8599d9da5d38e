#!/usr/bin/env python3
"""file_store.py - Byte-faithful file access for the cleaners

Reads and writes keep line endings untouched (`newline=""`), and writes go
through a temporary file in the target directory that is moved into place,
so a crash never leaves a half-written source file behind.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class FileStore:
    """Filesystem access used by SwiftCleaner and ObjcCleaner."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read_text(self, path: Path) -> str:
        with open(path, encoding=self.encoding, newline="") as f:
            return f.read()

    def write_text_atomic(self, path: Path, content: str) -> None:
        """
        Replace `path` with `content` atomically.

        Args:
            path: File to replace; its permission bits are kept
            content: New file text

        Raises:
            OSError: the temporary file could not be written or moved
        """
        fd, tmp_name = tempfile.mkstemp(
            dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding=self.encoding, newline="") as f:
                f.write(content)
            if path.exists():
                shutil.copymode(path, tmp_name)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug(f"Wrote {path}")

    def remove(self, path: Path) -> None:
        path.unlink()
        logger.debug(f"Deleted {path}")
