#!/usr/bin/env python3
"""file_search.py - Find candidate source files

Candidates are source files under a root whose text contains the flag
name. ripgrep does the scan when it is installed and enabled; otherwise a
directory walk with a plain substring check is used. Excluded directories
and the contents of `*.bundle` directories are skipped either way.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from flagcleaner.utils.config import CleanerSettings
from flagcleaner.utils.errors import SearchError

logger = logging.getLogger(__name__)


class FileSearch:
    """Locates the files a cleaning run should look at."""

    def __init__(self, settings: Optional[CleanerSettings] = None):
        self.settings = settings or CleanerSettings()

    def _check_root(self, root: Path) -> None:
        if not root.exists():
            raise SearchError(f"Path does not exist: {root}")
        if not root.is_dir():
            raise SearchError(f"Path is not a directory: {root}")

    def _is_source(self, path: Path) -> bool:
        return path.suffix in self.settings.source_extensions

    def _skip_dir(self, name: str) -> bool:
        return name in self.settings.excluded_dirs or name.endswith(".bundle")

    def collect_source_files(self, root: Path) -> List[Path]:
        """All source files below `root`, sorted."""
        self._check_root(root)
        found = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if not self._skip_dir(d))
            for name in filenames:
                path = Path(dirpath) / name
                if self._is_source(path):
                    found.append(path)
        return sorted(found)

    def find_files_containing(self, root: Path, needle: str) -> List[Path]:
        """
        Source files below `root` whose text contains `needle`.

        Args:
            root: Directory to scan
            needle: Literal text, usually the flag name

        Returns:
            Sorted list of matching paths

        Raises:
            SearchError: root is missing or ripgrep failed
        """
        self._check_root(root)
        rg = shutil.which("rg") if self.settings.use_ripgrep else None
        if rg:
            matches = self._search_with_ripgrep(rg, root, needle)
        else:
            logger.debug("ripgrep not used; scanning files in Python")
            matches = self._search_with_walk(root, needle)
        logger.debug(f"{len(matches)} file(s) under {root} mention {needle}")
        return matches

    def _search_with_ripgrep(self, rg: str, root: Path, needle: str) -> List[Path]:
        cmd = [rg, "--files-with-matches", "--hidden", "--no-messages", "-F", needle]
        for ext in self.settings.source_extensions:
            cmd += ["--glob", f"*{ext}"]
        for name in self.settings.excluded_dirs:
            cmd += ["--glob", f"!{name}/"]
        cmd += ["--glob", "!*.bundle/", str(root)]

        logger.debug(f"Running {' '.join(cmd)}")
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        # rg exits 1 when nothing matched
        if result.returncode not in (0, 1):
            raise SearchError(
                f"ripgrep failed with exit code {result.returncode}: {result.stderr.strip()}"
            )
        return sorted(Path(line) for line in result.stdout.splitlines() if line.strip())

    def _search_with_walk(self, root: Path, needle: str) -> List[Path]:
        matches = []
        for path in self.collect_source_files(root):
            try:
                with open(path, encoding=self.settings.encoding, errors="replace") as f:
                    if needle in f.read():
                        matches.append(path)
            except OSError as e:
                logger.warning(f"⚠️ Cannot read {path}: {e}")
        return matches
