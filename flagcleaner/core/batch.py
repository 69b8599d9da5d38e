#!/usr/bin/env python3
"""batch.py - Run a per-file function over many files in a thread pool"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Dict, Sequence

from flagcleaner.utils.models import ErrorKind, FileOutcome

logger = logging.getLogger(__name__)


def run_in_pool(
    func: Callable[[Path], FileOutcome], paths: Sequence[Path], max_workers: int = 4
) -> Dict[Path, FileOutcome]:
    """
    Apply `func` to every path and fold the outcomes into one map.

    Args:
        func: Per-file worker; expected to turn its own errors into outcomes
        paths: Files to process, each handled independently
        max_workers: Pool size; 1 processes the files one after another

    Returns:
        Outcomes keyed by path, in the order of `paths`
    """
    outcomes: Dict[Path, FileOutcome] = {}

    def record(path: Path, compute: Callable[[], FileOutcome]) -> None:
        try:
            outcomes[path] = compute()
        except Exception as e:
            logger.exception(f"⛔ Unexpected error while processing {path}")
            outcomes[path] = FileOutcome.failure(
                path, ErrorKind.INTERNAL_ERROR, f"{type(e).__name__}: {e}"
            )

    if max_workers <= 1 or len(paths) <= 1:
        for path in paths:
            record(path, lambda path=path: func(path))
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {executor.submit(func, path): path for path in paths}
            for future in as_completed(futures):
                record(futures[future], future.result)

    return {path: outcomes[path] for path in paths}
