#!/usr/bin/env python3
"""models.py - Result records shared by the cleaners

Every processed file ends in exactly one FileOutcome. Batch runs fold the
outcomes into a CleanReport instead of sharing a mutable list between
workers.
"""

import json
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class FileStatus(str, Enum):
    """Terminal state of one file."""

    WRITTEN = "written"
    DELETED = "deleted"
    UNCHANGED = "unchanged"
    FAILED = "failed"


class ErrorKind(str, Enum):
    """Why a file ended in FAILED."""

    NOT_FOUND = "not_found"
    READ_FAILURE = "read_failure"
    PARSE_FAILURE = "parse_failure"
    WRITE_FAILURE = "write_failure"
    DELETE_FAILURE = "delete_failure"
    TRANSFORM_FAILURE = "transform_failure"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of rewriting one source text in memory."""

    edited: bool
    new_text: Optional[str] = None
    delete_requested: bool = False


@dataclass(frozen=True)
class FileOutcome:
    """Outcome of processing one file on disk."""

    path: Path
    status: FileStatus
    error: Optional[ErrorKind] = None
    reason: str = ""
    applied: bool = True

    @property
    def changed(self) -> bool:
        return self.status in (FileStatus.WRITTEN, FileStatus.DELETED)

    @property
    def failed(self) -> bool:
        return self.status is FileStatus.FAILED

    @classmethod
    def failure(
        cls, path: Path, error: ErrorKind, reason: str
    ) -> "FileOutcome":
        return cls(path=path, status=FileStatus.FAILED, error=error, reason=reason)


@dataclass
class CleanReport:
    """Aggregate of one cleaning run."""

    root: Path
    flag: str
    total_files: int = 0
    outcomes: Dict[Path, FileOutcome] = field(default_factory=dict)
    elapsed_seconds: float = 0.0
    dry_run: bool = False
    start_time: datetime = field(default_factory=datetime.now)

    def add(self, outcome: FileOutcome) -> None:
        self.outcomes[outcome.path] = outcome

    def _with_status(self, *statuses: FileStatus) -> List[Path]:
        return sorted(
            path for path, outcome in self.outcomes.items()
            if outcome.status in statuses
        )

    @property
    def processed_count(self) -> int:
        return len(self.outcomes)

    @property
    def changed_files(self) -> List[Path]:
        return self._with_status(FileStatus.WRITTEN, FileStatus.DELETED)

    @property
    def deleted_files(self) -> List[Path]:
        return self._with_status(FileStatus.DELETED)

    @property
    def unchanged_files(self) -> List[Path]:
        return self._with_status(FileStatus.UNCHANGED)

    @property
    def failed_files(self) -> List[Path]:
        return self._with_status(FileStatus.FAILED)

    def unchanged_by_extension(self) -> Dict[str, List[Path]]:
        """Group unchanged files by suffix, e.g. {'.swift': [...]}."""
        groups: Dict[str, List[Path]] = defaultdict(list)
        for path in self.unchanged_files:
            groups[path.suffix or "Unknown"].append(path)
        return dict(sorted(groups.items()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": str(self.root),
            "flag": self.flag,
            "start_time": self.start_time.isoformat(),
            "dry_run": self.dry_run,
            "total_files": self.total_files,
            "processed": self.processed_count,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "files": [
                {
                    "path": str(outcome.path),
                    "status": outcome.status.value,
                    "error": outcome.error.value if outcome.error else None,
                    "reason": outcome.reason,
                    "applied": outcome.applied,
                }
                for _, outcome in sorted(self.outcomes.items())
            ],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
