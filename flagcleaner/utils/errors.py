#!/usr/bin/env python3
"""errors.py - Exception hierarchy for flagcleaner

Exceptions are raised inside the per-file pipeline and turned into
FileOutcome records at the file boundary.
"""

from typing import Optional


class FlagCleanerError(Exception):
    """Base class for all flagcleaner errors."""


class ParseFailure(FlagCleanerError):
    """Source text could not be parsed into a syntax tree."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.message = message
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class UnsupportedExpression(FlagCleanerError):
    """A compilation condition contains a construct we cannot evaluate."""


class SearchError(FlagCleanerError):
    """Candidate file discovery failed."""


class ConfigError(FlagCleanerError):
    """Configuration file is unreadable or invalid."""


class TransformFailure(FlagCleanerError):
    """A rewritten tree no longer parses."""
