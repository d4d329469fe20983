"""Fatal errors raised before or during a grep run."""

from __future__ import annotations


class GrepError(Exception):
    """Base class for run-aborting grep errors."""


class PatternError(GrepError, ValueError):
    """The pattern could not be compiled."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class SourceConfigError(GrepError, ValueError):
    """The requested input sources are inconsistent."""
