"""Pattern compilation and per-line match discovery."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import PatternError
from .models import MatchSpan, Query


@dataclass(frozen=True, slots=True)
class Matcher:
    """Compiled, read-only form of a Query. Safe to share between tasks."""

    query: Query
    regex: re.Pattern[str]

    def find_all(self, text: str) -> list[MatchSpan]:
        """Return leftmost, non-overlapping, non-empty matches in order.

        Zero-width matches (``^``, ``\\b``, ``a*`` on "b") are discarded, so a
        pattern that can only match the empty string never selects a line.
        """
        return [
            MatchSpan(m.start(), m.end())
            for m in self.regex.finditer(text)
            if m.end() > m.start()
        ]

    def is_match(self, text: str) -> bool:
        """Quick check: does the line contain at least one non-empty match?"""
        m = self.regex.search(text)
        if m is None:
            return False
        if m.end() > m.start():
            return True
        return bool(self.find_all(text))


def compile_query(query: Query) -> Matcher:
    """Compile a Query. Raises PatternError on malformed syntax."""
    flags = re.IGNORECASE if query.case_insensitive else 0
    try:
        regex = re.compile(query.pattern, flags)
    except re.error as e:
        raise PatternError(query.pattern, str(e)) from e
    return Matcher(query=query, regex=regex)


def compile_pattern(pattern: str, *, case_insensitive: bool = False) -> Matcher:
    return compile_query(Query(pattern=pattern, case_insensitive=case_insensitive))
