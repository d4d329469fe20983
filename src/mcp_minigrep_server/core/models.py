"""Core data models for the grep pipeline."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from enum import Enum


class SourceKind(str, Enum):
    """Where the lines of a run come from."""

    STREAM = "stream"
    FILE_LIST = "file_list"
    DIRECTORY = "directory"


class ErrorPolicy(str, Enum):
    """What to do with a file that cannot be opened or read."""

    ABORT = "abort"
    SKIP = "skip"


@dataclass(frozen=True, slots=True)
class Query:
    """Pattern text plus its case-sensitivity mode."""

    pattern: str
    case_insensitive: bool = False


@dataclass(frozen=True, slots=True)
class Source:
    """Input selection for a run (stream, explicit files, or one directory)."""

    kind: SourceKind
    paths: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Line:
    """One decoded physical line (terminator stripped)."""

    label: str  # "" for the stream
    line_no: int  # 1-based, restarts per file
    text: str


@dataclass(frozen=True, slots=True)
class MatchSpan:
    """Half-open [start, end) character range of a match within a line."""

    start: int
    end: int


@dataclass(frozen=True, slots=True)
class Segment:
    text: str
    emphasized: bool = False


@dataclass(frozen=True, slots=True)
class AnnotatedLine:
    """A matching line split into plain and emphasized segments."""

    segments: tuple[Segment, ...]
    line_no: int | None = None  # set only when line numbers are shown

    @property
    def text(self) -> str:
        """The original line text (segments joined)."""
        return "".join(s.text for s in self.segments)

    def spans(self) -> list[MatchSpan]:
        """Offsets of emphasized segments within the original line."""
        out: list[MatchSpan] = []
        pos = 0
        for s in self.segments:
            end = pos + len(s.text)
            if s.emphasized:
                out.append(MatchSpan(pos, end))
            pos = end
        return out


@dataclass(frozen=True, slots=True)
class SourceBlock:
    """Lines of one source (a file, or the whole stream)."""

    label: str
    lines: AsyncIterator[Line]


@dataclass(frozen=True, slots=True)
class AnnotatedBlock:
    """Annotated (matching) lines of one source."""

    label: str
    lines: AsyncIterator[AnnotatedLine]
