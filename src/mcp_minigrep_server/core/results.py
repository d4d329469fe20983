"""JSON-facing result models for structured (tool) output."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .models import AnnotatedLine


class GrepMatch(BaseModel):
    source: str = Field(description="File path of the matching line; empty for inline text.")
    line_no: int = Field(ge=1, description="1-based line number within its source.")
    line: str = Field(description="Full text of the matching line.")
    spans: list[tuple[int, int]] = Field(
        description="Half-open [start, end) character offsets of each match, left to right."
    )


class GrepResult(BaseModel):
    count: int = Field(description="Number of matching lines returned.")
    truncated: bool = Field(default=False, description="True when the limit cut the scan short.")
    matches: list[GrepMatch] = Field(default_factory=list)
    output: str | None = Field(
        default=None, description="Rendered grep-style output (plain text), when requested."
    )


def to_match(source: str, annotated: AnnotatedLine) -> GrepMatch:
    """Build a GrepMatch from a line annotated with line numbers and emphasis on."""
    if annotated.line_no is None:
        raise ValueError("annotated line has no line number")
    return GrepMatch(
        source=source,
        line_no=annotated.line_no,
        line=annotated.text,
        spans=[(s.start, s.end) for s in annotated.spans()],
    )
