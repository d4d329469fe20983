"""Turn a line plus its matches into segments, and segments into text."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from rich.color import ColorSystem
from rich.errors import StyleSyntaxError
from rich.style import Style

from .models import AnnotatedLine, Line, MatchSpan, Segment

Emphasis = Callable[[str], str]

DEFAULT_EMPHASIS_STYLE = "red"


def no_emphasis(text: str) -> str:
    return text


@dataclass(frozen=True)
class StyleEmphasis:
    """Encode emphasized text with a rich style as ANSI escape codes."""

    style: str = DEFAULT_EMPHASIS_STYLE
    color_system: ColorSystem = ColorSystem.STANDARD
    _parsed: Style = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            parsed = Style.parse(self.style)
        except StyleSyntaxError as e:
            raise ValueError(f"Invalid emphasis style {self.style!r}: {e}") from e
        object.__setattr__(self, "_parsed", parsed)

    def __call__(self, text: str) -> str:
        return self._parsed.render(text, color_system=self.color_system)


def annotate(
    line: Line,
    matches: Sequence[MatchSpan],
    *,
    show_line_number: bool = False,
    emphasize: bool = False,
) -> AnnotatedLine | None:
    """Split a line around its matches.

    Returns None when there are no matches: non-matching lines produce no
    output at all. Otherwise the segments alternate plain / match / plain
    (leading, gap and trailing plain segments may be empty) and join back to
    exactly ``line.text``.
    """
    if not matches:
        return None

    text = line.text
    segments: list[Segment] = []
    cursor = 0
    for span in matches:
        if span.start < cursor or span.end < span.start or span.end > len(text):
            raise ValueError(
                f"match spans must be ordered, non-overlapping and within the line: {span}"
            )
        segments.append(Segment(text[cursor : span.start]))
        segments.append(Segment(text[span.start : span.end], emphasized=emphasize))
        cursor = span.end
    segments.append(Segment(text[cursor:]))

    return AnnotatedLine(
        segments=tuple(segments),
        line_no=line.line_no if show_line_number else None,
    )


def render_line(
    annotated: AnnotatedLine,
    *,
    emphasis: Emphasis = no_emphasis,
    number_separator: str = ":",
) -> str:
    """Render one annotated line (no trailing newline)."""
    parts: list[str] = []
    if annotated.line_no is not None:
        parts.append(f"{annotated.line_no}{number_separator}")
    for seg in annotated.segments:
        parts.append(emphasis(seg.text) if seg.emphasized and seg.text else seg.text)
    return "".join(parts)
