from __future__ import annotations

import pytest
from rich.color import ColorSystem
from rich.style import Style

from mcp_minigrep_server.core.annotate import StyleEmphasis, annotate, render_line
from mcp_minigrep_server.core.matcher import compile_pattern
from mcp_minigrep_server.core.models import Line, MatchSpan, Segment


def _line(text: str, line_no: int = 1) -> Line:
    return Line(label="", line_no=line_no, text=text)


def test_no_matches_returns_none() -> None:
    assert annotate(_line("bar baz"), []) is None


def test_segments_cover_the_line() -> None:
    line = _line("xfooyfooz")
    out = annotate(line, compile_pattern("foo").find_all(line.text), emphasize=True)
    assert out is not None
    assert out.segments == (
        Segment("x"),
        Segment("foo", emphasized=True),
        Segment("y"),
        Segment("foo", emphasized=True),
        Segment("z"),
    )
    assert out.text == line.text


def test_leading_and_trailing_segments_may_be_empty() -> None:
    out = annotate(_line("foo"), [MatchSpan(0, 3)])
    assert out is not None
    assert out.segments == (Segment(""), Segment("foo"), Segment(""))
    assert out.text == "foo"


def test_adjacent_matches_keep_an_empty_gap() -> None:
    out = annotate(_line("foofoo"), [MatchSpan(0, 3), MatchSpan(3, 6)], emphasize=True)
    assert out is not None
    assert [s.text for s in out.segments] == ["", "foo", "", "foo", ""]
    assert out.spans() == [MatchSpan(0, 3), MatchSpan(3, 6)]


def test_emphasis_flag_off_leaves_segments_plain() -> None:
    out = annotate(_line("a foo"), [MatchSpan(2, 5)], emphasize=False)
    assert out is not None
    assert not any(s.emphasized for s in out.segments)


def test_overlapping_spans_rejected() -> None:
    with pytest.raises(ValueError):
        annotate(_line("foobar"), [MatchSpan(0, 4), MatchSpan(3, 6)])


def test_line_number_uses_physical_position() -> None:
    out = annotate(_line("foo baz", line_no=4), [MatchSpan(0, 3)], show_line_number=True)
    assert out is not None
    assert out.line_no == 4
    assert render_line(out) == "4:foo baz"


def test_line_number_hidden_by_default() -> None:
    out = annotate(_line("foo baz", line_no=4), [MatchSpan(0, 3)])
    assert out is not None
    assert out.line_no is None
    assert render_line(out) == "foo baz"


def test_render_with_style_emphasis() -> None:
    out = annotate(
        _line("a foo b foo", line_no=2),
        [MatchSpan(2, 5), MatchSpan(8, 11)],
        show_line_number=True,
        emphasize=True,
    )
    assert out is not None
    red = Style.parse("red").render("foo", color_system=ColorSystem.STANDARD)
    assert red == "\x1b[31mfoo\x1b[0m"
    assert render_line(out, emphasis=StyleEmphasis("red")) == f"2:a {red} b {red}"


def test_emphasis_does_not_rescan_decorated_text() -> None:
    out = annotate(_line("foo"), [MatchSpan(0, 3)], emphasize=True)
    assert out is not None
    assert render_line(out, emphasis=lambda t: f"<{t}>") == "<foo>"


def test_invalid_style_rejected() -> None:
    with pytest.raises(ValueError, match="Invalid emphasis style"):
        StyleEmphasis("not-a-colour-at-all")


def test_style_parsed_once_at_construction(monkeypatch: pytest.MonkeyPatch) -> None:
    emphasis = StyleEmphasis("red")

    def _fail(*args, **kwargs):
        raise AssertionError("style must not be parsed again")

    monkeypatch.setattr(Style, "parse", _fail)
    assert emphasis("foo") == "\x1b[31mfoo\x1b[0m"
    assert emphasis("bar") == "\x1b[31mbar\x1b[0m"
