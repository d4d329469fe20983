from __future__ import annotations

import pytest

from mcp_minigrep_server.core.errors import PatternError
from mcp_minigrep_server.core.matcher import compile_pattern, compile_query
from mcp_minigrep_server.core.models import MatchSpan, Query


def test_find_all_left_to_right_non_overlapping() -> None:
    m = compile_pattern("foo")
    spans = m.find_all("foo foo FOO foofoo")
    assert spans == [MatchSpan(0, 3), MatchSpan(4, 7), MatchSpan(12, 15), MatchSpan(15, 18)]
    assert all(a.end <= b.start for a, b in zip(spans, spans[1:]))


def test_case_insensitive_is_compiled_in() -> None:
    m = compile_query(Query(pattern="foo", case_insensitive=True))
    assert m.find_all("Foo FOO") == [MatchSpan(0, 3), MatchSpan(4, 7)]
    assert compile_pattern("foo").find_all("Foo FOO") == []


def test_anchored_pattern() -> None:
    m = compile_pattern("foo$", case_insensitive=True)
    assert m.find_all("bar baz FOO") == [MatchSpan(8, 11)]
    assert m.find_all("foo baz") == []


def test_zero_width_matches_are_discarded() -> None:
    assert compile_pattern("^").find_all("anything") == []
    assert compile_pattern(r"\b").find_all("two words") == []
    assert compile_pattern("a*").find_all("baa") == [MatchSpan(1, 3)]


def test_is_match() -> None:
    assert compile_pattern("a*").is_match("baa")
    assert not compile_pattern("a*").is_match("bbb")
    assert compile_pattern("b").is_match("abc")
    assert not compile_pattern("z").is_match("abc")


def test_invalid_pattern_raises() -> None:
    with pytest.raises(PatternError, match="Invalid pattern") as exc_info:
        compile_pattern("foo(")
    assert isinstance(exc_info.value, ValueError)
    assert exc_info.value.pattern == "foo("
