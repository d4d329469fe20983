from __future__ import annotations

from pathlib import Path

import pytest

from mcp_minigrep_server.core.errors import PatternError, SourceConfigError
from mcp_minigrep_server.tools.grep import (
    HARD_LIMIT,
    _resolve_limit,
    grep_paths_impl,
    grep_text_impl,
)


@pytest.mark.asyncio
async def test_grep_text_returns_structured_matches(sample_text: str) -> None:
    out = await grep_text_impl(pattern="foo", text=sample_text, case_insensitive=True)

    assert out["count"] == 3
    assert out["truncated"] is False
    assert [m["line_no"] for m in out["matches"]] == [1, 3, 4]
    third = out["matches"][1]
    assert third["source"] == ""
    assert third["line"] == "bar baz FOO"
    assert third["spans"] == [(8, 11)]
    assert out["output"] is None


@pytest.mark.asyncio
async def test_grep_text_include_output(sample_text: str) -> None:
    out = await grep_text_impl(
        pattern="foo", text=sample_text, line_numbers=True, include_output=True
    )
    assert out["output"] == "1:foo bar\n4:foo baz\n"


@pytest.mark.asyncio
async def test_grep_text_limit_truncates(sample_text: str) -> None:
    out = await grep_text_impl(pattern="ba", text=sample_text, limit=2)
    assert out["count"] == 2
    assert out["truncated"] is True


@pytest.mark.asyncio
async def test_grep_text_invalid_pattern() -> None:
    with pytest.raises(PatternError):
        await grep_text_impl(pattern="[", text="x")


@pytest.mark.asyncio
async def test_grep_paths_recursive(three_files: Path) -> None:
    out = await grep_paths_impl(
        pattern="foo",
        paths=[str(three_files)],
        recursive=True,
        case_insensitive=True,
        include_output=True,
    )

    assert out["count"] == 3
    assert [(Path(m["source"]).name, m["line_no"]) for m in out["matches"]] == [
        ("a.txt", 2),
        ("a.txt", 3),
        ("b.txt", 3),
    ]
    assert out["matches"][2]["spans"] == [(0, 3), (4, 7), (8, 11)]
    a, b = three_files / "a.txt", three_files / "b.txt"
    assert out["output"] == f"{a}\n2:foo bar\n3:baz Foo\n{b}\n3:foo foo FOO\n\n"


@pytest.mark.asyncio
async def test_grep_paths_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        await grep_paths_impl(pattern="x", paths=[str(tmp_path / "missing.log")])


@pytest.mark.asyncio
async def test_grep_paths_skip_unreadable(three_files: Path) -> None:
    out = await grep_paths_impl(
        pattern="foo",
        paths=[str(three_files / "missing.log"), str(three_files / "b.txt")],
        skip_unreadable=True,
    )
    assert out["count"] == 1
    assert out["matches"][0]["line"] == "foo foo FOO"


@pytest.mark.asyncio
async def test_grep_paths_requires_paths() -> None:
    with pytest.raises(ValueError, match="paths"):
        await grep_paths_impl(pattern="x", paths=[])


@pytest.mark.asyncio
async def test_grep_paths_recursive_needs_one_directory(three_files: Path) -> None:
    with pytest.raises(SourceConfigError):
        await grep_paths_impl(
            pattern="x", paths=[str(three_files), str(three_files)], recursive=True
        )


def test_resolve_limit() -> None:
    assert _resolve_limit(None) == 200
    assert _resolve_limit(10) == 10
    assert _resolve_limit(10**6) == HARD_LIMIT
    with pytest.raises(ValueError):
        _resolve_limit(0)
