from __future__ import annotations

import io
from pathlib import Path

import pytest

from mcp_minigrep_server.cli import EXIT_ERROR, EXIT_OK, main


def _run(argv: list[str], stdin: str = "") -> tuple[int, str]:
    out = io.StringIO()
    code = main(argv, stdin=io.StringIO(stdin), stdout=out)
    return code, out.getvalue()


def test_stdin_search(sample_text: str) -> None:
    assert _run(["-q", "foo"], sample_text) == (EXIT_OK, "foo bar\nfoo baz\n")


def test_stdin_insensitive_anchored(sample_text: str) -> None:
    assert _run(["-i", "-q", "foo$"], sample_text) == (EXIT_OK, "bar baz FOO\n")


def test_line_numbers(sample_text: str) -> None:
    assert _run(["-n", "--query", "foo"], sample_text) == (EXIT_OK, "1:foo bar\n4:foo baz\n")


def test_color_flag_emphasizes(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MINIGREP_COLOR_STYLE", raising=False)
    code, out = _run(["--color", "-q", "foo"], "a foo\n")
    assert code == EXIT_OK
    assert out == "a \x1b[31mfoo\x1b[0m\n"


def test_recursive_directory(three_files: Path) -> None:
    code, out = _run(["-r", "-i", "-q", "foo", str(three_files)])
    assert code == EXIT_OK
    assert out == "foo bar\nbaz Foo\nfoo foo FOO\n\n"


def test_file_list_with_headers(three_files: Path) -> None:
    c = str(three_files / "c.txt")
    code, out = _run(["-H", "-q", "foo", c])
    assert code == EXIT_OK
    assert out == f"{c}\n\n"


def test_invalid_pattern_exits_with_error(capsys: pytest.CaptureFixture[str]) -> None:
    code, out = _run(["-q", "foo("], "foo(\n")
    assert code == EXIT_ERROR
    assert out == ""
    assert "Invalid pattern" in capsys.readouterr().err


def test_missing_file_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, _ = _run(["-q", "x", str(tmp_path / "missing.txt")])
    assert code == EXIT_ERROR
    assert "File not found" in capsys.readouterr().err


def test_recursive_with_two_paths_exits_with_error(
    three_files: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code, out = _run(["-r", "-q", "x", str(three_files), str(three_files)])
    assert code == EXIT_ERROR
    assert out == ""
    assert capsys.readouterr().err.startswith("Error: Recursive mode")


def test_skip_unreadable(three_files: Path) -> None:
    argv = ["--skip-unreadable", "-q", "foo", str(three_files / "nope"), str(three_files / "a.txt")]
    code, out = _run(argv)
    assert code == EXIT_OK
    assert out == "foo bar\n\n"


def test_query_is_required(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main([], stdin=io.StringIO(""), stdout=io.StringIO())
    assert exc_info.value.code == 2
