from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

SAMPLE_TEXT = "foo bar\nbar baz\nbar baz FOO\nfoo baz"


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT


@pytest.fixture
def write_bytes() -> Callable[[Path, list[bytes]], None]:
    def _write(path: Path, lines: list[bytes]) -> None:
        path.write_bytes(b"".join(line + b"\n" for line in lines))

    return _write


@pytest.fixture
def three_files(tmp_path: Path) -> Path:
    """Directory holding three small files (a, b, c), walked in that order."""
    root = tmp_path / "tree"
    root.mkdir()
    (root / "a.txt").write_text("bar baz\nfoo bar\nbaz Foo", encoding="utf-8")
    (root / "b.txt").write_text("bar baz\nbaz bar\nfoo foo FOO", encoding="utf-8")
    (root / "c.txt").write_text("bar baz\n", encoding="utf-8")
    return root
