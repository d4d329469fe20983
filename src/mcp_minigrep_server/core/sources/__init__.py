"""Line sources: stdin stream, explicit file list, recursive directory.

All three share the LineSource interface, so the match/annotate/assemble
stages never branch on where lines come from.
"""

from __future__ import annotations

import sys
from collections.abc import AsyncIterator, Sequence
from typing import IO, Any

from ..errors import SourceConfigError
from ..models import ErrorPolicy, Line, Source, SourceKind
from .base import (
    DEFAULT_ENCODING,
    LineSource,
    decode_line,
    iter_file_blocks,
    open_binary,
    read_lines,
)
from .directory import DirectorySource, walk_files
from .files import FileListSource
from .stream import StreamSource

_DEFAULT_POLICY: dict[SourceKind, ErrorPolicy] = {
    SourceKind.STREAM: ErrorPolicy.ABORT,
    SourceKind.FILE_LIST: ErrorPolicy.ABORT,
    SourceKind.DIRECTORY: ErrorPolicy.SKIP,
}


def resolve_source(paths: Sequence[str], *, recursive: bool = False) -> Source:
    """Pick the source kind for the given paths.

    Recursive mode takes exactly one directory; anything else is a
    configuration error raised before any input is touched.
    """
    if recursive:
        if len(paths) != 1:
            raise SourceConfigError(
                f"Recursive mode takes exactly one directory, got {len(paths)} paths."
            )
        return Source(kind=SourceKind.DIRECTORY, paths=(paths[0],))
    if not paths:
        return Source(kind=SourceKind.STREAM)
    return Source(kind=SourceKind.FILE_LIST, paths=tuple(paths))


def default_policy(kind: SourceKind) -> ErrorPolicy:
    return _DEFAULT_POLICY[kind]


def open_source(
    source: Source,
    *,
    stdin: IO[Any] | None = None,
    on_unreadable: ErrorPolicy | None = None,
    encoding: str = DEFAULT_ENCODING,
) -> LineSource:
    """Build the LineSource implementation for a Source."""
    policy = on_unreadable or default_policy(source.kind)
    if source.kind is SourceKind.STREAM:
        return StreamSource(stdin if stdin is not None else sys.stdin, encoding=encoding)
    if source.kind is SourceKind.FILE_LIST:
        return FileListSource(source.paths, on_unreadable=policy, encoding=encoding)
    if len(source.paths) != 1:
        raise SourceConfigError("Directory source needs exactly one path.")
    return DirectorySource(source.paths[0], on_unreadable=policy, encoding=encoding)


async def iter_lines(line_source: LineSource) -> AsyncIterator[Line]:
    """Flatten a LineSource into (label, line_no, text) triples."""
    async for block in line_source.blocks():
        async for line in block.lines:
            yield line


__all__ = [
    "DEFAULT_ENCODING",
    "DirectorySource",
    "FileListSource",
    "LineSource",
    "StreamSource",
    "decode_line",
    "default_policy",
    "iter_file_blocks",
    "iter_lines",
    "open_binary",
    "open_source",
    "read_lines",
    "resolve_source",
    "walk_files",
]
