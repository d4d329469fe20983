"""Source interface and shared open/read/decode helpers."""

from __future__ import annotations

import gzip
import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import AsyncExitStack, asynccontextmanager
from pathlib import Path
from typing import Any, Protocol

import aiofiles
from aiofiles.threadpool import wrap

from ..models import ErrorPolicy, Line, SourceBlock, SourceKind

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"
GZIP_MAGIC = b"\x1f\x8b"


class LineSource(Protocol):
    """Produces the blocks of one run, in order, one forward pass only."""

    kind: SourceKind

    def blocks(self) -> AsyncIterator[SourceBlock]:
        """Yield one SourceBlock per source; consume each before the next."""
        ...


def is_gzip(path: Path) -> bool:
    """True for a .gz file that starts with the gzip magic bytes."""
    if path.suffix.lower() != ".gz":
        return False
    with path.open("rb") as f:
        return f.read(2) == GZIP_MAGIC


@asynccontextmanager
async def open_binary(path: Path):
    """Open a file for async binary reading (gzip when it really is gzip)."""
    if is_gzip(path):
        f = gzip.open(path, mode="rb")
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, mode="rb") as f:
            yield f


@asynccontextmanager
async def open_source_file(path: Path):
    """Like open_binary, with readable errors for missing paths and directories."""
    if path.is_dir():
        raise IsADirectoryError(f"Is a directory: {path}")
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    async with open_binary(path) as f:
        yield f


def strip_terminator(raw: bytes | str) -> bytes | str:
    """Remove one line terminator (\\n or \\r\\n); other trailing \\r are content."""
    nl, cr = ("\n", "\r") if isinstance(raw, str) else (b"\n", b"\r")
    if raw.endswith(nl):
        raw = raw[:-1]
        if raw.endswith(cr):
            raw = raw[:-1]
    return raw


def decode_line(raw: bytes | str, *, encoding: str = DEFAULT_ENCODING) -> str | None:
    """Strip the line terminator and decode. Returns None if undecodable."""
    raw = strip_terminator(raw)
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode(encoding)
    except UnicodeDecodeError:
        return None


async def read_lines(
    handle: Any,
    *,
    label: str,
    encoding: str = DEFAULT_ENCODING,
    on_error: ErrorPolicy = ErrorPolicy.ABORT,
    skip_log_level: int = logging.DEBUG,
) -> AsyncIterator[Line]:
    """Yield decoded lines from an async file handle.

    Line numbers count physical lines, including dropped undecodable ones.
    """
    line_no = 0
    while True:
        try:
            raw = await handle.readline()
        except (OSError, EOFError) as e:
            if on_error is ErrorPolicy.ABORT:
                # EOFError here means a truncated compressed stream.
                raise OSError(f"Read failed for {label}: {e}") from e
            logger.log(skip_log_level, "Skipping rest of %s after line %s: %s", label, line_no, e)
            return
        if not raw:
            return
        line_no += 1
        text = decode_line(raw, encoding=encoding)
        if text is None:
            logger.debug("Dropping undecodable line %s:%s", label or "<stdin>", line_no)
            continue
        yield Line(label=label, line_no=line_no, text=text)


async def iter_file_blocks(
    paths: Iterable[Path],
    *,
    on_unreadable: ErrorPolicy,
    encoding: str = DEFAULT_ENCODING,
    skip_log_level: int = logging.WARNING,
) -> AsyncIterator[SourceBlock]:
    """Open each path in turn and yield its block.

    The file is opened before its block is yielded, so an open failure is
    reported ahead of any output for that file. The handle is closed when the
    next block is requested (or the iteration is closed).
    """
    for path in paths:
        label = str(path)
        async with AsyncExitStack() as stack:
            try:
                handle = await stack.enter_async_context(open_source_file(path))
            except OSError as e:
                if on_unreadable is ErrorPolicy.ABORT:
                    raise
                logger.log(skip_log_level, "Skipping unreadable file %s: %s", label, e)
                continue
            yield SourceBlock(
                label=label,
                lines=read_lines(
                    handle,
                    label=label,
                    encoding=encoding,
                    on_error=on_unreadable,
                    skip_log_level=skip_log_level,
                ),
            )
