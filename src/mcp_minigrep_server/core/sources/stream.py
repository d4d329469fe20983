"""Single unnamed stream (normally standard input)."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import IO, Any, ClassVar

from aiofiles.threadpool import wrap

from ..models import SourceBlock, SourceKind
from .base import DEFAULT_ENCODING, read_lines


@dataclass(frozen=True)
class StreamSource:
    """Reads one line at a time from an already-open stream.

    Text streams (``io.StringIO``) are read as-is; streams exposing a binary
    ``buffer`` (``sys.stdin``) are read as bytes so undecodable lines can be
    dropped individually. The stream is never closed.
    """

    stream: IO[Any]
    encoding: str = DEFAULT_ENCODING

    kind: ClassVar[SourceKind] = SourceKind.STREAM

    async def blocks(self) -> AsyncIterator[SourceBlock]:
        handle = wrap(getattr(self.stream, "buffer", self.stream))
        yield SourceBlock(label="", lines=read_lines(handle, label="", encoding=self.encoding))
