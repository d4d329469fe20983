"""Write annotated blocks to a sink with headers and separators."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable
from contextlib import aclosing
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from .annotate import Emphasis, no_emphasis, render_line
from .models import AnnotatedBlock, SourceKind

logger = logging.getLogger(__name__)


class HeaderMode(str, Enum):
    NEVER = "never"
    EAGER = "eager"  # before the block, even if nothing in it matches
    LAZY = "lazy"  # right before the block's first matching line


class SeparatorMode(str, Enum):
    NONE = "none"
    PER_SOURCE = "per_source"  # one blank line after every block
    TRAILING = "trailing"  # one blank line after the last block


@dataclass(frozen=True, slots=True)
class BlockLayout:
    headers: HeaderMode
    separators: SeparatorMode


_LAYOUTS: dict[SourceKind, BlockLayout] = {
    SourceKind.STREAM: BlockLayout(HeaderMode.NEVER, SeparatorMode.NONE),
    SourceKind.FILE_LIST: BlockLayout(HeaderMode.EAGER, SeparatorMode.PER_SOURCE),
    SourceKind.DIRECTORY: BlockLayout(HeaderMode.LAZY, SeparatorMode.TRAILING),
}


def layout_for(kind: SourceKind) -> BlockLayout:
    """Default header/separator layout for a source kind.

    File lists print every header up front and separate every file;
    directory walks print headers only for files with matches and a single
    blank line at the end; streams print neither.
    """
    return _LAYOUTS[kind]


@dataclass(frozen=True, slots=True)
class OutputStats:
    sources: int
    matched_lines: int


async def assemble(
    blocks: AsyncIterable[AnnotatedBlock],
    *,
    sink: TextIO,
    layout: BlockLayout,
    show_labels: bool = False,
    emphasis: Emphasis = no_emphasis,
) -> OutputStats:
    """Stream blocks to ``sink`` in order, one line at a time.

    Write errors propagate to the caller; each block's line iterator is
    closed before the error leaves, so no source stays open.
    """
    sources = 0
    matched = 0
    headers = show_labels and layout.headers is not HeaderMode.NEVER

    async for block in blocks:
        sources += 1
        header_pending = headers and bool(block.label)
        if header_pending and layout.headers is HeaderMode.EAGER:
            sink.write(f"{block.label}\n")
            header_pending = False

        async with aclosing(block.lines) as lines:
            async for annotated in lines:
                if header_pending:
                    sink.write(f"{block.label}\n")
                    header_pending = False
                sink.write(render_line(annotated, emphasis=emphasis) + "\n")
                matched += 1

        if layout.separators is SeparatorMode.PER_SOURCE:
            sink.write("\n")

    if layout.separators is SeparatorMode.TRAILING:
        sink.write("\n")

    sink.flush()
    logger.debug("Assembled %s matched lines from %s sources", matched, sources)
    return OutputStats(sources=sources, matched_lines=matched)
