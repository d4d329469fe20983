"""Search pipeline: compile, iterate sources, annotate, assemble.

This module is the main integration point; callers hand in options plus the
stdin/stdout handles to use, and everything else is streamed.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from contextlib import aclosing
from typing import IO, Any, TextIO

from .annotate import Emphasis, StyleEmphasis, annotate, no_emphasis
from .config import GrepOptions, resolve_emphasis_style, resolve_max_workers
from .matcher import Matcher, compile_pattern
from .models import AnnotatedBlock, AnnotatedLine, Source, SourceBlock, SourceKind
from .output import OutputStats, assemble, layout_for
from .sources import (
    DirectorySource,
    LineSource,
    iter_file_blocks,
    open_source,
    resolve_source,
)

logger = logging.getLogger(__name__)


async def _annotate_lines(
    block: SourceBlock,
    matcher: Matcher,
    *,
    line_numbers: bool,
    emphasize: bool,
) -> AsyncIterator[AnnotatedLine]:
    async for line in block.lines:
        if not matcher.is_match(line.text):
            continue
        annotated = annotate(
            line,
            matcher.find_all(line.text),
            show_line_number=line_numbers,
            emphasize=emphasize,
        )
        if annotated is not None:
            yield annotated


async def iter_annotated_blocks(
    line_source: LineSource,
    matcher: Matcher,
    *,
    line_numbers: bool = False,
    emphasize: bool = False,
) -> AsyncIterator[AnnotatedBlock]:
    """Map every source block to its (lazy) matching lines."""
    async with aclosing(line_source.blocks()) as blocks:
        async for block in blocks:
            yield AnnotatedBlock(
                label=block.label,
                lines=_annotate_lines(
                    block, matcher, line_numbers=line_numbers, emphasize=emphasize
                ),
            )


async def _from_list(items: list[AnnotatedLine]) -> AsyncIterator[AnnotatedLine]:
    for item in items:
        yield item


async def _run_ordered(
    work: Iterable[object],
    *,
    worker_count: int,
    processor: Callable[[object], Awaitable[object]],
) -> AsyncIterator[object]:
    """Run processor over work items concurrently; yield results in input order."""
    if worker_count < 1:
        raise ValueError("worker_count must be >= 1")

    queue_size = max(1, worker_count * 4)
    work_queue: asyncio.Queue[tuple[object, object]] = asyncio.Queue(maxsize=queue_size)
    result_queue: asyncio.Queue[tuple[object, object]] = asyncio.Queue(maxsize=queue_size)
    work_sentinel = object()
    done_sentinel = object()
    errors: list[Exception] = []

    async def reader() -> None:
        try:
            for seq, item in enumerate(work):
                await work_queue.put((seq, item))
        except Exception as exc:
            errors.append(exc)
        finally:
            for _ in range(worker_count):
                await work_queue.put((work_sentinel, None))

    async def worker() -> None:
        try:
            while True:
                seq, item = await work_queue.get()
                if seq is work_sentinel:
                    break
                await result_queue.put((seq, await processor(item)))
        except Exception as exc:
            errors.append(exc)
        finally:
            await result_queue.put((done_sentinel, None))

    reader_task = asyncio.create_task(reader())
    worker_tasks = [asyncio.create_task(worker()) for _ in range(worker_count)]

    pending: dict[int, object] = {}
    next_seq = 0
    done_workers = 0

    try:
        while True:
            seq, result = await result_queue.get()
            if seq is done_sentinel:
                done_workers += 1
                if done_workers == worker_count:
                    break
                continue

            pending[seq] = result
            while next_seq in pending:
                yield pending.pop(next_seq)
                next_seq += 1

        if errors:
            raise errors[0]
    finally:
        reader_task.cancel()
        for task in worker_tasks:
            task.cancel()
        await asyncio.gather(reader_task, *worker_tasks, return_exceptions=True)


async def iter_annotated_blocks_parallel(
    source: DirectorySource,
    matcher: Matcher,
    *,
    max_workers: int,
    line_numbers: bool = False,
    emphasize: bool = False,
) -> AsyncIterator[AnnotatedBlock]:
    """Scan a directory's files concurrently, releasing blocks in walk order.

    Each file's matching lines are buffered until every earlier file has been
    released, so output order equals the sequential order.
    """

    async def scan_file(path: object) -> AnnotatedBlock | None:
        file_blocks = iter_file_blocks(
            [path],  # type: ignore[list-item]
            on_unreadable=source.on_unreadable,
            encoding=source.encoding,
            skip_log_level=logging.DEBUG,
        )
        async with aclosing(file_blocks) as blocks:
            async for block in blocks:
                lines = [
                    a
                    async for a in _annotate_lines(
                        block, matcher, line_numbers=line_numbers, emphasize=emphasize
                    )
                ]
                return AnnotatedBlock(label=block.label, lines=_from_list(lines))
        return None  # skipped

    async for result in _run_ordered(source.files(), worker_count=max_workers, processor=scan_file):
        if result is not None:
            yield result  # type: ignore[misc]


def _emphasis_for(options: GrepOptions) -> Emphasis:
    if not options.emphasize:
        return no_emphasis
    return StyleEmphasis(resolve_emphasis_style(options.emphasis_style))


def prepare(
    options: GrepOptions,
    *,
    stdin: IO[Any] | None = None,
) -> tuple[Matcher, Source, LineSource]:
    """Validate everything that can fail before input is touched.

    Order: pattern, then source selection, then the source itself (e.g. the
    directory root must exist).
    """
    matcher = compile_pattern(options.pattern, case_insensitive=options.case_insensitive)
    source = resolve_source(options.paths, recursive=options.recursive)
    line_source = open_source(
        source,
        stdin=stdin,
        on_unreadable=options.on_unreadable,
        encoding=options.encoding,
    )
    return matcher, source, line_source


async def run_grep(
    options: GrepOptions,
    *,
    stdin: IO[Any] | None = None,
    sink: TextIO | None = None,
) -> OutputStats:
    """Run one search and write the rendered output to ``sink``."""
    sink = sink if sink is not None else sys.stdout
    matcher, source, line_source = prepare(options, stdin=stdin)
    emphasis = _emphasis_for(options)
    workers = resolve_max_workers(options.max_workers)
    layout = options.layout or layout_for(source.kind)

    logger.debug(
        "grep pattern=%r kind=%s paths=%s workers=%s",
        options.pattern,
        source.kind.value,
        list(source.paths),
        workers,
    )

    if source.kind is SourceKind.DIRECTORY and workers > 1:
        blocks = iter_annotated_blocks_parallel(
            line_source,  # type: ignore[arg-type]
            matcher,
            max_workers=workers,
            line_numbers=options.line_numbers,
            emphasize=options.emphasize,
        )
    else:
        blocks = iter_annotated_blocks(
            line_source,
            matcher,
            line_numbers=options.line_numbers,
            emphasize=options.emphasize,
        )

    # Closing the block iterator releases the open file even when a write or
    # read error aborts the run.
    async with aclosing(blocks) as it:
        return await assemble(
            it,
            sink=sink,
            layout=layout,
            show_labels=options.show_labels,
            emphasis=emphasis,
        )


def grep(
    options: GrepOptions,
    *,
    stdin: IO[Any] | None = None,
    sink: TextIO | None = None,
) -> OutputStats:
    """Synchronous wrapper around run_grep."""
    return asyncio.run(run_grep(options, stdin=stdin, sink=sink))


__all__ = [
    "GrepOptions",
    "OutputStats",
    "grep",
    "iter_annotated_blocks",
    "iter_annotated_blocks_parallel",
    "prepare",
    "run_grep",
]
