"""MCP tool implementations.

Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

import io
from collections.abc import Sequence
from contextlib import aclosing
from typing import Any

from mcp_minigrep_server.core.config import GrepOptions
from mcp_minigrep_server.core.grep_service import iter_annotated_blocks, prepare, run_grep
from mcp_minigrep_server.core.models import ErrorPolicy
from mcp_minigrep_server.core.results import GrepMatch, GrepResult, to_match

DEFAULT_LIMIT = 200
HARD_LIMIT = 5000


def _resolve_limit(limit: int | None) -> int:
    if limit is None:
        return DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    return min(limit, HARD_LIMIT)


async def _collect(
    options: GrepOptions,
    *,
    limit: int,
    stdin: io.StringIO | None = None,
) -> tuple[list[GrepMatch], bool]:
    """Collect up to ``limit`` structured matches, in output order."""
    matcher, _, line_source = prepare(options, stdin=stdin)
    matches: list[GrepMatch] = []
    blocks = iter_annotated_blocks(line_source, matcher, line_numbers=True, emphasize=True)
    async with aclosing(blocks) as it:
        async for block in it:
            async with aclosing(block.lines) as lines:
                async for annotated in lines:
                    if len(matches) >= limit:
                        return matches, True
                    matches.append(to_match(block.label, annotated))
    return matches, False


async def _render(options: GrepOptions, *, stdin: io.StringIO | None = None) -> str:
    sink = io.StringIO()
    await run_grep(options, stdin=stdin, sink=sink)
    return sink.getvalue()


async def grep_paths_impl(
    *,
    pattern: str,
    paths: Sequence[str],
    recursive: bool = False,
    case_insensitive: bool = False,
    limit: int | None = None,
    skip_unreadable: bool = False,
    include_output: bool = False,
    line_numbers: bool = True,
    show_labels: bool = True,
) -> dict[str, Any]:
    """Implementation for the `grep_paths` MCP tool.

    Notes
    -----
    - paths must be non-empty (there is no stdin for a tool call)
    - recursive requires exactly one directory
    - skip_unreadable applies to named files; directory walks always skip
    - limit caps structured matches only; ``output`` is never truncated
    """
    if not paths:
        raise ValueError("paths must contain at least one file or directory.")
    limit = _resolve_limit(limit)

    options = GrepOptions(
        pattern=pattern,
        case_insensitive=case_insensitive,
        line_numbers=line_numbers,
        show_labels=show_labels,
        recursive=recursive,
        paths=tuple(paths),
        on_unreadable=ErrorPolicy.SKIP if skip_unreadable else None,
    )

    matches, truncated = await _collect(options, limit=limit)
    result = GrepResult(count=len(matches), truncated=truncated, matches=matches)
    if include_output:
        result.output = await _render(options)
    return result.model_dump()


async def grep_text_impl(
    *,
    pattern: str,
    text: str,
    case_insensitive: bool = False,
    limit: int | None = None,
    include_output: bool = False,
    line_numbers: bool = False,
) -> dict[str, Any]:
    """Implementation for the `grep_text` MCP tool (inline text as the stream)."""
    limit = _resolve_limit(limit)
    options = GrepOptions(
        pattern=pattern,
        case_insensitive=case_insensitive,
        line_numbers=line_numbers,
    )

    matches, truncated = await _collect(options, limit=limit, stdin=io.StringIO(text))
    result = GrepResult(count=len(matches), truncated=truncated, matches=matches)
    if include_output:
        result.output = await _render(options, stdin=io.StringIO(text))
    return result.model_dump()
