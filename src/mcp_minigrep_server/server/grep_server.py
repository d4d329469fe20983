"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: callable actions (grep over files/directories or inline text)
- Resources: addressable data blobs (help, sample input, result schema, files)
- Prompts: reusable conversation templates that clients can invoke

Run locally (stdio):
    python -m mcp_minigrep_server.server.grep_server
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_minigrep_server.core.config import LOG_LEVEL_ENV
from mcp_minigrep_server.prompts.registry import register_prompts
from mcp_minigrep_server.resources.registry import register_resources
from mcp_minigrep_server.tools.grep import grep_paths_impl, grep_text_impl

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure logging on stderr; stdout carries the MCP stdio transport."""
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("minigrep", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
async def grep_paths(
    pattern: str,
    paths: Sequence[str],
    recursive: bool = False,
    case_insensitive: bool = False,
    limit: int | None = None,
    skip_unreadable: bool = False,
    include_output: bool = False,
) -> dict[str, Any]:
    """Find the lines matching a regular expression in files or a directory tree.

    Parameters
    ----------
    pattern:
        Python regular expression. Zero-width matches are ignored.
    paths:
        Files to search in order, or exactly one directory when recursive is true.
        Gzip-compressed .gz files are decompressed; a .gz file that is not gzip
        data is searched as plain text.
    recursive:
        Walk the single directory in `paths` (sorted, depth-first, regular files only).
        Unreadable files found while walking are skipped.
    case_insensitive:
        Match without regard to case.
    limit:
        Maximum number of matches returned (default 200, hard-capped at 5000).
    skip_unreadable:
        Skip named files that cannot be opened instead of failing.
    include_output:
        Also return the grep-style rendered text (labels, line numbers, separators).

    Returns
    -------
    dict:
        {"count": int, "truncated": bool, "matches": list[dict], "output": str | None}
    """
    return await grep_paths_impl(
        pattern=pattern,
        paths=list(paths),
        recursive=recursive,
        case_insensitive=case_insensitive,
        limit=limit,
        skip_unreadable=skip_unreadable,
        include_output=include_output,
    )


@mcp.tool()
async def grep_text(
    pattern: str,
    text: str,
    case_insensitive: bool = False,
    limit: int | None = None,
    include_output: bool = False,
) -> dict[str, Any]:
    """Find the lines of inline text matching a regular expression.

    The text is treated like standard input: no labels, numbering starts at 1.
    """
    return await grep_text_impl(
        pattern=pattern,
        text=text,
        case_insensitive=case_insensitive,
        limit=limit,
        include_output=include_output,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
