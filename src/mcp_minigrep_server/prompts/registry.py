"""MCP prompt registry.

Prompts are predefined conversation/workflow templates that the client can invoke explicitly.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP


def _format_paths(paths: Sequence[str] | str) -> str:
    """Return paths as a JSON array literal for prompt display."""
    if isinstance(paths, str):
        items = [s.strip() for s in paths.split(",") if s.strip()]
    else:
        items = [str(s).strip() for s in paths if str(s).strip()]
    if not items:
        return "[]"
    quoted = ", ".join(f'"{item}"' for item in items)
    return f"[{quoted}]"


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def search_files(
        pattern: str,
        paths: Sequence[str] | str,
        recursive: bool = False,
        case_insensitive: bool = False,
    ) -> list[dict[str, Any]]:
        """Build a prompt that runs grep_paths and summarises the hits."""
        call_lines = [
            f"- pattern: {pattern!r}",
            f"- paths: {_format_paths(paths)}",
            f"- recursive: {'true' if recursive else 'false'}",
            f"- case_insensitive: {'true' if case_insensitive else 'false'}",
            "- include_output: true",
        ]
        call_block = "\n".join(call_lines)
        return [
            {
                "role": "system",
                "content": (
                    "You are a precise code and text search assistant. Report only what the "
                    "tool output shows; never invent file names, line numbers or lines."
                ),
            },
            {
                "role": "user",
                "content": (
                    "Search using grep_paths. Follow this workflow:\n"
                    "- Call grep_paths once with the parameters below.\n"
                    "- paths must be a list of strings (JSON array). With recursive=true "
                    "pass exactly one directory.\n"
                    "- If the result is truncated, say so and suggest a narrower pattern.\n"
                    "- If count is 0, state that clearly and suggest a broader pattern or "
                    "case_insensitive=true.\n\n"
                    "Call grep_paths with:\n"
                    f"{call_block}\n\n"
                    "Return this structure:\n"
                    "1) Summary (files with matches, total matching lines)\n"
                    "2) Notable hits (up to 10, as path:line_no: line)\n"
                    "3) Observations (patterns in where the matches occur)\n"
                ),
            },
        ]

    @mcp.prompt()
    def explain_pattern(pattern: str, sample: str = "") -> list[dict[str, Any]]:
        """Build a prompt that explains a regular expression, optionally on sample text."""
        content = (
            f"Explain the Python regular expression {pattern!r} piece by piece, then say "
            "which lines of input it would select. Note that matches of zero width are "
            "ignored, so a pattern that can only match the empty string selects nothing."
        )
        if sample:
            content += (
                "\n\nCheck your explanation by calling grep_text with this pattern on the "
                f"sample below and include_output=true:\n\n{sample}"
            )
        return [
            {"role": "system", "content": "You are a concise regular-expression tutor."},
            {"role": "user", "content": content},
        ]
