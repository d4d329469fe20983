from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence
from typing import IO, Any, TextIO

from mcp_minigrep_server.core.config import LOG_LEVEL_ENV, GrepOptions
from mcp_minigrep_server.core.errors import GrepError
from mcp_minigrep_server.core.grep_service import grep
from mcp_minigrep_server.core.models import ErrorPolicy

EXIT_OK = 0
EXIT_ERROR = 2


def _positive_int(s: str) -> int:
    try:
        value = int(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError("must be an integer") from e
    if value < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return value


def _configure_logging(verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        level_name = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
        level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="minigrep",
        description="Print the lines matching a regular expression (stdin, files, or a directory).",
    )
    p.add_argument("-q", "--query", required=True, help="Regular expression to search for")
    p.add_argument("-i", "--insensitive", action="store_true", help="Case-insensitive matching")
    p.add_argument("-n", "--line-number", action="store_true", help="Prefix lines with their line number")
    p.add_argument("-H", "--with-filename", action="store_true", help="Print a file name header per file")
    p.add_argument("--color", action="store_true", help="Emphasize matches (style: MINIGREP_COLOR_STYLE)")
    p.add_argument("-r", "--recursive", action="store_true", help="Search every file under one directory")
    p.add_argument(
        "--skip-unreadable",
        action="store_true",
        help="Skip named files that cannot be opened instead of stopping",
    )
    p.add_argument("--workers", type=_positive_int, default=None, help="Parallel file scans with -r")
    p.add_argument("-v", "--verbose", action="store_true", help="Log skipped files and lines to stderr")
    p.add_argument("filenames", nargs="*", help="Files to search (default: stdin)")
    return p


def options_from_args(args: argparse.Namespace) -> GrepOptions:
    return GrepOptions(
        pattern=args.query,
        case_insensitive=args.insensitive,
        line_numbers=args.line_number,
        show_labels=args.with_filename,
        emphasize=args.color,
        recursive=args.recursive,
        paths=tuple(args.filenames),
        on_unreadable=ErrorPolicy.SKIP if args.skip_unreadable else None,
        max_workers=args.workers,
    )


def main(
    argv: Sequence[str] | None = None,
    *,
    stdin: IO[Any] | None = None,
    stdout: TextIO | None = None,
) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    try:
        grep(options_from_args(args), stdin=stdin, sink=stdout)
    except BrokenPipeError:
        # Reader went away (e.g. `| head`); silence the flush at interpreter exit.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        return EXIT_OK
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError, PermissionError) as e:
        print(str(e), file=sys.stderr)
        return EXIT_ERROR
    except (GrepError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    return EXIT_OK


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    run()
