"""Recursive walk of a single directory."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from ..models import ErrorPolicy, SourceBlock, SourceKind
from .base import DEFAULT_ENCODING, iter_file_blocks

logger = logging.getLogger(__name__)


def walk_files(root: str | Path) -> Iterator[Path]:
    """Depth-first walk yielding regular files in sorted name order.

    Symlinks (to files or directories), sockets, devices and FIFOs are
    skipped. Directories that cannot be listed are skipped silently.
    """
    try:
        with os.scandir(root) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.debug("Cannot list directory %s: %s", root, e)
        return

    for entry in entries:
        try:
            if entry.is_symlink():
                continue
            if entry.is_dir(follow_symlinks=False):
                yield from walk_files(entry.path)
            elif entry.is_file(follow_symlinks=False):
                yield Path(entry.path)
        except OSError as e:
            logger.debug("Cannot stat %s: %s", entry.path, e)


@dataclass(frozen=True)
class DirectorySource:
    """Every regular file under one root; labels are the walked paths."""

    root: str
    on_unreadable: ErrorPolicy = ErrorPolicy.SKIP
    encoding: str = DEFAULT_ENCODING

    kind: ClassVar[SourceKind] = SourceKind.DIRECTORY

    def __post_init__(self) -> None:
        path = Path(self.root)
        if not path.exists():
            raise FileNotFoundError(f"Directory not found: {path}")
        if not path.is_dir():
            raise NotADirectoryError(f"Not a directory: {path}")

    def files(self) -> Iterator[Path]:
        return walk_files(self.root)

    def blocks(self) -> AsyncIterator[SourceBlock]:
        return iter_file_blocks(
            self.files(),
            on_unreadable=self.on_unreadable,
            encoding=self.encoding,
            skip_log_level=logging.DEBUG,
        )
