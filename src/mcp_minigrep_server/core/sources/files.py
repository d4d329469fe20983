"""Explicit, ordered list of files."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from ..models import ErrorPolicy, SourceBlock, SourceKind
from .base import DEFAULT_ENCODING, iter_file_blocks


@dataclass(frozen=True)
class FileListSource:
    """Named files in caller order; line numbers restart per file.

    A named file that cannot be opened aborts the run unless the policy is
    SKIP, in which case it is skipped with a warning.
    """

    paths: Sequence[str]
    on_unreadable: ErrorPolicy = ErrorPolicy.ABORT
    encoding: str = DEFAULT_ENCODING

    kind: ClassVar[SourceKind] = SourceKind.FILE_LIST

    def blocks(self) -> AsyncIterator[SourceBlock]:
        return iter_file_blocks(
            (Path(p) for p in self.paths),
            on_unreadable=self.on_unreadable,
            encoding=self.encoding,
            skip_log_level=logging.WARNING,
        )
