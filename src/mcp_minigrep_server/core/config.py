"""Run options and environment-derived settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .annotate import DEFAULT_EMPHASIS_STYLE
from .models import ErrorPolicy
from .output import BlockLayout
from .sources import DEFAULT_ENCODING

MAX_WORKERS_ENV = "MINIGREP_MAX_WORKERS"
LOG_LEVEL_ENV = "MINIGREP_LOG_LEVEL"
BASE_DIR_ENV = "MINIGREP_BASE_DIR"
COLOR_STYLE_ENV = "MINIGREP_COLOR_STYLE"


@dataclass(frozen=True, slots=True)
class GrepOptions:
    """Already-validated settings for one run."""

    pattern: str
    case_insensitive: bool = False
    line_numbers: bool = False
    show_labels: bool = False
    emphasize: bool = False
    recursive: bool = False
    paths: tuple[str, ...] = ()
    on_unreadable: ErrorPolicy | None = None  # None: abort for named files, skip when walking
    encoding: str = DEFAULT_ENCODING
    max_workers: int | None = None
    emphasis_style: str | None = None
    layout: BlockLayout | None = None  # None: per source kind


def resolve_max_workers(max_workers: int | None) -> int:
    """Worker count for directory scans: argument, then env, then 1."""
    if max_workers is not None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        return max_workers

    env = os.getenv(MAX_WORKERS_ENV)
    if env:
        try:
            value = int(env)
        except ValueError as exc:
            raise ValueError(f"{MAX_WORKERS_ENV} must be an integer") from exc
        if value < 1:
            raise ValueError(f"{MAX_WORKERS_ENV} must be >= 1")
        return value

    return 1


def resolve_emphasis_style(style: str | None) -> str:
    return style or os.getenv(COLOR_STYLE_ENV) or DEFAULT_EMPHASIS_STYLE
