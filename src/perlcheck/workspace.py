# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Utilities for reasoning about the checked project's root directory."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from .config_loader import DEFAULT_CONFIG_NAME

ROOT_MARKERS: Final[tuple[str, ...]] = (
    DEFAULT_CONFIG_NAME,
    ".git",
    "cpanfile",
    "Makefile.PL",
    "Build.PL",
    "dist.ini",
)


def find_project_root(target: Path) -> Path:
    """Return the nearest ancestor of ``target`` that looks like a project root.

    Args:
        target: File being checked.

    Returns:
        Path: First ancestor directory containing one of :data:`ROOT_MARKERS`,
        or the target's own directory when none does.
    """

    start = target.resolve().parent
    for candidate in (start, *start.parents):
        if any((candidate / marker).exists() for marker in ROOT_MARKERS):
            return candidate
    return start


__all__ = ["ROOT_MARKERS", "find_project_root"]
