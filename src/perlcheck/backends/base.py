# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Backend contract shared by compile and custom checks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from ..errors import TargetFileError
from ..models import Diagnostic


class CheckBackend(ABC):
    """Inspect one file and report diagnostics tagged with :attr:`name`."""

    name: ClassVar[str]

    @abstractmethod
    def check(self, path: Path) -> list[Diagnostic]:
        """Return the diagnostics found in ``path`` in emission order."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def read_lines(path: Path) -> list[str]:
    """Return the newline-separated lines of ``path`` without terminators.

    Form feeds and other Unicode line boundaries stay inside their line so
    numbering matches the interpreter's.

    Raises:
        TargetFileError: If the file cannot be read.
    """

    try:
        with path.open(encoding="utf-8", errors="replace", newline=None) as handle:
            return [line.rstrip("\r\n") for line in handle]
    except OSError as exc:
        raise TargetFileError(f"unable to read {path}: {exc}") from exc


def read_first_line(path: Path) -> str:
    """Return the first line of ``path`` (empty for an empty file)."""

    try:
        with path.open(encoding="utf-8", errors="replace") as handle:
            return handle.readline().rstrip("\r\n")
    except OSError as exc:
        raise TargetFileError(f"unable to read {path}: {exc}") from exc


__all__ = ["CheckBackend", "read_first_line", "read_lines"]
