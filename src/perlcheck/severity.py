# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels reported by perlcheck backends."""

    WARNING = "warning"
    ERROR = "error"


_SEVERITY_ALIASES: Final[dict[str, Severity]] = {
    "warn": Severity.WARNING,
    "warning": Severity.WARNING,
    "err": Severity.ERROR,
    "error": Severity.ERROR,
}


def coerce_severity(value: Severity | str) -> Severity:
    """Return a :class:`Severity` for ``value``.

    Args:
        value: Severity member or a case-insensitive label such as ``"warn"``.

    Returns:
        Severity: Matching severity member.

    Raises:
        ValueError: If ``value`` does not name a known severity.
    """

    if isinstance(value, Severity):
        return value
    label = str(value).strip().lower()
    try:
        return _SEVERITY_ALIASES[label]
    except KeyError as exc:
        raise ValueError(f"unknown severity '{value}'") from exc


__all__ = ["Severity", "coerce_severity"]
