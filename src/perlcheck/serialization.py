# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Text and JSON renderings of diagnostic lists."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from pydantic import TypeAdapter

from .models import Diagnostic

TEXT_SEPARATOR: Final[str] = ":"
_DIAGNOSTIC_LIST: Final[TypeAdapter[list[Diagnostic]]] = TypeAdapter(list[Diagnostic])


def format_text(diagnostic: Diagnostic) -> str:
    """Return ``line:type:from:message`` for ``diagnostic``."""

    return TEXT_SEPARATOR.join(
        (str(diagnostic.line), diagnostic.severity.value, diagnostic.origin, diagnostic.message)
    )


def dump_text(diagnostics: Sequence[Diagnostic]) -> str:
    """Return one text line per diagnostic."""

    return "\n".join(format_text(diagnostic) for diagnostic in diagnostics)


def dump_json(diagnostics: Sequence[Diagnostic], *, indent: int | None = None) -> str:
    """Serialise ``diagnostics`` as a JSON array of ``type``/``message``/``line``/``from`` records."""

    return _DIAGNOSTIC_LIST.dump_json(list(diagnostics), by_alias=True, indent=indent).decode("utf-8")


def load_json(payload: str | bytes) -> list[Diagnostic]:
    """Parse a JSON array produced by :func:`dump_json`."""

    return _DIAGNOSTIC_LIST.validate_json(payload)


__all__ = ["TEXT_SEPARATOR", "dump_json", "dump_text", "format_text", "load_json"]
