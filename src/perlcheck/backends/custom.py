# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Backend running user-supplied line predicates."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import ClassVar, Final

from pydantic import ValidationError

from ..config import CustomConfig, LineCheck, LineResult
from ..errors import ConfigError
from ..models import Diagnostic, DiagnosticFragment
from .base import CheckBackend, read_lines

LOGGER = logging.getLogger(__name__)

CUSTOM_BACKEND: Final[str] = "custom"


def coerce_fragment(result: LineResult, check: LineCheck) -> DiagnosticFragment | None:
    """Normalise a predicate's return value.

    Raises:
        ConfigError: If the predicate returned something other than ``None``,
            a :class:`DiagnosticFragment`, or a mapping with a severity and message.
    """

    if result is None or isinstance(result, DiagnosticFragment):
        return result
    name = getattr(check.predicate, "__qualname__", repr(check.predicate))
    if not isinstance(result, Mapping):
        raise ConfigError(f"check {name} returned {type(result).__name__}; expected a mapping or None")
    try:
        return DiagnosticFragment.model_validate(dict(result))
    except ValidationError as exc:
        raise ConfigError(f"check {name} returned an invalid diagnostic: {exc}") from exc


class CustomBackend(CheckBackend):
    """Scan a file line by line with the configured predicates."""

    name: ClassVar[str] = CUSTOM_BACKEND

    def __init__(self, config: CustomConfig) -> None:
        self._checks = config.check

    def check(self, path: Path) -> list[Diagnostic]:
        checks = [check for check in self._checks if check.applies_to(path)]
        if not checks:
            return []
        filename = str(path)
        diagnostics: list[Diagnostic] = []
        for line_no, text in enumerate(read_lines(path), start=1):
            for check in checks:
                fragment = coerce_fragment(check.predicate(text, filename), check)
                if fragment is not None:
                    diagnostics.append(Diagnostic.from_fragment(fragment, line=line_no, origin=self.name))
        LOGGER.debug("%d custom diagnostics for %s", len(diagnostics), path)
        return diagnostics


__all__ = ["CUSTOM_BACKEND", "CustomBackend", "coerce_fragment"]
