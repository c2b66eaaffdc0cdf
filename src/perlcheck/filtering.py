# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Suppression of diagnostics matching per-backend skip patterns."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from re import Pattern

from .backends.compile import COMPILE_BACKEND
from .config import Config
from .models import Diagnostic

LOGGER = logging.getLogger(__name__)

SuppressionRules = Mapping[str, Sequence[Pattern[str]]]


def suppression_rules(config: Config) -> dict[str, tuple[Pattern[str], ...]]:
    """Return compiled skip patterns keyed by the backend they apply to.

    Only the compile backend has a skip list; custom predicates suppress
    themselves by returning nothing.
    """

    return {COMPILE_BACKEND: config.compile.skip_patterns}


def is_suppressed(diagnostic: Diagnostic, rules: SuppressionRules) -> bool:
    """Return ``True`` when a rule scoped to the diagnostic's origin matches its message."""

    patterns = rules.get(diagnostic.origin, ())
    return any(pattern.search(diagnostic.message) for pattern in patterns)


def filter_diagnostics(diagnostics: Sequence[Diagnostic], rules: SuppressionRules) -> list[Diagnostic]:
    """Return ``diagnostics`` minus suppressed entries, preserving order.

    Args:
        diagnostics: Diagnostics emitted by one or more backends.
        rules: Patterns keyed by backend name.

    Returns:
        list[Diagnostic]: Diagnostics that should be reported.
    """

    if not diagnostics:
        return []
    kept: list[Diagnostic] = []
    for diagnostic in diagnostics:
        if is_suppressed(diagnostic, rules):
            LOGGER.debug("suppressed %s diagnostic at line %d: %s", diagnostic.origin, diagnostic.line, diagnostic.message)
            continue
        kept.append(diagnostic)
    return kept


__all__ = ["SuppressionRules", "filter_diagnostics", "is_suppressed", "suppression_rules"]
