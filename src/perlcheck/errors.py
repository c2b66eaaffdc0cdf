# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exceptions raised by perlcheck.

Diagnostics found in a checked file are returned as data and never raised.
The errors below are fatal: they abort a run before or while backends
execute.
"""

from __future__ import annotations

from collections.abc import Sequence


class PerlcheckError(Exception):
    """Base class for fatal perlcheck failures."""


class ConfigError(PerlcheckError):
    """Raised when configuration input is missing or invalid."""


class TargetFileError(PerlcheckError):
    """Raised when the file to check cannot be read."""


class BackendInvocationError(PerlcheckError):
    """Raised when a backend cannot spawn its external tool."""

    def __init__(self, backend: str, command: Sequence[str], reason: str) -> None:
        super().__init__(f"{backend}: unable to run '{command[0]}': {reason}")
        self.backend = backend
        self.command = tuple(command)
        self.reason = reason


__all__ = [
    "BackendInvocationError",
    "ConfigError",
    "PerlcheckError",
    "TargetFileError",
]
