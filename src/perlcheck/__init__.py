# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core package metadata and public entry points."""

from __future__ import annotations

from importlib import metadata

from .models import Diagnostic, DiagnosticFragment
from .orchestrator import Orchestrator, check_file
from .severity import Severity

__all__ = [
    "Diagnostic",
    "DiagnosticFragment",
    "Orchestrator",
    "Severity",
    "__version__",
    "check_file",
]

try:
    __version__ = metadata.version("perlcheck")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
