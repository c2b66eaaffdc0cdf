# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the perlcheck package."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .severity import Severity, coerce_severity


class DiagnosticFragment(BaseModel):
    """Severity and message reported before a backend attaches location data."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    severity: Severity = Field(alias="type")
    message: str

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, value: object) -> Severity:
        return coerce_severity(value if isinstance(value, (Severity, str)) else str(value))


class ParsedDiagnostic(DiagnosticFragment):
    """Fragment extracted from compiler output together with its line number."""

    line: int = Field(ge=1)


class Diagnostic(BaseModel):
    """Normalized diagnostic returned to callers.

    Serialises with the ``type``/``message``/``line``/``from`` keys expected by
    editor integrations.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    severity: Severity = Field(alias="type")
    message: str
    line: int = Field(ge=1)
    origin: str = Field(alias="from")

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, value: object) -> Severity:
        return coerce_severity(value if isinstance(value, (Severity, str)) else str(value))

    @classmethod
    def from_fragment(cls, fragment: DiagnosticFragment, *, line: int, origin: str) -> Diagnostic:
        """Attach ``line`` and ``origin`` to ``fragment``."""

        return cls(severity=fragment.severity, message=fragment.message, line=line, origin=origin)


class OrchestratorState(str, Enum):
    """Lifecycle states of an :class:`~perlcheck.orchestrator.Orchestrator`."""

    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    RUNNING = "running"
    DONE = "done"


__all__ = [
    "Diagnostic",
    "DiagnosticFragment",
    "OrchestratorState",
    "ParsedDiagnostic",
]
