# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typed configuration records for compile and custom checks."""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from fnmatch import fnmatch
from importlib import import_module
from pathlib import Path
from re import Pattern
from typing import Any, Final, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationInfo, field_validator, model_validator

from .errors import ConfigError
from .models import DiagnosticFragment

LineResult: TypeAlias = DiagnosticFragment | Mapping[str, Any] | None
LinePredicate: TypeAlias = Callable[[str, str], LineResult]

REPLACE_DEFAULT_LIBS_ENV: Final[str] = "PERLCHECK_REPLACE_DEFAULT_LIBS"
_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_REFERENCE_SEPARATOR: Final[str] = ":"
# Validation context key naming the directory predicate modules are imported from.
IMPORT_ROOT_CONTEXT: Final[str] = "import_root"


class IncludeConfig(BaseModel):
    """Search path settings for the compile backend."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    libs: tuple[str, ...] = Field(default_factory=tuple)
    replace_default_libs: bool = False


class CompileConfig(BaseModel):
    """Settings for running ``perl -c`` against a file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    inc: IncludeConfig = Field(default_factory=IncludeConfig)
    skip: tuple[str, ...] = Field(default_factory=tuple)
    perl: str = "perl"
    args: tuple[str, ...] = Field(default_factory=tuple)
    _compiled_skip: tuple[Pattern[str], ...] = PrivateAttr(default_factory=tuple)

    @model_validator(mode="after")
    def _compile_skip(self) -> CompileConfig:
        """Compile the configured suppression patterns once."""
        compiled: list[Pattern[str]] = []
        for pattern in self.skip:
            try:
                compiled.append(re.compile(pattern))
            except re.error as exc:
                raise ValueError(f"invalid skip pattern {pattern!r}: {exc}") from exc
        self._compiled_skip = tuple(compiled)
        return self

    @property
    def skip_patterns(self) -> tuple[Pattern[str], ...]:
        """Return the compiled ``skip`` patterns."""
        return self._compiled_skip


class LineCheck(BaseModel):
    """A line predicate plus optional filename globs limiting where it runs."""

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    predicate: Callable[..., Any]
    files: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("predicate", mode="before")
    @classmethod
    def _resolve_predicate(cls, value: object, info: ValidationInfo) -> object:
        if isinstance(value, str):
            context = info.context or {}
            return resolve_reference(value, import_root=context.get(IMPORT_ROOT_CONTEXT))
        if not callable(value):
            raise ValueError(f"check predicate must be callable, got {type(value).__name__}")
        return value

    def applies_to(self, path: Path) -> bool:
        """Return ``True`` when the check should run against ``path``."""
        if not self.files:
            return True
        return any(fnmatch(path.name, pattern) or fnmatch(path.as_posix(), pattern) for pattern in self.files)


class CustomConfig(BaseModel):
    """Line predicates run by the custom backend, in registration order."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    check: tuple[LineCheck, ...] = Field(default_factory=tuple)

    @field_validator("check", mode="before")
    @classmethod
    def _coerce_checks(cls, value: object) -> object:
        if value is None:
            return ()
        if isinstance(value, (str, Mapping)) or callable(value):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"custom.check must be a list, got {type(value).__name__}")
        entries: list[object] = []
        for entry in value:
            if isinstance(entry, str) or (callable(entry) and not isinstance(entry, LineCheck)):
                entries.append({"predicate": entry})
            else:
                entries.append(entry)
        return tuple(entries)


class Config(BaseModel):
    """Top-level configuration consumed by the orchestrator."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    compile: CompileConfig = Field(default_factory=CompileConfig)
    custom: CustomConfig = Field(default_factory=CustomConfig)


def resolve_reference(reference: str, *, import_root: Path | None = None) -> LinePredicate:
    """Import the callable named by ``reference``.

    Args:
        reference: ``"package.module:attribute"`` or ``"package.module.attribute"``.
        import_root: Directory searched before ``sys.path`` while importing,
            normally the directory holding the configuration file.

    Returns:
        LinePredicate: Imported callable.

    Raises:
        ValueError: If the module or attribute cannot be imported or is not callable.
    """

    text = reference.strip()
    if _REFERENCE_SEPARATOR in text:
        module_name, _, attr_path = text.partition(_REFERENCE_SEPARATOR)
    else:
        module_name, _, attr_path = text.rpartition(".")
    if not module_name or not attr_path:
        raise ValueError(f"invalid predicate reference '{reference}'")
    try:
        with _import_root(import_root):
            target: object = import_module(module_name)
    except ImportError as exc:
        raise ValueError(f"cannot import module '{module_name}' for predicate '{reference}': {exc}") from exc
    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ValueError(f"predicate '{reference}' not found") from exc
    if not callable(target):
        raise ValueError(f"predicate '{reference}' is not callable")
    return target  # type: ignore[return-value]


@contextmanager
def _import_root(directory: Path | None) -> Iterator[None]:
    entry = None if directory is None else str(directory)
    if entry is None or entry in sys.path:
        yield
        return
    sys.path.insert(0, entry)
    try:
        yield
    finally:
        if entry in sys.path:
            sys.path.remove(entry)


def env_flag(value: str | None) -> bool:
    """Return ``True`` when ``value`` spells a truthy toggle."""
    return value is not None and value.strip().lower() in _TRUTHY


def apply_environment(config: Config, env: Mapping[str, str] | None = None) -> Config:
    """Return ``config`` with process-wide environment overrides applied.

    Only :data:`REPLACE_DEFAULT_LIBS_ENV` is recognised. When truthy it forces
    ``compile.inc.replace_default_libs`` on.
    """

    source = os.environ if env is None else env
    if not env_flag(source.get(REPLACE_DEFAULT_LIBS_ENV)):
        return config
    if config.compile.inc.replace_default_libs:
        return config
    inc = config.compile.inc.model_copy(update={"replace_default_libs": True})
    compile_cfg = config.compile.model_copy(update={"inc": inc})
    return config.model_copy(update={"compile": compile_cfg})


def build_config(
    data: Mapping[str, Any] | None,
    *,
    source: str = "<mapping>",
    import_root: Path | None = None,
) -> Config:
    """Validate a raw configuration mapping.

    Predicate references are imported with ``import_root`` searched first.

    Raises:
        ConfigError: If the mapping does not describe a valid configuration.
    """

    try:
        return Config.model_validate(dict(data or {}), context={IMPORT_ROOT_CONTEXT: import_root})
    except ValueError as exc:
        raise ConfigError(f"invalid configuration in {source}: {exc}") from exc


__all__ = [
    "CompileConfig",
    "Config",
    "CustomConfig",
    "IMPORT_ROOT_CONTEXT",
    "IncludeConfig",
    "LineCheck",
    "LinePredicate",
    "LineResult",
    "REPLACE_DEFAULT_LIBS_ENV",
    "apply_environment",
    "build_config",
    "env_flag",
    "resolve_reference",
]
