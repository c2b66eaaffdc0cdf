# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Include path resolution for the compile backend."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path
from typing import Final

from .config import IncludeConfig
from .errors import BackendInvocationError
from .process_utils import run_command

LOGGER = logging.getLogger(__name__)

BUNDLED_LIB_DIR: Final[Path] = Path(__file__).resolve().parent / "perl5"
CONVENTION_DIRS: Final[tuple[str, ...]] = ("lib", "t/lib", "xt/lib")
LOCAL_LIB_DIR: Final[str] = "local/lib/perl5"
_ARCHNAME_SCRIPT: Final[str] = "use Config; print $Config{archname}"


def convention_candidates(root: Path, version_tag: str) -> list[Path]:
    """Return the conventional include directories for ``root`` in precedence order."""

    candidates = [root / name for name in CONVENTION_DIRS]
    candidates.append(root / LOCAL_LIB_DIR / version_tag)
    return candidates


def resolve_search_paths(
    root: Path,
    inc: IncludeConfig,
    *,
    version_tag: str,
    baseline: Path = BUNDLED_LIB_DIR,
) -> tuple[Path, ...]:
    """Return the ordered include directories passed to the interpreter.

    The bundled ``baseline`` always comes first. Conventional directories
    follow when they exist and ``replace_default_libs`` is off. Explicit
    ``libs`` entries come last and are trusted without an existence check;
    relative entries are anchored at ``root``.

    Args:
        root: Project root directory.
        inc: ``compile.inc`` configuration section.
        version_tag: Interpreter architecture name used by ``local::lib``.
        baseline: Directory shipped alongside perlcheck.

    Returns:
        tuple[Path, ...]: Deduplicated include directories.
    """

    ordered: list[Path] = [baseline]
    if not inc.replace_default_libs:
        ordered.extend(candidate for candidate in convention_candidates(root, version_tag) if candidate.is_dir())
    ordered.extend(_anchor(root, entry) for entry in inc.libs)
    resolved = _dedupe(ordered)
    LOGGER.debug("include paths for %s: %s", root, ", ".join(str(path) for path in resolved))
    return resolved


def _anchor(root: Path, entry: str) -> Path:
    path = Path(entry).expanduser()
    return path if path.is_absolute() else root / path


def _dedupe(paths: Iterable[Path]) -> tuple[Path, ...]:
    seen: set[Path] = set()
    unique: list[Path] = []
    for path in paths:
        if path in seen:
            continue
        seen.add(path)
        unique.append(path)
    return tuple(unique)


@lru_cache(maxsize=8)
def perl_version_tag(perl: str = "perl") -> str:
    """Return the interpreter's ``$Config{archname}``.

    Raises:
        BackendInvocationError: If the interpreter cannot be started or the
            probe does not report an architecture name.
    """

    cmd = [perl, "-e", _ARCHNAME_SCRIPT]
    try:
        completed = run_command(cmd, combine_output=False)
    except OSError as exc:
        raise BackendInvocationError("compile", cmd, str(exc)) from exc
    archname = (completed.stdout or "").strip()
    if completed.returncode != 0 or not archname:
        raise BackendInvocationError("compile", cmd, f"archname probe exited with status {completed.returncode}")
    return archname


__all__ = [
    "BUNDLED_LIB_DIR",
    "CONVENTION_DIRS",
    "LOCAL_LIB_DIR",
    "convention_candidates",
    "perl_version_tag",
    "resolve_search_paths",
]
