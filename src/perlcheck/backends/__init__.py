# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Check backends and their registration order."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from ..config import Config
from ..process_utils import CommandRunner, run_command
from .base import CheckBackend
from .compile import COMPILE_BACKEND, CompileBackend
from .custom import CUSTOM_BACKEND, CustomBackend

BACKEND_ORDER: Final[tuple[str, ...]] = (COMPILE_BACKEND, CUSTOM_BACKEND)


def build_backends(
    config: Config,
    root: Path,
    *,
    runner: CommandRunner = run_command,
    version_tag: str | None = None,
) -> list[CheckBackend]:
    """Instantiate every backend in :data:`BACKEND_ORDER`."""

    return [
        CompileBackend(config.compile, root, runner=runner, version_tag=version_tag),
        CustomBackend(config.custom),
    ]


__all__ = [
    "BACKEND_ORDER",
    "CheckBackend",
    "CompileBackend",
    "CustomBackend",
    "build_backends",
]
