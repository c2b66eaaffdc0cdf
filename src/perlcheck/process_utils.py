# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; external tools run from argument
# lists without ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from subprocess import CompletedProcess
from typing import TypeAlias

CommandRunner: TypeAlias = Callable[..., CompletedProcess[str]]


def _normalize_args(args: Sequence[str]) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    combine_output: bool = True,
) -> CompletedProcess[str]:
    """Execute ``args`` to completion and capture its output as text.

    Args:
        args: Command and arguments; the executable is resolved on ``PATH``.
        cwd: Working directory for the child process.
        env: Complete environment for the child; inherits ours when ``None``.
        combine_output: When ``True`` stderr is merged into ``stdout``.

    Returns:
        CompletedProcess[str]: Finished process. A non-zero exit status is not an error.

    Raises:
        FileNotFoundError: If the executable cannot be located.
        OSError: If the process cannot be spawned.
    """

    normalized = _normalize_args(args)
    # Bandit: commands are built from validated configuration, never a shell string.
    return subprocess.run(  # nosec B603
        normalized,
        cwd=str(cwd) if cwd is not None else None,
        env=dict(env) if env is not None else None,
        check=False,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT if combine_output else subprocess.PIPE,
        stdin=subprocess.DEVNULL,
        text=True,
        errors="replace",
    )


__all__ = ["CommandRunner", "run_command"]
