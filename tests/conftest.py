# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest


@dataclass(slots=True)
class FakeRunner:
    """Command runner returning canned interpreter output."""

    output: str = ""
    returncode: int = 0
    calls: list[list[str]] = field(default_factory=list)
    cwds: list[Path | None] = field(default_factory=list)

    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        env: object = None,
        combine_output: bool = True,
    ) -> subprocess.CompletedProcess[str]:
        del env
        assert combine_output
        self.calls.append(list(args))
        self.cwds.append(cwd)
        return subprocess.CompletedProcess(args=list(args), returncode=self.returncode, stdout=self.output)


@pytest.fixture
def fake_runner() -> Callable[..., FakeRunner]:
    """Return a factory building :class:`FakeRunner` instances."""

    def _factory(output: str = "", returncode: int = 0) -> FakeRunner:
        return FakeRunner(output=output, returncode=returncode)

    return _factory


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper writing ``content`` to ``tmp_path / name``."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
