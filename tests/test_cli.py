# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Smoke tests for the command line interface."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path
from textwrap import dedent

import pytest
from typer.testing import CliRunner

from perlcheck.cli import EXIT_CLEAN, EXIT_DIAGNOSTICS, EXIT_FATAL, app
from perlcheck.config_loader import DEFAULT_CONFIG_NAME

runner = CliRunner()


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Project whose configuration registers a TODO line check."""

    (tmp_path / "perlcheck_cli_checks.py").write_text(
        dedent(
            """\
            from pathlib import Path


            def todo(line, file_path):
                if Path(file_path).name == "todo.pl" and "TODO" in line:
                    return {"type": "warn", "message": "Found TODO"}
                return None
            """
        ),
        encoding="utf-8",
    )
    monkeypatch.delitem(sys.modules, "perlcheck_cli_checks", raising=False)
    monkeypatch.delenv("PERLCHECK_REPLACE_DEFAULT_LIBS", raising=False)
    (tmp_path / DEFAULT_CONFIG_NAME).write_text(
        '[custom]\ncheck = ["perlcheck_cli_checks:todo"]\n',
        encoding="utf-8",
    )
    return tmp_path


def test_text_output_and_failure_exit(project: Path, write_file: Callable[[str, str], Path]) -> None:
    target = write_file("todo.pl", "#!/bin/sh\n# TODO\n")

    result = runner.invoke(app, [str(target)])

    assert result.exit_code == EXIT_DIAGNOSTICS
    assert result.stdout.strip() == "2:warning:custom:Found TODO"


def test_json_output(project: Path, write_file: Callable[[str, str], Path]) -> None:
    target = write_file("todo.pl", "#!/bin/sh\n# TODO\n")

    result = runner.invoke(app, [str(target), "--format", "json"])

    assert result.exit_code == EXIT_DIAGNOSTICS
    assert json.loads(result.stdout) == [{"type": "warning", "message": "Found TODO", "line": 2, "from": "custom"}]


def test_clean_file_exits_zero(project: Path, write_file: Callable[[str, str], Path]) -> None:
    target = write_file("todo_skip.pl", "#!/bin/sh\n# TODO\n")

    result = runner.invoke(app, [str(target), "--format", "json", "--root", str(project)])

    assert result.exit_code == EXIT_CLEAN
    assert json.loads(result.stdout) == []


def test_missing_config_is_fatal(project: Path, write_file: Callable[[str, str], Path]) -> None:
    target = write_file("todo.pl", "#!/bin/sh\n")

    result = runner.invoke(app, [str(target), "--config", str(project / "missing.toml"), "--no-emoji"])

    assert result.exit_code == EXIT_FATAL
    assert "configuration file not found" in result.output


def test_missing_target_is_fatal(project: Path) -> None:
    result = runner.invoke(app, [str(project / "absent.pl"), "--root", str(project)])

    assert result.exit_code == EXIT_FATAL
    assert "file not found" in result.output


def test_predicate_module_beside_config_from_project_directory(
    project: Path,
    write_file: Callable[[str, str], Path],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    write_file("todo.pl", "#!/bin/sh\nprint 1;\n# TODO\n")
    monkeypatch.chdir(project)
    original_path = list(sys.path)

    result = runner.invoke(app, ["todo.pl"])

    assert result.exit_code == EXIT_DIAGNOSTICS
    assert result.stdout.strip() == "3:warning:custom:Found TODO"
    assert sys.path == original_path
