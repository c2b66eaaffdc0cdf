# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the perl compile backend."""

from __future__ import annotations

import shutil
from collections.abc import Callable
from pathlib import Path
from textwrap import dedent
from typing import Any

import pytest

from perlcheck.backends.compile import CompileBackend, names_foreign_interpreter
from perlcheck.config import CompileConfig, IncludeConfig
from perlcheck.errors import BackendInvocationError
from perlcheck.paths import BUNDLED_LIB_DIR
from perlcheck.severity import Severity

ARCH = "x86_64-linux"

requires_perl = pytest.mark.skipif(shutil.which("perl") is None, reason="perl interpreter not available")

THREE_ISSUES = dedent(
    """\
    use strict;
    use warnings;

    sub foo { 1 }
    sub foo { 2 }

    "oops";
    nope;
    """
)


def _backend(root: Path, runner: Any, **config: object) -> CompileBackend:
    return CompileBackend(CompileConfig.model_validate(config), root, runner=runner, version_tag=ARCH)


def test_command_includes_search_paths_and_check_flag(
    tmp_path: Path,
    fake_runner: Callable[..., Any],
    write_file: Callable[[str, str], Path],
) -> None:
    (tmp_path / "lib").mkdir()
    target = write_file("script.pl", "print 1;\n")
    runner = fake_runner(f"{target} syntax OK\n")
    backend = _backend(tmp_path, runner, inc={"libs": ["vendor"]}, args=["-Mwarnings"])

    assert backend.check(target) == []

    assert runner.calls == [
        [
            "perl",
            "-c",
            "-Mwarnings",
            f"-I{BUNDLED_LIB_DIR}",
            f"-I{tmp_path / 'lib'}",
            f"-I{tmp_path / 'vendor'}",
            str(target),
        ]
    ]
    assert runner.cwds == [tmp_path]


def test_parses_interpreter_output_in_order(
    tmp_path: Path,
    fake_runner: Callable[..., Any],
    write_file: Callable[[str, str], Path],
) -> None:
    target = write_file("three.pl", THREE_ISSUES)
    runner = fake_runner(
        f"Subroutine foo redefined at {target} line 5.\n"
        f'Useless use of a constant ("oops") in void context at {target} line 7.\n'
        f'Bareword "nope" not allowed while "strict subs" in use at {target} line 8.\n'
        f"{target} had compilation errors.\n",
        returncode=255,
    )

    diagnostics = _backend(tmp_path, runner).check(target)

    assert [(d.severity, d.line, d.origin) for d in diagnostics] == [
        (Severity.WARNING, 5, "compile"),
        (Severity.WARNING, 7, "compile"),
        (Severity.ERROR, 8, "compile"),
    ]


def test_foreign_shebang_skips_interpreter(
    tmp_path: Path,
    fake_runner: Callable[..., Any],
    write_file: Callable[[str, str], Path],
) -> None:
    target = write_file("deploy", "#!/bin/bash\nthis is not perl at all {\n")
    runner = fake_runner("should never be parsed")

    assert _backend(tmp_path, runner).check(target) == []
    assert runner.calls == []


@pytest.mark.parametrize(
    ("first_line", "expected"),
    [
        ("#!/bin/sh", True),
        ("#!/usr/bin/env python3", True),
        ("#!/usr/bin/perl -w", False),
        ("#!/usr/bin/env perl", False),
        ("#!/opt/perl-5.38/bin/perl5.38.0", False),
        ("#!/usr/local/bin/superperl", False),
        ("\ufeff#!/usr/bin/perl", False),
        ("\ufeff#!/bin/bash", True),
        ("#!/usr/bin/env -S perl -w", False),
        ("#!/usr/bin/perlish-shell", True),
        ("#!", True),
        ("use strict;", False),
        ("", False),
    ],
)
def test_names_foreign_interpreter(first_line: str, expected: bool) -> None:
    assert names_foreign_interpreter(first_line) is expected


def test_missing_interpreter_is_fatal(tmp_path: Path, write_file: Callable[[str, str], Path]) -> None:
    target = write_file("script.pl", "print 1;\n")
    backend = CompileBackend(
        CompileConfig(perl="perlcheck-no-such-perl", inc=IncludeConfig()),
        tmp_path,
        version_tag=ARCH,
    )

    with pytest.raises(BackendInvocationError, match="perlcheck-no-such-perl"):
        backend.check(target)


def test_search_paths_resolved_once(tmp_path: Path, fake_runner: Callable[..., Any]) -> None:
    backend = _backend(tmp_path, fake_runner())
    first = backend.search_paths
    (tmp_path / "lib").mkdir()

    assert backend.search_paths is first
    assert first == (BUNDLED_LIB_DIR,)


@requires_perl
def test_clean_file_has_no_diagnostics(tmp_path: Path, write_file: Callable[[str, str], Path]) -> None:
    target = write_file(
        "Makefile.PL",
        dedent(
            """\
            use strict;
            use warnings;

            my %args = (
                NAME    => 'Foo::Bar',
                VERSION => '0.01',
            );
            print "$args{NAME}\\n";
            """
        ),
    )

    assert CompileBackend(CompileConfig(), tmp_path).check(target) == []


@requires_perl
def test_missing_module_reports_one_error(tmp_path: Path, write_file: Callable[[str, str], Path]) -> None:
    target = write_file("missing.pl", "use strict;\nuse warnings;\nuse Not::There::Perlcheck;\n1;\n")

    diagnostics = CompileBackend(CompileConfig(), tmp_path).check(target)

    assert len(diagnostics) == 1
    assert diagnostics[0].severity is Severity.ERROR
    assert diagnostics[0].line == 3
    assert "Not/There/Perlcheck.pm" in diagnostics[0].message


@requires_perl
def test_project_lib_is_on_include_path(tmp_path: Path, write_file: Callable[[str, str], Path]) -> None:
    write_file("lib/My/Helper.pm", "package My::Helper;\nuse strict;\n1;\n")
    target = write_file("bin/tool.pl", "use strict;\nuse warnings;\nuse My::Helper;\n1;\n")

    assert CompileBackend(CompileConfig(), tmp_path).check(target) == []


@requires_perl
def test_redefinition_warning_from_real_interpreter(tmp_path: Path, write_file: Callable[[str, str], Path]) -> None:
    target = write_file("redef.pl", "use strict;\nuse warnings;\n\nsub foo { 1 }\nsub foo { 2 }\n1;\n")

    diagnostics = CompileBackend(CompileConfig(), tmp_path).check(target)

    assert [(d.severity, d.line, d.message) for d in diagnostics] == [
        (Severity.WARNING, 5, "Subroutine foo redefined"),
    ]


def test_exit_status_reaches_parser(
    tmp_path: Path,
    fake_runner: Callable[..., Any],
    write_file: Callable[[str, str], Path],
) -> None:
    target = write_file("attr.pl", "use strict;\nsub f :Bogus { 1 }\n1;\n")
    runner = fake_runner(f"Invalid CODE attribute: Bogus at {target} line 2.\n", returncode=255)

    diagnostics = _backend(tmp_path, runner).check(target)

    assert [(d.severity, d.line) for d in diagnostics] == [(Severity.ERROR, 2)]


@requires_perl
@pytest.mark.parametrize(
    ("source", "message"),
    [
        ("use strict;\nsub f :Bogus { 1 }\n1;\n", "Invalid CODE attribute: Bogus"),
        ('use strict;\nBEGIN { die "boom" }\n1;\n', "boom"),
        ('use strict;\nBEGIN { die "boom\\n" }\n1;\n', "BEGIN failed--compilation aborted"),
    ],
    ids=["unlisted-fatal-wording", "located-begin-die", "unlocated-begin-die"],
)
def test_aborted_compile_reports_one_error(
    tmp_path: Path,
    write_file: Callable[[str, str], Path],
    source: str,
    message: str,
) -> None:
    target = write_file("aborted.pl", source)

    diagnostics = CompileBackend(CompileConfig(), tmp_path).check(target)

    assert [(d.severity, d.line, d.message) for d in diagnostics] == [(Severity.ERROR, 2, message)]


def test_byte_order_mark_does_not_hide_foreign_shebang(tmp_path: Path, fake_runner: Callable[..., Any]) -> None:
    target = tmp_path / "deploy"
    target.write_bytes(b"\xef\xbb\xbf#!/bin/bash\necho hi\n")
    runner = fake_runner("should never be parsed")

    assert _backend(tmp_path, runner).check(target) == []
    assert runner.calls == []
