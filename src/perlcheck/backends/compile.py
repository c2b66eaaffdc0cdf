# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Backend running the perl interpreter in compile-only mode."""

from __future__ import annotations

import logging
import re
from functools import cached_property
from pathlib import Path, PurePosixPath
from typing import ClassVar, Final

from ..config import CompileConfig
from ..errors import BackendInvocationError
from ..models import Diagnostic
from ..parsers import parse_compile_output
from ..paths import perl_version_tag, resolve_search_paths
from ..process_utils import CommandRunner, run_command
from .base import CheckBackend, read_first_line

LOGGER = logging.getLogger(__name__)

COMPILE_BACKEND: Final[str] = "compile"
CHECK_ONLY_FLAG: Final[str] = "-c"
_SHEBANG_PREFIX: Final[str] = "#!"
_BYTE_ORDER_MARK: Final[str] = "\ufeff"
_ENV_INTERPRETER: Final[str] = "env"
_PERL_INTERPRETER: Final[re.Pattern[str]] = re.compile(r"perl[\d.-]*$")


def names_foreign_interpreter(first_line: str) -> bool:
    """Return ``True`` when ``first_line`` is a shebang for something other than perl."""

    line = first_line.removeprefix(_BYTE_ORDER_MARK)
    if not line.startswith(_SHEBANG_PREFIX):
        return False
    words = line[len(_SHEBANG_PREFIX) :].split()
    if words and PurePosixPath(words[0]).name == _ENV_INTERPRETER:
        words = [word for word in words[1:] if not word.startswith("-") and "=" not in word]
    if not words:
        return True
    return _PERL_INTERPRETER.search(PurePosixPath(words[0]).name) is None


class CompileBackend(CheckBackend):
    """Report compile-time warnings and errors produced by ``perl -c``."""

    name: ClassVar[str] = COMPILE_BACKEND

    def __init__(
        self,
        config: CompileConfig,
        root: Path,
        *,
        runner: CommandRunner = run_command,
        version_tag: str | None = None,
    ) -> None:
        """Bind the backend to a project.

        Args:
            config: ``compile`` configuration section.
            root: Project root; conventional include directories live below it
                and the interpreter runs from it.
            runner: Callable used to spawn the interpreter.
            version_tag: Architecture name for ``local/lib/perl5``; probed from
                the interpreter on first use when omitted.
        """

        self._config = config
        self._root = root
        self._runner = runner
        self._version_tag = version_tag

    @cached_property
    def search_paths(self) -> tuple[Path, ...]:
        """Include directories handed to the interpreter, resolved once."""
        version_tag = self._version_tag
        if version_tag is None:
            version_tag = perl_version_tag(self._config.perl)
        return resolve_search_paths(self._root, self._config.inc, version_tag=version_tag)

    def build_command(self, path: Path) -> list[str]:
        """Return the interpreter command used to check ``path``.

        The interpreter runs from the project root, so ``path`` is made absolute.
        """
        includes = [f"-I{directory}" for directory in self.search_paths]
        return [self._config.perl, CHECK_ONLY_FLAG, *self._config.args, *includes, str(path.absolute())]

    def check(self, path: Path) -> list[Diagnostic]:
        if names_foreign_interpreter(read_first_line(path)):
            LOGGER.debug("skipping %s: shebang names another interpreter", path)
            return []
        cmd = self.build_command(path)
        LOGGER.debug("running %s", " ".join(cmd))
        try:
            completed = self._runner(cmd, cwd=self._root, combine_output=True)
        except OSError as exc:
            raise BackendInvocationError(self.name, cmd, str(exc)) from exc
        LOGGER.debug("%s exited with status %s", cmd[0], completed.returncode)
        return [
            Diagnostic.from_fragment(parsed, line=parsed.line, origin=self.name)
            for parsed in parse_compile_output(completed.stdout or "", cmd[-1], returncode=completed.returncode)
        ]


__all__ = ["CHECK_ONLY_FLAG", "COMPILE_BACKEND", "CompileBackend", "names_foreign_interpreter"]
