# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""High level orchestration for running check backends against a file."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import cast

from .backends import CheckBackend, build_backends
from .config import Config, apply_environment
from .config_loader import load_project_config
from .errors import TargetFileError
from .filtering import SuppressionRules, filter_diagnostics, suppression_rules
from .models import Diagnostic, OrchestratorState
from .workspace import find_project_root

LOGGER = logging.getLogger(__name__)

BackendFactory = Callable[[Config, Path], Sequence[CheckBackend]]


class Orchestrator:
    """Run the configured backends and merge their diagnostics.

    The instance starts ``UNCONFIGURED``. :meth:`configure` loads the
    configuration and builds backends; :meth:`run` may then be called for
    any number of files without reloading.
    """

    def __init__(
        self,
        root: Path,
        *,
        config: Config | None = None,
        config_path: Path | None = None,
        env: Mapping[str, str] | None = None,
        backend_factory: BackendFactory | None = None,
    ) -> None:
        """Create an orchestrator for the project at ``root``.

        Args:
            root: Project root handed to every backend.
            config: Preloaded configuration; takes precedence over ``config_path``.
            config_path: Configuration file that must exist when given.
            env: Environment used for overrides; defaults to ``os.environ``.
            backend_factory: Builds the backends; defaults to :func:`build_backends`.
        """

        self._root = root.resolve()
        self._initial_config = config
        self._config_path = config_path
        self._env = env
        self._backend_factory = backend_factory or build_backends
        self._config: Config | None = None
        self._backends: tuple[CheckBackend, ...] = ()
        self._rules: SuppressionRules = {}
        self.state = OrchestratorState.UNCONFIGURED

    @property
    def root(self) -> Path:
        """Return the project root."""
        return self._root

    @property
    def config(self) -> Config:
        """Return the active configuration, loading it if necessary."""
        self._ensure_configured()
        return cast(Config, self._config)

    @property
    def backends(self) -> tuple[CheckBackend, ...]:
        """Return the backends in registration order."""
        self._ensure_configured()
        return self._backends

    def configure(self) -> None:
        """Load configuration and build backends.

        Raises:
            ConfigError: If an explicit configuration file is missing or invalid.
        """

        if self._initial_config is not None:
            config = apply_environment(self._initial_config, self._env)
        else:
            config = load_project_config(self._root, config_path=self._config_path, env=self._env)
        self._config = config
        self._backends = tuple(self._backend_factory(config, self._root))
        self._rules = suppression_rules(config)
        self.state = OrchestratorState.CONFIGURED
        LOGGER.debug("configured backends: %s", ", ".join(backend.name for backend in self._backends))

    def run(self, target: Path) -> list[Diagnostic]:
        """Check ``target`` with every backend and return the surviving diagnostics.

        Backends run sequentially in registration order. Any error raised by a
        backend aborts the run and propagates; the orchestrator returns to the
        ``CONFIGURED`` state so it can be reused.

        Raises:
            TargetFileError: If ``target`` is not a readable file.
            PerlcheckError: For configuration or backend invocation failures.
        """

        self._ensure_configured()
        if not target.is_file():
            raise TargetFileError(f"file not found: {target}")
        self.state = OrchestratorState.RUNNING
        try:
            diagnostics: list[Diagnostic] = []
            for backend in self._backends:
                found = backend.check(target)
                diagnostics.extend(filter_diagnostics(found, self._rules))
        except BaseException:
            self.state = OrchestratorState.CONFIGURED
            raise
        self.state = OrchestratorState.DONE
        LOGGER.debug("%d diagnostics for %s", len(diagnostics), target)
        return diagnostics

    def _ensure_configured(self) -> None:
        if self.state is OrchestratorState.UNCONFIGURED:
            self.configure()


def check_file(
    target: Path,
    *,
    root: Path | None = None,
    config: Config | None = None,
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> list[Diagnostic]:
    """Check a single file, discovering the project root when omitted."""

    project_root = root if root is not None else find_project_root(target)
    orchestrator = Orchestrator(project_root, config=config, config_path=config_path, env=env)
    return orchestrator.run(target)


__all__ = ["BackendFactory", "Orchestrator", "check_file"]
