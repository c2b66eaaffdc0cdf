# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Load perlcheck configuration from TOML documents."""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any, Final

from .config import Config, apply_environment, build_config
from .errors import ConfigError

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME: Final[str] = ".perlcheck.toml"


def load_config(path: Path) -> Config:
    """Read and validate the configuration stored at ``path``.

    Args:
        path: TOML document describing ``compile`` and ``custom`` sections.

    Returns:
        Config: Validated configuration. Predicate modules are looked up
        next to the file before ``sys.path``.

    Raises:
        ConfigError: If the file is missing, unreadable, or invalid.
    """

    if not path.is_file():
        raise ConfigError(f"configuration file not found: {path}")
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"unable to read configuration {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    if not isinstance(data, MutableMapping):
        raise ConfigError(f"configuration at {path} must be a table")
    LOGGER.debug("loaded configuration from %s", path)
    return build_config(data, source=str(path), import_root=path.parent.resolve())


def discover_config(root: Path) -> Path | None:
    """Return the project configuration file under ``root`` when present."""

    candidate = root / DEFAULT_CONFIG_NAME
    return candidate if candidate.is_file() else None


def load_project_config(
    root: Path,
    *,
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Config:
    """Resolve the configuration for ``root``.

    An explicit ``config_path`` must exist. Without one the project file is
    used when present, otherwise built-in defaults apply. Environment overrides
    are applied last.
    """

    path = config_path if config_path is not None else discover_config(root)
    config = load_config(path) if path is not None else Config()
    return apply_environment(config, env)


def config_from_mapping(data: Mapping[str, Any], *, env: Mapping[str, str] | None = None) -> Config:
    """Validate an in-memory configuration mapping and apply environment overrides."""

    return apply_environment(build_config(data), env)


__all__ = [
    "DEFAULT_CONFIG_NAME",
    "config_from_mapping",
    "discover_config",
    "load_config",
    "load_project_config",
]
