# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

import logging
import sys
from functools import cache

from rich.console import Console
from rich.text import Text

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
_HANDLER_NAME = "perlcheck-stderr"


def detect_tty() -> bool:
    """Return ``True`` when stderr appears to be backed by a terminal."""

    try:
        return sys.stderr.isatty()
    except (AttributeError, ValueError):
        return False


@cache
def get_console(*, color: bool, emoji: bool) -> Console:
    """Return a cached stderr console configured for ``color`` and ``emoji``."""

    return Console(stderr=True, no_color=not color, emoji=emoji, highlight=False, soft_wrap=True)


def emoji(symbol: str, enable: bool) -> str:
    """Return ``symbol`` when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(msg: str, *, style: str, use_emoji: bool, use_color: bool | None) -> None:
    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if color_enabled:
        text.stylize(style)
    console.print(text)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


def configure_logging(*, debug: bool) -> None:
    """Route ``perlcheck`` module loggers to stderr.

    Args:
        debug: When ``True`` debug records are emitted; otherwise only warnings.
    """

    logger = logging.getLogger("perlcheck")
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    for stale in [existing for existing in logger.handlers if existing.get_name() == _HANDLER_NAME]:
        logger.removeHandler(stale)
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)


__all__ = ["configure_logging", "detect_tty", "emoji", "fail", "get_console"]
