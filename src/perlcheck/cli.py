# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line entry point for editor integrations."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Final

import typer

from .errors import PerlcheckError
from .logging import configure_logging, fail
from .orchestrator import check_file
from .serialization import dump_json, dump_text

EXIT_CLEAN: Final[int] = 0
EXIT_DIAGNOSTICS: Final[int] = 1
EXIT_FATAL: Final[int] = 2


class OutputFormat(str, Enum):
    """Renderings supported on stdout."""

    TEXT = "text"
    JSON = "json"


app = typer.Typer(add_completion=False, help="Report Perl compile and custom check diagnostics for one file.")


@app.command()
def check(
    target: Annotated[Path, typer.Argument(help="Perl file to check.")],
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", case_sensitive=False, help="Output format."),
    ] = OutputFormat.TEXT,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Configuration file; must exist when given."),
    ] = None,
    root: Annotated[
        Path | None,
        typer.Option("--root", help="Project root; discovered from the target when omitted."),
    ] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Log backend activity to stderr.")] = False,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in error messages.")] = False,
) -> None:
    """Check TARGET and print its diagnostics."""

    configure_logging(debug=debug)
    try:
        diagnostics = check_file(target, root=root, config_path=config)
    except PerlcheckError as exc:
        fail(str(exc), use_emoji=not no_emoji)
        raise typer.Exit(code=EXIT_FATAL) from exc

    if output_format is OutputFormat.JSON:
        typer.echo(dump_json(diagnostics))
    elif diagnostics:
        typer.echo(dump_text(diagnostics))
    raise typer.Exit(code=EXIT_DIAGNOSTICS if diagnostics else EXIT_CLEAN)


def main() -> None:
    """Run the Typer application."""

    app()


__all__ = ["EXIT_CLEAN", "EXIT_DIAGNOSTICS", "EXIT_FATAL", "OutputFormat", "app", "main"]
