# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the diagnostic commands."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from ..config import ENV_PREFIX, ConfigError, settings_from_environ
from ..logging import configure_logging, fail, ok
from ..path_set import contains_directory, inherited_search_path
from ..resolver import BinaryResolver
from .doctor import run_doctor

app = typer.Typer(help="Locate installed copies of a command-line tool.", no_args_is_help=True)


def _resolver(binary: str | None) -> BinaryResolver:
    environ = dict(os.environ)
    if binary:
        environ[f"{ENV_PREFIX}BINARY"] = binary
    try:
        settings = settings_from_environ(environ)
    except ConfigError as exc:
        fail(Console(stderr=True), f"Invalid configuration: {exc}")
        raise typer.Exit(code=2) from exc
    return BinaryResolver(settings)


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log probe details to stderr.")] = False,
) -> None:
    configure_logging(verbose=verbose)


@app.command()
def doctor(
    binary: Annotated[str | None, typer.Option("--binary", "-b", help="Executable name to probe.")] = None,
    show_missing: Annotated[bool, typer.Option("--show-missing", help="List locations with no candidate.")] = False,
) -> None:
    """Show every discovered installation and the one that would be selected."""

    status = run_doctor(_resolver(binary), console=Console(), show_missing=show_missing)
    raise typer.Exit(code=status)


@app.command()
def env(
    executable: Annotated[Path, typer.Argument(help="Executable that would be launched.")],
) -> None:
    """Print the PATH a child process launched from EXECUTABLE would receive."""

    console = Console()
    prepared = _resolver(None).build_execution_environment(executable)
    located = Path(prepared.executable_path)
    if located.is_absolute() and not contains_directory(inherited_search_path(), str(located.parent)):
        ok(console, f"Added {located.parent} to PATH")
    console.print(prepared.search_path, soft_wrap=True, highlight=False)


__all__ = ["app"]
