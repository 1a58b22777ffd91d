# Command-line interface definition for filetraverse.
# This file is responsible only for argument parsing, validation,
# logging setup, and dispatch into core run logic.

from __future__ import annotations

import hashlib
import logging
from pathlib import Path as FSPath
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from filetraverse import __version__
from filetraverse.core import run_list
from filetraverse.errors import FileTraverseError
from filetraverse.models import ListOptions

app = typer.Typer(
    add_completion=False,
    help="List every file under the given roots exactly once.",
)
console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _check_hash(hash_name: Optional[str]) -> Optional[str]:
    if hash_name is None:
        return None
    name = hash_name.lower()
    # shake digests need an explicit length, which the listing never passes.
    if name not in hashlib.algorithms_available or name.startswith("shake_"):
        raise typer.BadParameter(f"Unknown hash algorithm: {hash_name}")
    return name


@app.command(help="Report every file under the given files and directories once.")
def main(
    paths: List[FSPath] = typer.Argument(
        None,
        help="Files or directories to traverse. Defaults to current directory.",
    ),

    # Filtering.
    exclude: List[FSPath] = typer.Option(
        [], "--exclude",
        help="Skip this path and everything beneath it. Repeatable.",
        rich_help_panel="Filtering",
    ),
    scope_to: Optional[str] = typer.Option(
        None, "--scope-to",
        help="Only report files whose absolute path starts with this prefix.",
        rich_help_panel="Filtering",
    ),

    # Output.
    hash_name: Optional[str] = typer.Option(
        None, "--hash",
        help="Print a hex digest (e.g. sha256, md5) before each path.",
        rich_help_panel="Output",
    ),
    relative_to: Optional[FSPath] = typer.Option(
        None, "--relative-to",
        help="Print paths relative to this directory where possible.",
        rich_help_panel="Output",
    ),
    summary: bool = typer.Option(
        True, "--summary/--no-summary",
        help="Print a summary block after the listing.",
        rich_help_panel="Output",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Log every traversal decision to stderr.",
        rich_help_panel="Output",
    ),

    version: bool = typer.Option(
        False, "--version",
        help="Show version and exit.",
    ),
):
    # Handle version early and exit cleanly.
    if version:
        console.print(__version__)
        raise typer.Exit(code=0)

    _configure_logging(verbose)

    if not paths:
        paths = [FSPath(".")]

    opts = ListOptions(
        excludes=exclude,
        scope_to=scope_to,

        hash_name=_check_hash(hash_name),
        relative_to=relative_to,

        summary=summary,
    )

    try:
        run_list(paths=paths, opts=opts)
    except FileTraverseError as exc:
        err_console.print(f"[red]ERROR:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
