# Command-line run logic for filetraverse.
# This file wires a FileTraverser to console output: it prints each file,
# optionally with a content digest, and finishes with a summary block.
#
# It intentionally contains no CLI parsing and no traversal logic.

from __future__ import annotations

import asyncio
import hashlib
import os
from pathlib import Path
from typing import Iterable, Optional

from rich.console import Console

from filetraverse.models import ListOptions, TraversalSummary
from filetraverse.pending import FileAck
from filetraverse.traverser import FileTraverser

console = Console()

_CHUNK_SIZE = 1024 * 1024


def file_digest(path: Path, hash_name: str) -> str:
    # Hash a file in fixed-size chunks so large files stay out of memory.
    digest = hashlib.new(hash_name)
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def display_path(path: Path, relative_to: Optional[Path]) -> str:
    # Paths outside relative_to are shown in full.
    if relative_to is None:
        return str(path)
    try:
        return str(path.relative_to(relative_to))
    except ValueError:
        return str(path)


def run_list(paths: Iterable[Path], opts: ListOptions) -> TraversalSummary:
    # Entry point for the listing command.
    # Errors propagate so the CLI can decide on the exit code.
    traverser = FileTraverser(
        list(paths),
        excludes=opts.excludes,
        scope_to=opts.scope_to,
    )
    return asyncio.run(_list_files(traverser, opts))


async def _list_files(traverser: FileTraverser, opts: ListOptions) -> TraversalSummary:
    relative_to = Path(os.path.abspath(opts.relative_to)) if opts.relative_to else None

    async def _print_digest(path: Path) -> None:
        loop = asyncio.get_running_loop()
        digest = await loop.run_in_executor(None, file_digest, path, opts.hash_name)
        _print_line(f"{digest}  {display_path(path, relative_to)}")

    @traverser.on_file
    def _handle(path: Path, ack: FileAck):
        # Digests are computed off the loop; the returned coroutine settles the ack.
        if opts.hash_name:
            return _print_digest(path)
        _print_line(display_path(path, relative_to))
        ack.resolve()
        return None

    summary = await traverser.run()

    if opts.summary:
        _print_summary(summary)
    return summary


def _print_line(text: str) -> None:
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def _print_summary(summary: TraversalSummary) -> None:
    # Summary block printed at the end of every run unless disabled.
    console.print()
    console.print("[bold]Summary[/bold]")
    console.print(f"Roots:        {summary.files} file(s), {summary.directories} dir(s)")
    console.print(f"Emitted:      {summary.emitted}")
    console.print(f"Duplicates:   {summary.duplicates}")
    console.print(f"Excluded:     {summary.excluded}")
    console.print(f"Out of scope: {summary.out_of_scope}")
