# Recursive directory enumeration for filetraverse.
# The traverser only depends on the DirectoryWalker protocol; ScandirWalker
# is the default implementation backed by os.scandir.
#
# Walkers yield files only. Filtering beyond pruning is the traverser's job.

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import AsyncIterator, Callable, List, Optional, Protocol, Tuple

from filetraverse.errors import WalkError


class DirectoryWalker(Protocol):
    """Contract for enumerating every file beneath a directory root.

    The next entry is produced only when the consumer asks for it, so a walk
    never runs ahead of the code handling its files. Exhausting the iterator
    means the walk ended; an exception raised from it means the walk failed.
    """

    def walk(self, root: Path) -> AsyncIterator[Path]:
        ...


def _list_dir(path: Path) -> Tuple[List[Path], List[Path]]:
    # Split one directory into (files, subdirectories), symlinks not followed.
    files: List[Path] = []
    dirs: List[Path] = []
    with os.scandir(path) as entries:
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    dirs.append(Path(entry.path))
                elif entry.is_file(follow_symlinks=False):
                    files.append(Path(entry.path))
            except OSError:
                # Entry vanished between listing and stat.
                continue
    files.sort()
    dirs.sort()
    return files, dirs


class ScandirWalker:
    # Depth-first walk; each listing runs in the default executor so the
    # event loop keeps interleaving other roots while the disk is busy.
    def __init__(self, prune: Optional[Callable[[Path], bool]] = None):
        self.prune = prune

    async def walk(self, root: Path) -> AsyncIterator[Path]:
        loop = asyncio.get_running_loop()
        stack = [Path(root)]

        while stack:
            current = stack.pop()
            try:
                files, dirs = await loop.run_in_executor(None, _list_dir, current)
            except OSError as exc:
                raise WalkError(Path(root), exc) from exc

            for path in files:
                yield path

            # Reversed so the stack pops subdirectories in sorted order.
            for sub in reversed(dirs):
                if self.prune is not None and self.prune(sub):
                    continue
                stack.append(sub)
