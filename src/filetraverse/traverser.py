# Traversal orchestration for filetraverse.
# This module classifies inputs, walks directory roots concurrently, runs
# every discovered path through admission, and waits for every handler
# acknowledgment before reporting completion.
#
# It intentionally contains no CLI parsing and no per-file processing.

from __future__ import annotations

import asyncio
import inspect
import logging
import os
from pathlib import Path
from typing import (
    Any,
    Awaitable,
    Callable,
    FrozenSet,
    List,
    Optional,
    Sequence,
    Set,
    Union,
)

from filetraverse.errors import TraverserStateError, WalkError
from filetraverse.filters import DeduplicationLedger, ExclusionFilter
from filetraverse.models import (
    PathInput,
    PathKind,
    TraversalState,
    TraversalSummary,
    TraverserOptions,
)
from filetraverse.paths import canonicalize, classify
from filetraverse.pending import FileAck, PendingTasks
from filetraverse.walker import DirectoryWalker, ScandirWalker

logger = logging.getLogger(__name__)

FileHandler = Callable[[Path, FileAck], Optional[Awaitable[Any]]]
DoneHandler = Callable[[], Any]


def _as_list(value: Union[PathInput, Sequence[PathInput], None]) -> List[PathInput]:
    # Accept a single path or a sequence of paths. Empty strings count as missing.
    if value is None or value == "":
        return []
    if isinstance(value, (str, os.PathLike)):
        items = [value]
    else:
        items = list(value)

    for item in items:
        if not isinstance(item, (str, os.PathLike)):
            raise TypeError(f"Expected a path, got {type(item).__name__}: {item!r}")
    return [item for item in items if item != ""]


class FileTraverser:
    """Report every file under a set of roots exactly once.

    Register handlers with ``on_file`` and ``on_done``, then call
    ``traverse()`` from inside a running event loop. Each file handler is
    called with ``(path, ack)`` and must eventually resolve or reject the
    ack, either directly or by returning an awaitable whose outcome settles
    it. ``done`` handlers run once, after every walk has finished and every
    ack has been resolved.
    """

    def __init__(
        self,
        inputs: Union[PathInput, Sequence[PathInput], None],
        *,
        excludes: Union[PathInput, Sequence[PathInput], None] = None,
        scope_to: Optional[str] = None,
        walker: Optional[DirectoryWalker] = None,
    ):
        roots = _as_list(inputs)
        if not roots:
            raise ValueError("You must provide at least one input")

        self.filter = ExclusionFilter(_as_list(excludes), scope_to)
        self.walker: DirectoryWalker = walker or ScandirWalker(prune=self.filter.is_excluded)

        self._files: Set[Path] = set()
        self._dirs: Set[Path] = set()
        self._ledger = DeduplicationLedger()
        self._pending = PendingTasks()
        self._file_handlers: List[FileHandler] = []
        self._done_handlers: List[DoneHandler] = []
        self._handler_tasks: Set["asyncio.Future[None]"] = set()
        self._state = TraversalState.idle
        self._task: Optional["asyncio.Task[TraversalSummary]"] = None
        self.summary = TraversalSummary()

        for root in roots:
            self.add(root)

    @classmethod
    def from_options(cls, opts: TraverserOptions, walker: Optional[DirectoryWalker] = None) -> "FileTraverser":
        return cls(opts.inputs, excludes=opts.excludes, scope_to=opts.scope_to, walker=walker)

    @property
    def state(self) -> TraversalState:
        return self._state

    @property
    def files(self) -> FrozenSet[Path]:
        return frozenset(self._files)

    @property
    def dirs(self) -> FrozenSet[Path]:
        return frozenset(self._dirs)

    @property
    def traversed(self) -> FrozenSet[Path]:
        return frozenset(self._ledger)

    def add(self, path: PathInput) -> PathKind:
        # Classify one root. Absent roots are dropped without error.
        if self._task is not None:
            raise TraverserStateError("Cannot add inputs once traverse() was called")

        canonical = canonicalize(path)
        kind = classify(canonical)
        if kind is PathKind.file:
            self._files.add(canonical)
        elif kind is PathKind.directory:
            self._dirs.add(canonical)
        else:
            logger.debug("Skipping absent input: %s", canonical)
        return kind

    def on_file(self, handler: FileHandler) -> FileHandler:
        self._check_idle("on_file")
        self._file_handlers.append(handler)
        return handler

    def on_done(self, handler: DoneHandler) -> DoneHandler:
        self._check_idle("on_done")
        self._done_handlers.append(handler)
        return handler

    def _check_idle(self, name: str) -> None:
        if self._state is not TraversalState.idle:
            raise TraverserStateError(f"{name}() must be called before traversal starts")

    def traverse(self) -> "asyncio.Task[TraversalSummary]":
        """Schedule the traversal and return its task.

        The task does not start before the event loop gets control back, so
        handlers registered right after this call still see every event.
        """
        if self._task is not None:
            raise TraverserStateError("traverse() may only be called once")

        loop = asyncio.get_running_loop()
        logger.info(
            "Traversing %d file(s) and %d directory(ies)",
            len(self._files),
            len(self._dirs),
        )
        logger.debug("Traversing files: %s", sorted(self._files))
        logger.debug("Traversing directories: %s", sorted(self._dirs))

        self._task = loop.create_task(self._run())
        return self._task

    async def run(self) -> TraversalSummary:
        return await self.traverse()

    async def _run(self) -> TraversalSummary:
        # Give the caller one more turn to register handlers.
        await asyncio.sleep(0)
        self._state = TraversalState.traversing
        self.summary.files = len(self._files)
        self.summary.directories = len(self._dirs)

        try:
            for path in sorted(self._files):
                self._admit(path)

            await self._walk_all()

            self._pending.seal()
            self._state = TraversalState.sealed
            logger.debug("Walks finished; waiting on %d pending file(s)", len(self._pending))

            await self._pending.wait()

            for handler in self._done_handlers:
                handler()
        except BaseException:
            self._state = TraversalState.failed
            self._pending.abandon()
            raise

        self._state = TraversalState.done
        logger.info(
            "Traversal done: %d emitted, %d duplicate, %d excluded, %d out of scope",
            self.summary.emitted,
            self.summary.duplicates,
            self.summary.excluded,
            self.summary.out_of_scope,
        )
        return self.summary

    async def _walk_all(self) -> None:
        tasks = [asyncio.ensure_future(self._walk(root)) for root in sorted(self._dirs)]
        if not tasks:
            return

        try:
            await asyncio.gather(*tasks)
        except BaseException:
            # One failed root fails the traversal; stop the others.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _walk(self, root: Path) -> None:
        if self.filter.is_excluded(root):
            logger.debug("Skipping excluded directory: %s", root)
            return

        try:
            async for path in self.walker.walk(root):
                self._admit(canonicalize(path))
        except WalkError:
            raise
        except Exception as exc:
            raise WalkError(root, exc) from exc

        logger.debug("Finished walking %s", root)

    def _admit(self, path: Path) -> None:
        # Exclusion and scope first, so rejected paths are never claimed.
        if self.filter.is_excluded(path):
            self.summary.excluded += 1
            logger.debug("Skipping excluded: %s", path)
            return
        if not self.filter.in_scope(path):
            self.summary.out_of_scope += 1
            logger.debug("Skipping out of scope: %s", path)
            return

        if not self._ledger.try_claim(path):
            self.summary.duplicates += 1
            logger.debug("Skipping duplicate: %s", path)
            return

        ack = FileAck(path, asyncio.get_running_loop().create_future())
        self._pending.add(ack.future)
        self.summary.emitted += 1
        self.summary.emitted_paths.append(path)

        # Nobody is listening, so nobody will acknowledge.
        if not self._file_handlers:
            ack.resolve()
            return

        for handler in self._file_handlers:
            self._dispatch(handler, path, ack)

    def _dispatch(self, handler: FileHandler, path: Path, ack: FileAck) -> None:
        try:
            result = handler(path, ack)
        except Exception as exc:
            ack.reject(exc)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(self._settle(ack, result))
            self._handler_tasks.add(task)
            task.add_done_callback(self._handler_tasks.discard)

    @staticmethod
    async def _settle(ack: FileAck, awaitable: Awaitable[Any]) -> None:
        try:
            await awaitable
        except asyncio.CancelledError as exc:
            ack.reject(exc)
            raise
        except Exception as exc:
            ack.reject(exc)
        else:
            ack.resolve()


async def collect(
    inputs: Union[PathInput, Sequence[PathInput], None],
    *,
    excludes: Union[PathInput, Sequence[PathInput], None] = None,
    scope_to: Optional[str] = None,
    walker: Optional[DirectoryWalker] = None,
) -> List[Path]:
    # Convenience wrapper for callers that only need the file list.
    traverser = FileTraverser(inputs, excludes=excludes, scope_to=scope_to, walker=walker)
    summary = await traverser.run()
    return sorted(summary.emitted_paths)
