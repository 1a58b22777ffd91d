# Per-file acknowledgments and the collection that waits on them.
# The collection has two phases: open (accepts futures) and sealed.

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List

from filetraverse.errors import (
    FileHandlingError,
    SealedCollectionError,
    TraverserStateError,
)


class FileAck:
    """Acknowledgment handed to file handlers alongside each path.

    Exactly one of ``resolve`` or ``reject`` should be called once the
    handler is finished with the file. Later calls are ignored.
    """

    def __init__(self, path: Path, future: "asyncio.Future[Path]"):
        self.path = path
        self.future = future

    @property
    def done(self) -> bool:
        return self.future.done()

    def resolve(self) -> None:
        if not self.future.done():
            self.future.set_result(self.path)

    def reject(self, exc: BaseException) -> None:
        if self.future.done():
            return
        if not isinstance(exc, FileHandlingError):
            exc = FileHandlingError(self.path, exc)
        self.future.set_exception(exc)


class PendingTasks:
    def __init__(self) -> None:
        self._futures: List["asyncio.Future[Path]"] = []
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def __len__(self) -> int:
        return len(self._futures)

    def add(self, future: "asyncio.Future[Path]") -> None:
        if self._sealed:
            raise SealedCollectionError("Cannot add a pending task after sealing")
        self._futures.append(future)

    def seal(self) -> None:
        self._sealed = True

    async def wait(self) -> None:
        # The first rejection propagates; gather marks the rest as retrieved.
        if not self._sealed:
            raise TraverserStateError("Pending tasks must be sealed before waiting")
        if self._futures:
            await asyncio.gather(*self._futures)

    def abandon(self) -> None:
        # Called once the traversal has failed. Cancel unsettled acks so late
        # settles are ignored, and retrieve settled rejections so asyncio does
        # not report them as never retrieved.
        self._sealed = True
        for future in self._futures:
            if not future.done():
                future.cancel()
            elif not future.cancelled():
                future.exception()
