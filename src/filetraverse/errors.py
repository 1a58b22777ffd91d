# Exception types raised by filetraverse.
# Everything the library raises on purpose derives from FileTraverseError,
# except construction mistakes, which use ValueError/TypeError.

from __future__ import annotations

from pathlib import Path


class FileTraverseError(Exception):
    """Base class for traversal failures."""


class WalkError(FileTraverseError):
    """A directory walk could not enumerate its tree."""

    def __init__(self, root: Path, cause: BaseException):
        super().__init__(f"Failed to walk {root}: {cause}")
        self.root = root
        self.cause = cause


class FileHandlingError(FileTraverseError):
    """A file handler rejected the acknowledgment for a path."""

    def __init__(self, path: Path, cause: BaseException):
        super().__init__(f"Handling failed for {path}: {cause}")
        self.path = path
        self.cause = cause


class SealedCollectionError(FileTraverseError):
    """A pending task was added after the collection was sealed."""


class TraverserStateError(FileTraverseError):
    """An operation was attempted in the wrong traversal state."""
