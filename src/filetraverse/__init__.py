# Package initialization for filetraverse.
# Re-exports the traversal API; the CLI lives in filetraverse.cli.

from filetraverse.errors import (
    FileHandlingError,
    FileTraverseError,
    SealedCollectionError,
    TraverserStateError,
    WalkError,
)
from filetraverse.models import PathKind, TraversalState, TraversalSummary, TraverserOptions
from filetraverse.pending import FileAck
from filetraverse.traverser import FileTraverser, collect
from filetraverse.walker import DirectoryWalker, ScandirWalker

__all__ = [
    "__version__",
    "DirectoryWalker",
    "FileAck",
    "FileHandlingError",
    "FileTraverseError",
    "FileTraverser",
    "PathKind",
    "ScandirWalker",
    "SealedCollectionError",
    "TraversalState",
    "TraversalSummary",
    "TraverserOptions",
    "TraverserStateError",
    "WalkError",
    "collect",
]

# Package version.
# This is duplicated in pyproject.toml; keep them in sync.
__version__ = "0.1.0"
