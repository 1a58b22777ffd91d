# Shared data models for filetraverse.
# Lives in its own module to avoid circular imports between cli and traverser.

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path as FSPath
from typing import List, Optional, Sequence, Union

PathInput = Union[str, "os.PathLike[str]"]


class PathKind(str, Enum):
    file = "file"
    directory = "directory"
    absent = "absent"


class TraversalState(str, Enum):
    idle = "idle"
    traversing = "traversing"
    sealed = "sealed"
    done = "done"
    failed = "failed"


@dataclass(frozen=True)
class TraverserOptions:
    # Construction configuration for a FileTraverser.
    # inputs and excludes accept a single path or a sequence of paths.
    inputs: Union[PathInput, Sequence[PathInput], None]
    excludes: Union[PathInput, Sequence[PathInput], None] = None
    scope_to: Optional[str] = None


@dataclass
class TraversalSummary:
    # Counters reported once a traversal reaches its terminal state.
    files: int = 0
    directories: int = 0
    emitted: int = 0
    duplicates: int = 0
    excluded: int = 0
    out_of_scope: int = 0
    emitted_paths: List[FSPath] = field(default_factory=list)


@dataclass(frozen=True)
class ListOptions:
    # Options for the command line listing run.
    excludes: List[FSPath]
    scope_to: Optional[str]

    hash_name: Optional[str]
    relative_to: Optional[FSPath]

    summary: bool
