# Admission filtering and deduplication for filetraverse.
# Both classes operate on canonical paths only; callers canonicalize first.

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Iterator, Optional, Set

from filetraverse.models import PathInput
from filetraverse.paths import canonicalize


class ExclusionFilter:
    # Exclusion set plus an optional scope prefix.
    # A path is admitted only when both checks pass.
    def __init__(self, excludes: Iterable[PathInput] = (), scope_to: Optional[str] = None):
        self.excludes = frozenset(canonicalize(p) for p in excludes)
        self.scope = re.compile("^" + re.escape(scope_to)) if scope_to else None

    def is_excluded(self, path: Path) -> bool:
        # Excluding a directory excludes everything beneath it.
        if not self.excludes:
            return False
        if path in self.excludes:
            return True
        return any(parent in self.excludes for parent in path.parents)

    def in_scope(self, path: Path) -> bool:
        if self.scope is None:
            return True
        return self.scope.match(str(path)) is not None

    def admits(self, path: Path) -> bool:
        return not self.is_excluded(path) and self.in_scope(path)


class DeduplicationLedger:
    """Canonical paths already emitted during one traversal.

    ``try_claim`` is a check-and-set. It is only called from the event loop
    thread, so no two coroutines can claim the same path.
    """

    def __init__(self) -> None:
        self._claimed: Set[Path] = set()

    def try_claim(self, path: Path) -> bool:
        if path in self._claimed:
            return False
        self._claimed.add(path)
        return True

    def __contains__(self, path: object) -> bool:
        return path in self._claimed

    def __len__(self) -> int:
        return len(self._claimed)

    def __iter__(self) -> Iterator[Path]:
        return iter(self._claimed)
