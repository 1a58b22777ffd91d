# Path canonicalization and classification for filetraverse.
# Every set the traverser keeps is keyed by the canonical form produced here.
#
# Classification is best effort: anything that cannot be stat'ed is absent.

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from filetraverse.models import PathInput, PathKind

logger = logging.getLogger(__name__)


def canonicalize(path: PathInput) -> Path:
    # Absolute and normalized; symlinks are left in place.
    return Path(os.path.normpath(os.path.abspath(os.fspath(path))))


def classify(path: PathInput) -> PathKind:
    # lstat semantics: a symlink is neither a file nor a directory.
    canonical = canonicalize(path)
    try:
        st = os.lstat(canonical)
    except (OSError, ValueError) as exc:
        logger.debug("Cannot stat %s: %s", canonical, exc)
        return PathKind.absent

    if stat.S_ISREG(st.st_mode):
        return PathKind.file
    if stat.S_ISDIR(st.st_mode):
        return PathKind.directory
    return PathKind.absent
