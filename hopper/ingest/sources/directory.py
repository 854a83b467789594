# hopper/ingest/sources/directory.py
"""
Directory source enumeration.

Walks a tree lazily and yields absolute, normalized paths of matching
files in a stable (sorted) order. File contents are never opened here.
"""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from hopper.exceptions import EnumerationError
from hopper.logging.logger import get_logger
from hopper.logging.tags import INGEST

logger = get_logger(__name__)


def _matches(name: str, patterns: Sequence[str]) -> bool:
    lowered = name.lower()
    return any(fnmatch.fnmatch(lowered, pattern.lower()) for pattern in patterns)


def _walk(root: Path, patterns: Sequence[str]) -> Iterator[Path]:
    def on_error(err: OSError) -> None:
        logger.warning(f"{INGEST} Skipping unreadable directory {err.filename}: {err.strerror}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error, followlinks=False):
        dirnames.sort()
        for name in sorted(filenames):
            full = Path(dirpath) / name
            if full.is_symlink() or not _matches(name, patterns):
                continue
            yield Path(os.path.normpath(full))


def enumerate_files(root: str | Path, patterns: Iterable[str] = ("*.pdf",)) -> Iterator[Path]:
    """
    Recursively list files under `root` matching any of `patterns`.

    Matching is case-insensitive on the file name. Symlinks are not
    followed.

    Raises:
        EnumerationError: root is missing, not a directory, or unreadable.
    """
    patterns = tuple(patterns)
    if not patterns:
        raise EnumerationError("No file patterns given")

    root_path = Path(os.path.abspath(os.path.expanduser(str(root))))
    if not root_path.exists():
        raise EnumerationError(f"Directory not found: {root_path}")
    if not root_path.is_dir():
        raise EnumerationError(f"Not a directory: {root_path}")
    try:
        with os.scandir(root_path):
            pass
    except OSError as e:
        raise EnumerationError(f"Cannot read directory {root_path}: {e}") from e

    return _walk(root_path, patterns)


__all__ = ["enumerate_files"]
