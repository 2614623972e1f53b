"""Path helpers."""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Iterable


def should_exclude_path(path: Path, patterns: Iterable[str], logger=None) -> bool:
    for pattern in patterns:
        if fnmatch.fnmatch(path.name, pattern):
            return True

    try:
        if path.is_symlink() or os.path.islink(path):
            if logger is not None:
                logger.info(f"SKIPPED_SYMLINK: {path}")
            return True
    except OSError:
        if logger is not None:
            logger.info(f"SKIPPED_SYMLINK: {path}")
        return True

    return False


def numeric_subdirs(parent: Path) -> list[tuple[int, Path]]:
    """Child folders whose name is an integer, newest (largest) first."""
    result: list[tuple[int, Path]] = []
    try:
        entries = list(parent.iterdir())
    except OSError:
        return result
    for entry in entries:
        if not entry.name.isdigit():
            continue
        try:
            if not entry.is_dir():
                continue
        except OSError:
            continue
        result.append((int(entry.name), entry))
    result.sort(key=lambda item: item[0], reverse=True)
    return result
