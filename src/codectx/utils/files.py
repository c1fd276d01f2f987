"""Utility helpers for working with files."""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Iterable


def read_text(path: Path) -> str:
    """Read a source file as UTF-8, replacing undecodable bytes."""
    with Path(path).open("r", encoding="utf-8", errors="replace", newline="") as handle:
        return handle.read()


def normalize_path(path: Path) -> Path:
    """Lexically normalize a path without touching the filesystem."""
    return Path(os.path.normpath(path))


def relative_posix(path: Path, root: Path) -> str | None:
    """Return ``path`` relative to ``root`` or None when it lies outside."""
    try:
        relative = os.path.relpath(path, root)
    except ValueError:
        # Different drives on Windows.
        return None
    relative = Path(relative).as_posix()
    if relative == ".." or relative.startswith("../"):
        return None
    return relative


def is_within(path: Path, root: Path) -> bool:
    return relative_posix(path, root) is not None


def matches_any(candidates: Iterable[str], patterns: Iterable[str]) -> bool:
    """Exact or glob match of any candidate string against any pattern."""
    names = [candidate for candidate in candidates if candidate]
    for pattern in patterns:
        if not pattern:
            continue
        for name in names:
            if name == pattern or fnmatch.fnmatchcase(name, pattern):
                return True
    return False
