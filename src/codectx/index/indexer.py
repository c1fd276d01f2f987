"""Structural indexing of source files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from codectx.index.patterns import (
    extract_functions,
    extract_includes,
    extract_namespaces,
    extract_types,
)
from codectx.models import FileIndex, FileRecord, ProjectIndex
from codectx.utils.files import read_text

LOGGER = logging.getLogger(__name__)


def index_text(text: str, path: Path) -> FileIndex:
    """Extract a FileIndex from already loaded source text."""
    return FileIndex(
        path=path,
        includes=extract_includes(text),
        functions=extract_functions(text, path),
        types=extract_types(text, path),
        namespaces=extract_namespaces(text),
    )


def index_file(path: Path) -> FileIndex:
    """Index a single file; an unreadable file yields an empty index."""
    path = Path(path)
    try:
        text = read_text(path)
    except OSError as exc:
        LOGGER.warning("Failed to read %s: %s", path, exc)
        return FileIndex(path=path)
    return index_text(text, path)


def build_index(files: Iterable[FileRecord | Path]) -> ProjectIndex:
    """Index every file; keys are exactly the given paths."""
    index: ProjectIndex = {}
    for item in files:
        path = item.path if isinstance(item, FileRecord) else Path(item)
        index[path] = index_file(path)
    return index


@dataclass(slots=True)
class IndexStats:
    files: int = 0
    functions: int = 0
    types: int = 0
    includes: int = 0
    empty: int = 0

    def add(self, file_index: FileIndex) -> None:
        self.files += 1
        self.functions += len(file_index.functions)
        self.types += len(file_index.types)
        self.includes += len(file_index.includes)
        if file_index.is_empty:
            self.empty += 1


def summarize_index(index: ProjectIndex) -> IndexStats:
    stats = IndexStats()
    for file_index in index.values():
        stats.add(file_index)
    return stats
