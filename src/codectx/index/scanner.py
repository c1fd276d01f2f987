"""Project directory scanning with exclude globs and ignore-file rules."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Set

from pathspec import GitIgnoreSpec

from codectx.config import IGNORE_FILE_NAME, ScanOptions
from codectx.index.indexer import build_index
from codectx.models import FileRecord, ProjectIndex
from codectx.utils.files import relative_posix

LOGGER = logging.getLogger(__name__)


def parse_ignore_file(path: Path) -> List[str]:
    """Return the patterns of an ignore file, skipping blanks and comments."""
    try:
        lines = Path(path).read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return []

    patterns = []
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        patterns.append(line)
    return patterns


@dataclass(slots=True)
class IgnoreRules:
    """Patterns of one ignore file, anchored at the directory holding it."""

    base: Path
    patterns: List[str]
    spec: GitIgnoreSpec

    @classmethod
    def from_patterns(cls, base: Path, patterns: Sequence[str]) -> IgnoreRules:
        return cls(base=base, patterns=list(patterns), spec=GitIgnoreSpec.from_lines(patterns))

    @classmethod
    def from_file(cls, path: Path) -> IgnoreRules:
        return cls.from_patterns(path.parent, parse_ignore_file(path))

    def matches(self, path: Path, *, is_dir: bool = False) -> bool:
        relative = relative_posix(path, self.base)
        if relative is None or relative == ".":
            return False
        # A trailing slash lets directory-only patterns ("build/") apply.
        if is_dir:
            relative += "/"
        return self.spec.match_file(relative)


def _ancestor_ignore_files(root: Path) -> List[Path]:
    found = []
    if (root / ".git").exists():
        return found
    for parent in root.parents:
        candidate = parent / IGNORE_FILE_NAME
        if candidate.is_file():
            found.append(candidate)
        if (parent / ".git").exists():
            break
    return found


def load_ignore_rules(root: Path, options: ScanOptions) -> List[IgnoreRules]:
    """Collect ignore rules for a scan rooted at ``root``."""
    if not options.respect_ignore_file:
        return []

    rules = []
    root_file = root / IGNORE_FILE_NAME
    if root_file.is_file():
        rules.append(IgnoreRules.from_file(root_file))
    if options.include_parent_ignore_files:
        rules.extend(IgnoreRules.from_file(path) for path in _ancestor_ignore_files(root))
    return [rule for rule in rules if rule.patterns]


def _has_included_extension(name: str, extensions: Sequence[str]) -> bool:
    if not extensions:
        return True
    lower = name.lower()
    return any(lower.endswith(ext.lower()) for ext in extensions)


class _Filter:
    """Exclude/ignore decision for paths below a scan root."""

    def __init__(self, root: Path, options: ScanOptions) -> None:
        self.root = root
        self.exclude_spec = GitIgnoreSpec.from_lines(options.exclude_patterns)
        self.ignore_rules = load_ignore_rules(root, options)

    def is_excluded(self, path: Path, *, is_dir: bool = False) -> bool:
        relative = path.relative_to(self.root).as_posix()
        if is_dir:
            relative += "/"
        if self.exclude_spec.match_file(relative):
            return True
        return any(rule.matches(path, is_dir=is_dir) for rule in self.ignore_rules)


def scan(root: Path, options: ScanOptions | None = None) -> Set[FileRecord]:
    """Return every file under ``root`` eligible for indexing.

    Directories matching an exclude or ignore pattern are not descended into.
    A subdirectory that cannot be listed is logged and skipped.
    """
    options = options or ScanOptions()
    root = Path(os.path.abspath(root))
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    path_filter = _Filter(root, options)
    records: Set[FileRecord] = set()

    def _on_error(error: OSError) -> None:
        LOGGER.warning("Skipping %s: %s", error.filename or root, error.strerror or error)

    for current, dirnames, filenames in os.walk(root, onerror=_on_error):
        current_dir = Path(current)

        if not options.recursive:
            dirnames[:] = []
        else:
            kept = []
            for name in dirnames:
                child = current_dir / name
                if child.is_symlink():
                    continue
                if path_filter.is_excluded(child, is_dir=True):
                    LOGGER.debug("Pruned directory %s", child)
                    continue
                kept.append(name)
            dirnames[:] = kept

        for name in filenames:
            if not _has_included_extension(name, options.include_extensions):
                continue
            path = current_dir / name
            if path.is_symlink() or not path.is_file():
                continue
            if path_filter.is_excluded(path):
                LOGGER.debug("Excluded %s", path)
                continue
            records.add(FileRecord(path=path))

    LOGGER.info("Found %d files under %s", len(records), root)
    return records


class ProjectScanner:
    """Scans a project and builds its structural index on demand."""

    def __init__(self, options: ScanOptions | None = None) -> None:
        self.options = options or ScanOptions()

    def scan(self, root: Path) -> Set[FileRecord]:
        return scan(root, self.options)

    def build_index(self, root: Path) -> ProjectIndex:
        return build_index(self.scan(root))
