"""Core codectx data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List


@dataclass(slots=True, frozen=True)
class FileRecord:
    """A regular file discovered by the scanner."""

    path: Path

    def relative_to(self, root: Path) -> str:
        return self.path.relative_to(root).as_posix()


@dataclass(slots=True)
class FunctionSignature:
    """Function definition extracted from source text (best-effort)."""

    name: str
    return_type: str
    parameters: List[str]
    file_path: Path
    line: int


@dataclass(slots=True)
class TypeDeclaration:
    """Class or struct definition extracted from source text (best-effort)."""

    name: str
    base_types: List[str]
    file_path: Path
    line: int


@dataclass(slots=True)
class FileIndex:
    """Structural metadata for a single file."""

    path: Path
    includes: List[str] = field(default_factory=list)
    functions: List[FunctionSignature] = field(default_factory=list)
    types: List[TypeDeclaration] = field(default_factory=list)
    namespaces: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.includes or self.functions or self.types or self.namespaces)

    @property
    def major_elements(self) -> int:
        return len(self.functions) + len(self.types)


ProjectIndex = Dict[Path, FileIndex]


@dataclass(slots=True, frozen=True)
class KeywordMatch:
    """A prompt keyword paired with the file term it matched."""

    keyword: str
    term: str
    kind: str

    def __str__(self) -> str:
        return f"{self.keyword} ({self.kind} match: {self.term})"


@dataclass(slots=True)
class RelevanceScore:
    score: float = 0.0
    reason: str = "No relevance found"
    matched_keywords: List[KeywordMatch] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class FileInclusion:
    """A file directive found in a prompt; ``end`` is exclusive."""

    file_path: str
    start: int
    end: int
    full_match: str
    force: bool = False
