"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

DIRECTIVE_MARKER = "@file"
FORCE_FLAG = "--force"
IGNORE_FILE_NAME = ".gitignore"

DEFAULT_INCLUDE_EXTENSIONS: tuple[str, ...] = (".cpp", ".h", ".hpp", ".cc", ".cxx", ".c")
DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = ("build/*", "vendor/*", "*.pb.cc", "*.pb.h")

# Words that carry no signal when matching a prompt against code identifiers.
DEFAULT_STOP_WORDS: frozenset[str] = frozenset(
    {
        "a", "about", "add", "all", "also", "an", "and", "any", "are", "as", "at",
        "be", "but", "by", "can", "code", "could", "does", "explain", "file", "files",
        "for", "from", "have", "help", "how", "in", "into", "is", "it", "its", "make",
        "me", "my", "need", "not", "of", "on", "or", "please", "should", "show",
        "some", "that", "the", "their", "them", "then", "there", "these", "this",
        "those", "to", "use", "using", "want", "was", "what", "when", "where",
        "which", "why", "will", "with", "would", "you", "your",
    }
)


@dataclass(slots=True, frozen=True)
class ScanOptions:
    include_extensions: tuple[str, ...] = DEFAULT_INCLUDE_EXTENSIONS
    exclude_patterns: tuple[str, ...] = DEFAULT_EXCLUDE_PATTERNS
    respect_ignore_file: bool = True
    include_parent_ignore_files: bool = False
    recursive: bool = True

    def with_overrides(self, **changes) -> ScanOptions:
        return replace(self, **changes)


@dataclass(slots=True, frozen=True)
class AnalysisOptions:
    relevance_threshold: float = 0.3
    include_function_names: bool = True
    include_type_names: bool = True
    include_includes: bool = True
    min_keyword_length: int = 3
    stop_words: frozenset[str] = DEFAULT_STOP_WORDS

    def with_overrides(self, **changes) -> AnalysisOptions:
        return replace(self, **changes)


@dataclass(slots=True, frozen=True)
class ContextOptions:
    """Per-request options for assembling a prompt context.

    ``max_context_size`` is a token budget measured with the fixed
    four-characters-per-token estimate, applied to each inclusion separately.
    """

    max_context_size: int = 8192
    include_line_numbers: bool = True
    file_header_format: str = "// File: {path}\n"
    truncate_large_files: bool = True
    exclude_patterns: tuple[str, ...] = ()
    enable_intelligent_selection: bool = False
    analysis: AnalysisOptions = field(default_factory=AnalysisOptions)
    show_relevance_info: bool = False

    def with_overrides(self, **changes) -> ContextOptions:
        return replace(self, **changes)

    def render_header(self, path: str) -> str:
        return self.file_header_format.replace("{path}", path)
