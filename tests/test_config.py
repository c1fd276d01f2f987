"""Tests for application configuration."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from codectx.config import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_INCLUDE_EXTENSIONS,
    DEFAULT_STOP_WORDS,
    AnalysisOptions,
    ContextOptions,
    ScanOptions,
)


class TestScanOptions:
    """Test ScanOptions defaults and overrides."""

    def test_defaults(self) -> None:
        """Should scan C/C++ sources recursively honoring .gitignore."""
        options = ScanOptions()

        assert options.include_extensions == DEFAULT_INCLUDE_EXTENSIONS
        assert ".cpp" in options.include_extensions
        assert options.exclude_patterns == DEFAULT_EXCLUDE_PATTERNS
        assert options.respect_ignore_file is True
        assert options.include_parent_ignore_files is False
        assert options.recursive is True

    def test_is_immutable(self) -> None:
        """Should reject attribute assignment."""
        options = ScanOptions()

        with pytest.raises(FrozenInstanceError):
            options.recursive = False  # type: ignore[misc]

    def test_with_overrides(self) -> None:
        """Should return a modified copy and leave the original untouched."""
        options = ScanOptions()
        changed = options.with_overrides(recursive=False)

        assert changed.recursive is False
        assert options.recursive is True


class TestAnalysisOptions:
    """Test AnalysisOptions defaults."""

    def test_defaults(self) -> None:
        """Should default to a 0.3 threshold and all term categories."""
        options = AnalysisOptions()

        assert options.relevance_threshold == 0.3
        assert options.include_function_names is True
        assert options.include_type_names is True
        assert options.include_includes is True
        assert options.min_keyword_length == 3
        assert options.stop_words is DEFAULT_STOP_WORDS

    def test_stop_words_cover_prompt_filler(self) -> None:
        """Common filler words should be ignored."""
        assert {"the", "and", "file", "please"} <= DEFAULT_STOP_WORDS


class TestContextOptions:
    """Test ContextOptions defaults and header rendering."""

    def test_defaults(self) -> None:
        """Should number lines and truncate without relevance selection."""
        options = ContextOptions()

        assert options.max_context_size == 8192
        assert options.include_line_numbers is True
        assert options.truncate_large_files is True
        assert options.exclude_patterns == ()
        assert options.enable_intelligent_selection is False
        assert options.show_relevance_info is False
        assert options.analysis == AnalysisOptions()

    def test_render_header(self) -> None:
        """Should substitute the path placeholder."""
        options = ContextOptions(file_header_format="=== {path} ===\n")

        assert options.render_header("src/a.cpp") == "=== src/a.cpp ===\n"

    def test_default_header(self) -> None:
        """Default header is a comment line naming the file."""
        assert ContextOptions().render_header("a.h") == "// File: a.h\n"

    def test_with_overrides(self) -> None:
        """Should replace nested analysis options."""
        options = ContextOptions().with_overrides(
            analysis=AnalysisOptions(relevance_threshold=0.9), max_context_size=10
        )

        assert options.analysis.relevance_threshold == 0.9
        assert options.max_context_size == 10
