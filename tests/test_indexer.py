"""Tests for structural indexing."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from codectx.index.indexer import IndexStats, build_index, index_file, index_text, summarize_index
from codectx.models import FileIndex, FileRecord

SOURCE = """\
#include "config.h"

namespace app {

class Loader {
};

bool load_config(const char* path) {
    return true;
}

}
"""


@pytest.fixture()
def source_file(tmp_path: Path) -> Path:
    path = tmp_path / "loader.cpp"
    path.write_text(SOURCE)
    return path


class TestIndexFile:
    """Test index_file."""

    def test_extracts_structure(self, source_file: Path) -> None:
        index = index_file(source_file)

        assert index.path == source_file
        assert index.includes == ["config.h"]
        assert [function.name for function in index.functions] == ["load_config"]
        assert [declaration.name for declaration in index.types] == ["Loader"]
        assert index.namespaces == ["app"]

    def test_missing_file_gives_empty_index(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """An unreadable file must not fail indexing."""
        missing = tmp_path / "missing.cpp"

        with caplog.at_level(logging.WARNING, logger="codectx.index.indexer"):
            index = index_file(missing)

        assert index == FileIndex(path=missing)
        assert "Failed to read" in caplog.text

    def test_directory_gives_empty_index(self, tmp_path: Path) -> None:
        assert index_file(tmp_path).is_empty

    def test_accepts_string_paths(self, source_file: Path) -> None:
        assert index_file(str(source_file)).path == source_file

    def test_binary_content(self, tmp_path: Path) -> None:
        path = tmp_path / "blob.h"
        path.write_bytes(b"\x00\xff\xfe garbage")

        assert index_file(path).is_empty

    def test_index_text(self) -> None:
        index = index_text(SOURCE, Path("virtual.cpp"))

        assert index.path == Path("virtual.cpp")
        assert index.functions[0].line == 8


class TestBuildIndex:
    """Test build_index."""

    def test_keys_equal_input(self, tmp_path: Path, source_file: Path) -> None:
        other = tmp_path / "other.h"
        other.write_text("struct Other {};\n")

        index = build_index([FileRecord(source_file), FileRecord(other)])

        assert set(index) == {source_file, other}
        assert index[other].types[0].name == "Other"

    def test_accepts_plain_paths(self, source_file: Path) -> None:
        assert set(build_index([source_file])) == {source_file}

    def test_unreadable_files_are_kept(self, tmp_path: Path, source_file: Path) -> None:
        missing = tmp_path / "gone.cpp"

        index = build_index([source_file, missing])

        assert set(index) == {source_file, missing}
        assert index[missing].is_empty

    def test_empty_input(self) -> None:
        assert build_index([]) == {}


class TestIndexStats:
    """Test IndexStats aggregation."""

    def test_init_defaults(self) -> None:
        stats = IndexStats()

        assert stats.files == 0
        assert stats.functions == 0
        assert stats.types == 0
        assert stats.includes == 0
        assert stats.empty == 0

    def test_summarize_index(self, tmp_path: Path, source_file: Path) -> None:
        empty = tmp_path / "empty.h"
        empty.write_text("// nothing here\n")

        stats = summarize_index(build_index([source_file, empty]))

        assert stats.files == 2
        assert stats.functions == 1
        assert stats.types == 1
        assert stats.includes == 1
        assert stats.empty == 1
