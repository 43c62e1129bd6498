"""Tests for candidate file discovery."""

from __future__ import annotations

import pytest

from fencefmt.errors import ConfigError
from fencefmt.files import find_files


class TestFindFiles:
    def test_directory_recursive_sorted(self, tmp_path):
        (tmp_path / "b.md").write_text("")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "a.md").write_text("")
        (tmp_path / "skip.txt").write_text("")
        assert find_files(tmp_path) == [tmp_path / "b.md", tmp_path / "sub" / "a.md"]

    def test_custom_pattern(self, tmp_path):
        (tmp_path / "a.md").write_text("")
        (tmp_path / "b.mdx").write_text("")
        assert find_files(tmp_path, "*.mdx") == [tmp_path / "b.mdx"]

    def test_single_file_any_extension(self, tmp_path):
        path = tmp_path / "README.txt"
        path.write_text("")
        assert find_files(path) == [path]

    def test_bad_path(self, tmp_path):
        with pytest.raises(ConfigError, match="Bad path"):
            find_files(tmp_path / "missing")
