# tests/test_mapping.py
"""
Tests for docsync.sync.mapping module.
"""

from pathlib import Path

import pytest

from docsync.sync.mapping import canonical_path, find_collisions, output_path


class TestOutputPath:
    """Tests for output_path."""

    def test_top_level_file(self, tmp_path: Path):
        src_root = tmp_path / "src"
        out_root = tmp_path / "out"

        result = output_path(src_root / "a.txt", src_root, out_root)

        assert result == out_root / "a.md"

    def test_nested_file_keeps_structure(self, tmp_path: Path):
        src_root = tmp_path / "src"
        out_root = tmp_path / "out"

        result = output_path(src_root / "b" / "c.csv", src_root, out_root)

        assert result == out_root / "b" / "c.md"

    def test_custom_target_ext(self, tmp_path: Path):
        result = output_path(tmp_path / "s" / "x.txt", tmp_path / "s", tmp_path / "o", ".html")

        assert result == tmp_path / "o" / "x.html"

    def test_only_last_extension_replaced(self, tmp_path: Path):
        result = output_path(tmp_path / "s" / "archive.tar.txt", tmp_path / "s", tmp_path / "o")

        assert result.name == "archive.tar.md"

    def test_outside_root_raises(self, tmp_path: Path):
        with pytest.raises(ValueError):
            output_path(tmp_path / "elsewhere" / "a.txt", tmp_path / "src", tmp_path / "out")

    def test_unnormalized_paths(self, tmp_path: Path):
        src_root = tmp_path / "src"
        messy = f"{src_root}/sub/../a.txt"

        assert output_path(messy, src_root, tmp_path / "out") == tmp_path / "out" / "a.md"


class TestCanonicalPath:
    """Tests for canonical_path."""

    def test_equivalent_spellings_match(self, tmp_path: Path):
        assert canonical_path(tmp_path / "a" / ".." / "b.txt") == canonical_path(tmp_path / "b.txt")

    def test_relative_becomes_absolute(self):
        assert Path(canonical_path("x.txt")).is_absolute()


class TestFindCollisions:
    """Tests for find_collisions."""

    def test_reports_same_stem_different_extension(self, tmp_path: Path):
        src = tmp_path / "src"
        out = tmp_path / "out"
        paths = [src / "report.csv", src / "report.txt", src / "other.txt"]

        collisions = find_collisions(paths, src, out)

        assert list(collisions) == [out / "report.md"]
        assert collisions[out / "report.md"] == sorted(
            [canonical_path(src / "report.csv"), canonical_path(src / "report.txt")]
        )

    def test_no_collisions(self, tmp_path: Path):
        src = tmp_path / "src"
        paths = [src / "a.txt", src / "sub" / "a.txt"]

        assert find_collisions(paths, src, tmp_path / "out") == {}
