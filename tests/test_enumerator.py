# tests/test_enumerator.py
"""Tests for hopper.ingest.sources.directory."""

import os

import pytest

from hopper.exceptions import EnumerationError
from hopper.ingest.sources import enumerate_files


class TestEnumerateFiles:
    def test_recursive_sorted_absolute(self, tmp_path):
        (tmp_path / "b").mkdir()
        (tmp_path / "a").mkdir()
        (tmp_path / "b" / "2.pdf").write_bytes(b"x")
        (tmp_path / "a" / "1.pdf").write_bytes(b"x")
        (tmp_path / "0.pdf").write_bytes(b"x")
        (tmp_path / "notes.txt").write_text("x")

        found = list(enumerate_files(tmp_path, ["*.pdf"]))

        assert [p.name for p in found] == ["0.pdf", "1.pdf", "2.pdf"]
        assert all(p.is_absolute() for p in found)

    def test_case_insensitive_patterns(self, tmp_path):
        (tmp_path / "UPPER.PDF").write_bytes(b"x")
        assert len(list(enumerate_files(tmp_path, ["*.pdf"]))) == 1

    def test_multiple_patterns(self, tmp_path):
        for name in ("a.pdf", "b.docx", "c.txt", "d.exe"):
            (tmp_path / name).write_bytes(b"x")
        found = {p.name for p in enumerate_files(tmp_path, ["*.pdf", "*.docx", "*.txt"])}
        assert found == {"a.pdf", "b.docx", "c.txt"}

    def test_relative_root_normalized(self, tmp_path, monkeypatch):
        (tmp_path / "docs").mkdir()
        (tmp_path / "docs" / "a.pdf").write_bytes(b"x")
        monkeypatch.chdir(tmp_path)

        found = list(enumerate_files("./docs/../docs", ["*.pdf"]))

        assert [str(p) for p in found] == [os.path.join(str(tmp_path), "docs", "a.pdf")]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinks_not_followed(self, tmp_path):
        real = tmp_path / "real.pdf"
        real.write_bytes(b"x")
        (tmp_path / "link.pdf").symlink_to(real)

        assert [p.name for p in enumerate_files(tmp_path, ["*.pdf"])] == ["real.pdf"]

    def test_empty_directory(self, tmp_path):
        assert list(enumerate_files(tmp_path, ["*.pdf"])) == []

    def test_missing_root(self, tmp_path):
        with pytest.raises(EnumerationError, match="not found"):
            enumerate_files(tmp_path / "missing", ["*.pdf"])

    def test_root_is_file(self, tmp_path):
        path = tmp_path / "a.pdf"
        path.write_bytes(b"x")
        with pytest.raises(EnumerationError, match="Not a directory"):
            enumerate_files(path, ["*.pdf"])
