"""Tests for the file-system helpers."""

import os

import pytest

from unitbuild import fs


class TestExistence:
    def test_file_exists(self, tmp_path):
        """file_exists() is True for files only."""
        (tmp_path / "f.txt").write_text("x")
        assert fs.file_exists(tmp_path / "f.txt")
        assert not fs.file_exists(tmp_path)
        assert not fs.file_exists(tmp_path / "missing")

    def test_dir_exists(self, tmp_path):
        """dir_exists() is True for directories only."""
        (tmp_path / "f.txt").write_text("x")
        assert fs.dir_exists(tmp_path)
        assert not fs.dir_exists(tmp_path / "f.txt")
        assert not fs.dir_exists(tmp_path / "missing")


class TestPaths:
    def test_join_skips_empty(self):
        """Empty elements are ignored and the result is normalized."""
        assert fs.join("a", "", "b/../c") == os.path.join("a", "c")

    def test_join_all_empty(self):
        assert fs.join("", "") == ""

    def test_abspath(self, tmp_path, monkeypatch):
        """Relative paths are resolved against the working directory."""
        monkeypatch.chdir(tmp_path)
        assert fs.abspath("x") == os.path.join(os.getcwd(), "x")


class TestDirectories:
    def test_mkdir_all_idempotent(self, tmp_path):
        """mkdir_all() creates parents and accepts existing directories."""
        target = tmp_path / "a" / "b"
        fs.mkdir_all(target)
        fs.mkdir_all(target)
        assert target.is_dir()

    def test_mkdir_requires_parent(self, tmp_path):
        """mkdir() fails when the parent is missing."""
        with pytest.raises(OSError):
            fs.mkdir(tmp_path / "a" / "b")

    def test_make_temp_dir(self, tmp_path):
        """A new, empty directory is created under the given parent."""
        path = fs.make_temp_dir(tmp_path, prefix="build-")
        assert os.path.isdir(path)
        assert os.path.basename(path).startswith("build-")
        assert os.listdir(path) == []

    def test_delete_dirs_ignores_missing(self, tmp_path):
        """Deleting a directory that does not exist is fine."""
        (tmp_path / "out" / "sub").mkdir(parents=True)
        (tmp_path / "out" / "sub" / "f").write_text("x")
        fs.delete_dirs(tmp_path / "out", tmp_path / "missing")
        assert not (tmp_path / "out").exists()


class TestFiles:
    def test_write_and_read(self, tmp_path):
        """write_file() accepts str and bytes; read_file() returns bytes."""
        fs.write_file(tmp_path / "a", "héllo")
        fs.write_file(tmp_path / "b", b"\x00\x01")
        assert fs.read_file(tmp_path / "a") == "héllo".encode("utf-8")
        assert fs.read_file(tmp_path / "b") == b"\x00\x01"

    def test_delete_files_missing_is_error(self, tmp_path):
        """Deleting a missing file raises."""
        with pytest.raises(FileNotFoundError):
            fs.delete_files(tmp_path / "missing")

    def test_copy_file_replaces(self, tmp_path):
        """copy_file() overwrites the destination."""
        (tmp_path / "src").write_text("new")
        (tmp_path / "dst").write_text("old contents")
        fs.copy_file(tmp_path / "dst", tmp_path / "src")
        assert (tmp_path / "dst").read_text() == "new"

    def test_move_file(self, tmp_path):
        """move_file() leaves only the destination."""
        (tmp_path / "src").write_text("data")
        fs.move_file(tmp_path / "dst", tmp_path / "src")
        assert (tmp_path / "dst").read_text() == "data"
        assert not (tmp_path / "src").exists()

    def test_copy_dir_merges(self, tmp_path):
        """copy_dir() copies recursively into an existing destination."""
        src = tmp_path / "assets"
        (src / "img").mkdir(parents=True)
        (src / "file.txt").write_text("a")
        (src / "img" / "logo.png").write_bytes(b"png")
        dst = tmp_path / "bin"
        dst.mkdir()
        (dst / "keep.txt").write_text("keep")
        (dst / "file.txt").write_text("stale")

        fs.copy_dir(dst, src)

        assert (dst / "file.txt").read_text() == "a"
        assert (dst / "img" / "logo.png").read_bytes() == b"png"
        assert (dst / "keep.txt").read_text() == "keep"

    def test_copy_dir_creates_destination(self, tmp_path):
        """A missing destination is created."""
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "f").write_text("x")
        fs.copy_dir(tmp_path / "out" / "deep", tmp_path / "src")
        assert (tmp_path / "out" / "deep" / "f").read_text() == "x"
