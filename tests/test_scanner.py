"""Tests for filesystem walking helpers."""

import os
from pathlib import Path
from threading import Event
from unittest.mock import patch

import pytest

from conftest import make_file
from reclaim.errors import ScanRootUnavailableError
from reclaim.scanner import (
    get_directory_size,
    get_disk_usage,
    get_system_info,
    home_dir,
    iter_files,
    list_children,
    path_size,
    resolve,
)


class TestHomeDir:
    def test_uses_env_home(self, fake_home):
        assert home_dir() == fake_home

    def test_missing_home_raises(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RECLAIM_HOME", str(tmp_path / "nope"))
        monkeypatch.setenv("RECLAIM_CONFIG", str(tmp_path / "config.json"))
        with pytest.raises(ScanRootUnavailableError):
            home_dir()


class TestResolve:
    def test_tilde(self, tmp_path):
        assert resolve("~", tmp_path) == tmp_path

    def test_tilde_subpath(self, tmp_path):
        assert resolve("~/Library/Caches", tmp_path) == tmp_path / "Library" / "Caches"

    def test_absolute(self, tmp_path):
        assert resolve("/Library/Caches", tmp_path) == Path("/Library/Caches")


class TestGetDirectorySize:
    def test_counts_files_and_dirs(self, tmp_path):
        make_file(tmp_path / "a.txt", 100)
        make_file(tmp_path / "sub" / "b.txt", 50)

        total, files, dirs = get_directory_size(tmp_path)

        assert total == 150
        assert files == 2
        assert dirs == 1

    def test_does_not_follow_symlinks(self, tmp_path):
        target = make_file(tmp_path / "outside" / "big.bin", 1000)
        root = tmp_path / "root"
        root.mkdir()
        os.symlink(target.parent, root / "link")

        assert get_directory_size(root)[0] == 0

    def test_missing_directory(self, tmp_path):
        assert get_directory_size(tmp_path / "missing") == (0, 0, 0)

    def test_cancelled_before_start(self, tmp_path):
        make_file(tmp_path / "a.txt", 100)
        cancel = Event()
        cancel.set()
        assert get_directory_size(tmp_path, cancel=cancel)[0] == 0


class TestPathSize:
    def test_file(self, tmp_path):
        assert path_size(make_file(tmp_path / "f", 42)) == 42

    def test_missing(self, tmp_path):
        assert path_size(tmp_path / "missing") == 0


class TestListChildren:
    def test_sorted(self, tmp_path):
        for name in ("b", "a", "c"):
            (tmp_path / name).mkdir()
        assert [e.name for e in list_children(tmp_path)] == ["a", "b", "c"]

    def test_missing_root(self, tmp_path):
        assert list_children(tmp_path / "missing") == []

    def test_unreadable_root(self, tmp_path):
        with patch("reclaim.scanner.os.scandir", side_effect=PermissionError("denied")):
            assert list_children(tmp_path) == []


class TestIterFiles:
    def test_depth_first_name_order(self, tmp_path):
        make_file(tmp_path / "b.txt", 1)
        make_file(tmp_path / "a" / "z.txt", 1)
        make_file(tmp_path / "a" / "y.txt", 1)

        names = [p.relative_to(tmp_path).as_posix() for p, _ in iter_files(tmp_path)]

        assert names == ["a/y.txt", "a/z.txt", "b.txt"]

    def test_skips_hidden(self, tmp_path):
        make_file(tmp_path / ".hidden", 1)
        make_file(tmp_path / ".git" / "config", 1)
        make_file(tmp_path / "shown", 1)

        assert [p.name for p, _ in iter_files(tmp_path)] == ["shown"]

    def test_includes_hidden_when_asked(self, tmp_path):
        make_file(tmp_path / ".hidden", 1)
        assert [p.name for p, _ in iter_files(tmp_path, skip_hidden=False)] == [".hidden"]


class TestSystemInfo:
    def test_disk_usage_consistent(self):
        usage = get_disk_usage("/")
        assert usage.total_bytes >= usage.free_bytes
        assert usage.used_bytes == usage.total_bytes - usage.free_bytes

    def test_disk_usage_unreadable(self):
        with patch("reclaim.scanner.shutil.disk_usage", side_effect=OSError("boom")):
            usage = get_disk_usage("/nowhere")
        assert usage.total_bytes == 0
        assert usage.mount_point == "/nowhere"

    def test_system_info_reports_home(self, fake_home):
        info = get_system_info()
        assert info.home_directory == str(fake_home)
        assert info.username
        assert info.hostname


class TestUnreadableSubtree:
    def _scandir_denying(self, name):
        real_scandir = os.scandir

        def scandir(path):
            if Path(path).name == name:
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        return scandir

    def test_directory_size_skips_subtree(self, tmp_path):
        make_file(tmp_path / "ok" / "a", 10)
        make_file(tmp_path / "locked" / "b", 1000)

        with patch("reclaim.scanner.os.scandir", side_effect=self._scandir_denying("locked")):
            total, files, _ = get_directory_size(tmp_path)

        assert total == 10
        assert files == 1

    def test_iter_files_skips_subtree(self, tmp_path):
        make_file(tmp_path / "locked" / "b", 1)
        make_file(tmp_path / "z.txt", 1)

        with patch("reclaim.scanner.os.scandir", side_effect=self._scandir_denying("locked")):
            names = [p.name for p, _ in iter_files(tmp_path)]

        assert names == ["z.txt"]
