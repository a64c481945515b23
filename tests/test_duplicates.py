"""Tests for duplicate file detection."""

import hashlib
import os
from unittest.mock import patch

import pytest

from conftest import make_file
from reclaim.duplicates import (
    MB,
    bucket_by_size,
    find_duplicates,
    hash_file,
    scan_common_duplicates,
    scan_duplicates,
    total_duplicates_wasted,
)
from reclaim.errors import HashComputationError


class TestHashFile:
    def test_full_digest(self, tmp_path):
        path = make_file(tmp_path / "f", content=b"hello world")
        assert hash_file(path) == hashlib.sha256(b"hello world").hexdigest()

    def test_prefix_digest(self, tmp_path):
        path = make_file(tmp_path / "f", content=b"abcdef")
        assert hash_file(path, limit=3, chunk_size=2) == hashlib.sha256(b"abc").hexdigest()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(HashComputationError):
            hash_file(tmp_path / "missing")


class TestBucketBySize:
    def test_drops_singletons(self, tmp_path):
        make_file(tmp_path / "a", 10)
        make_file(tmp_path / "b", 10)
        make_file(tmp_path / "c", 20)

        buckets = bucket_by_size([tmp_path], 0)

        assert list(buckets) == [10]
        assert [p.name for p in buckets[10]] == ["a", "b"]

    def test_below_minimum_ignored(self, tmp_path):
        make_file(tmp_path / "a", 10)
        make_file(tmp_path / "b", 10)
        assert bucket_by_size([tmp_path], 11) == {}

    def test_same_root_twice_not_double_counted(self, tmp_path):
        make_file(tmp_path / "a", 10)
        assert bucket_by_size([tmp_path, tmp_path], 0) == {}

    def test_hard_links_counted_once(self, tmp_path):
        a = make_file(tmp_path / "a.bin", 2 * MB)
        os.link(a, tmp_path / "b.bin")
        assert bucket_by_size([tmp_path], 0) == {}


class TestFindDuplicates:
    def test_identical_pair_and_distinct_same_size(self, tmp_path):
        size = 2 * MB
        make_file(tmp_path / "A.bin", content=b"X" * size)
        make_file(tmp_path / "B.bin", content=b"X" * size)
        make_file(tmp_path / "C.bin", content=b"Y" * size)

        groups = find_duplicates([tmp_path], min_size_mb=1)

        assert len(groups) == 1
        group = groups[0]
        assert group.file_size == size
        assert [f.name for f in group.files] == ["A.bin", "B.bin"]
        assert group.original.name == "A.bin"
        assert group.total_wasted == size
        assert group.hash == hashlib.sha256(b"X" * size).hexdigest()

    def test_same_prefix_different_tail(self, tmp_path):
        prefix = b"P" * 16384
        make_file(tmp_path / "a", content=prefix + b"1")
        make_file(tmp_path / "b", content=prefix + b"2")
        assert find_duplicates([tmp_path], 0) == []

    def test_small_files_use_prefix_digest(self, tmp_path):
        make_file(tmp_path / "a", content=b"same")
        make_file(tmp_path / "b", content=b"same")
        make_file(tmp_path / "c", content=b"same")

        groups = find_duplicates([tmp_path], 0)

        assert len(groups) == 1
        assert groups[0].total_wasted == 8

    def test_groups_sorted_by_wasted(self, tmp_path):
        make_file(tmp_path / "s1", content=b"s" * 10)
        make_file(tmp_path / "s2", content=b"s" * 10)
        make_file(tmp_path / "l1", content=b"l" * 100)
        make_file(tmp_path / "l2", content=b"l" * 100)

        groups = find_duplicates([tmp_path], 0)

        assert [g.file_size for g in groups] == [100, 10]

    def test_cross_root_duplicates(self, tmp_path):
        make_file(tmp_path / "one" / "a", content=b"dup")
        make_file(tmp_path / "two" / "b", content=b"dup")

        groups = find_duplicates([tmp_path / "one", tmp_path / "two"], 0)

        assert [f.name for f in groups[0].files] == ["a", "b"]

    def test_unreadable_file_excluded(self, tmp_path):
        make_file(tmp_path / "a", content=b"dup")
        make_file(tmp_path / "b", content=b"dup")
        make_file(tmp_path / "c", content=b"dup")
        real_hash = hash_file

        def flaky(path, limit=None, chunk_size=65536):
            if path.name == "b":
                raise HashComputationError("Cannot hash file", path)
            return real_hash(path, limit, chunk_size)

        with patch("reclaim.duplicates.hash_file", side_effect=flaky):
            groups = find_duplicates([tmp_path], 0)

        assert [f.name for f in groups[0].files] == ["a", "c"]

    def test_hard_link_is_not_a_duplicate(self, tmp_path):
        a = make_file(tmp_path / "a.bin", 2 * MB)
        os.link(a, tmp_path / "b.bin")

        assert find_duplicates([tmp_path], 1) == []

    def test_no_duplicates(self, tmp_path):
        make_file(tmp_path / "a", content=b"one")
        assert find_duplicates([tmp_path], 0) == []


class TestScanDuplicates:
    def test_single_directory(self, fake_home):
        make_file(fake_home / "Downloads" / "x.pdf", content=b"doc" * 10)
        make_file(fake_home / "Downloads" / "copy of x.pdf", content=b"doc" * 10)

        groups = scan_duplicates("~/Downloads", 0)

        assert [f.name for f in groups[0].files] == ["copy of x.pdf", "x.pdf"]

    def test_common_roots_compared_together(self, fake_home):
        make_file(fake_home / "Desktop" / "a.jpg", content=b"img" * 100)
        make_file(fake_home / "Pictures" / "a.jpg", content=b"img" * 100)
        make_file(fake_home / "Music" / "a.jpg", content=b"img" * 100)

        groups = scan_common_duplicates(0)

        assert len(groups) == 1
        assert len(groups[0].files) == 2
        assert total_duplicates_wasted(0) == 300
