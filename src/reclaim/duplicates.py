"""Duplicate file detection.

Candidates are narrowed in three passes so that full-content hashing only
runs on files that could still be duplicates:

1. group by exact byte size (singletons dropped)
2. split each size bucket by a SHA-256 of the first few KiB
3. group the survivors by a full-content SHA-256
"""

import hashlib
import logging
from collections import defaultdict
from pathlib import Path
from threading import Event

from reclaim.catalog import DUPLICATE_ROOTS
from reclaim.config import load_settings
from reclaim.errors import HashComputationError
from reclaim.models import DuplicateFile, DuplicateGroup
from reclaim.scanner import home_dir, is_cancelled, iter_files, resolve

log = logging.getLogger(__name__)

MB = 1024 * 1024


def hash_file(path: Path, limit: int | None = None, chunk_size: int = 65536) -> str:
    """
    SHA-256 hex digest of a file's content.

    Args:
        path: File to hash
        limit: Only hash the first limit bytes (whole file when None)
        chunk_size: Read size

    Raises:
        HashComputationError: if the file cannot be read
    """
    hasher = hashlib.sha256()
    remaining = limit
    try:
        with open(path, "rb") as f:
            while remaining is None or remaining > 0:
                size = chunk_size if remaining is None else min(chunk_size, remaining)
                chunk = f.read(size)
                if not chunk:
                    break
                hasher.update(chunk)
                if remaining is not None:
                    remaining -= len(chunk)
    except OSError as e:
        raise HashComputationError(f"Cannot hash file ({e.strerror or e})", path) from e
    return hasher.hexdigest()


def bucket_by_size(
    roots: list[Path],
    min_size_bytes: int,
    cancel: Event | None = None,
) -> dict[int, list[Path]]:
    """
    Walk roots and group candidate files by exact size.

    Buckets keep walk discovery order. Singleton buckets are dropped. A
    file reachable from two roots or hard-linked under two names is only
    counted once, keyed by device and inode.
    """
    buckets: dict[int, list[Path]] = defaultdict(list)
    seen: set[tuple[int, int]] = set()

    for root in roots:
        for path, st in iter_files(root, cancel=cancel):
            if st.st_size < min_size_bytes:
                continue
            inode = (st.st_dev, st.st_ino)
            if inode in seen:
                continue
            seen.add(inode)
            buckets[st.st_size].append(path)

    return {size: paths for size, paths in buckets.items() if len(paths) >= 2}


def _group_by_digest(
    paths: list[Path],
    limit: int | None,
    chunk_size: int,
) -> dict[str, list[Path]]:
    groups: dict[str, list[Path]] = defaultdict(list)
    for path in paths:
        try:
            digest = hash_file(path, limit=limit, chunk_size=chunk_size)
        except HashComputationError as e:
            log.debug("Excluding from duplicate scan: %s", e)
            continue
        groups[digest].append(path)
    return groups


def find_duplicates(
    roots: list[Path],
    min_size_mb: int,
    cancel: Event | None = None,
) -> list[DuplicateGroup]:
    """
    Group files under roots by identical content.

    Args:
        roots: Directories to search together
        min_size_mb: Ignore files smaller than this many MiB
        cancel: Optional event that stops the scan early

    Returns:
        DuplicateGroup list sorted by wasted space descending; within each
        group files keep walk order, so files[0] is the first one found
    """
    settings = load_settings()
    buckets = bucket_by_size(roots, min_size_mb * MB, cancel)
    groups: list[DuplicateGroup] = []

    for size, paths in buckets.items():
        if is_cancelled(cancel):
            break

        prefix_groups = _group_by_digest(paths, settings.partial_hash_size, settings.hash_chunk_size)
        for prefix_digest, candidates in prefix_groups.items():
            if len(candidates) < 2:
                continue

            if size <= settings.partial_hash_size:
                # The prefix already covered the whole file.
                full_groups = {prefix_digest: candidates}
            else:
                full_groups = _group_by_digest(candidates, None, settings.hash_chunk_size)

            for digest, members in full_groups.items():
                if len(members) < 2:
                    continue
                groups.append(
                    DuplicateGroup(
                        hash=digest,
                        file_size=size,
                        files=[DuplicateFile(path=str(p), name=p.name) for p in members],
                    )
                )

    groups.sort(key=lambda g: g.total_wasted, reverse=True)
    log.debug("Found %d duplicate groups", len(groups))
    return groups


def scan_duplicates(directory: str, min_size_mb: int, cancel: Event | None = None) -> list[DuplicateGroup]:
    """Duplicate scan of a single directory."""
    return find_duplicates([resolve(directory, home_dir())], min_size_mb, cancel)


def scan_common_duplicates(min_size_mb: int, cancel: Event | None = None) -> list[DuplicateGroup]:
    """Duplicate scan across the common user data folders, compared together."""
    home = home_dir()
    roots = [resolve(template, home) for template in DUPLICATE_ROOTS]
    return find_duplicates(roots, min_size_mb, cancel)


def total_duplicates_wasted(min_size_mb: int) -> int:
    return sum(g.total_wasted for g in scan_common_duplicates(min_size_mb))
