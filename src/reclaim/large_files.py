"""Large file and large application data scanning."""

import logging
from pathlib import Path
from threading import Event

from reclaim.catalog import COMMON_DATA_ROOTS, LARGE_APP_DATA_ROOTS, category_for_extension
from reclaim.config import load_settings
from reclaim.models import FileCategory, LargeAppData, LargeFile
from reclaim.scanner import (
    get_directory_size,
    home_dir,
    is_cancelled,
    iter_files,
    list_children,
    resolve,
)

log = logging.getLogger(__name__)

MB = 1024 * 1024


def _large_files_in(
    root: Path,
    min_size_bytes: int,
    categories: set[FileCategory] | None,
    seen: set[tuple[int, int]],
    cancel: Event | None,
) -> list[LargeFile]:
    found: list[LargeFile] = []

    for path, st in iter_files(root, cancel=cancel):
        if st.st_size < min_size_bytes:
            continue

        inode = (st.st_dev, st.st_ino)
        if inode in seen:
            continue
        seen.add(inode)

        extension = path.suffix[1:].lower() if path.suffix else ""
        category = category_for_extension(extension)
        if categories is not None and category not in categories:
            continue

        found.append(
            LargeFile(
                path=str(path),
                name=path.name,
                size=st.st_size,
                category=category,
                last_modified=int(st.st_mtime),
                extension=extension,
            )
        )

    return found


def scan_large_files(
    directory: str,
    min_size_mb: int,
    categories: list[FileCategory] | None = None,
    cancel: Event | None = None,
) -> list[LargeFile]:
    """
    Find files of at least min_size_mb MiB under one directory.

    Args:
        directory: Directory to walk (may contain ~)
        min_size_mb: Threshold in MiB (1 MiB = 1,048,576 bytes)
        categories: Only report these categories (all when None)
        cancel: Optional event that stops the walk early

    Returns:
        LargeFile list sorted by size descending
    """
    root = resolve(directory, home_dir())
    wanted = set(categories) if categories is not None else None
    files = _large_files_in(root, min_size_mb * MB, wanted, set(), cancel)
    files.sort(key=lambda f: f.size, reverse=True)
    return files


def scan_common_large_files(min_size_mb: int, cancel: Event | None = None) -> list[LargeFile]:
    """
    Find large files across the common user data folders.

    A file reachable from more than one root, or hard-linked under several
    names, is reported once.

    Returns:
        LargeFile list sorted by size descending
    """
    home = home_dir()
    seen: set[tuple[int, int]] = set()
    files: list[LargeFile] = []

    for template in COMMON_DATA_ROOTS:
        if is_cancelled(cancel):
            break
        files.extend(_large_files_in(resolve(template, home), min_size_mb * MB, None, seen, cancel))

    files.sort(key=lambda f: f.size, reverse=True)
    log.debug("Found %d files >= %d MB", len(files), min_size_mb)
    return files


def scan_large_app_data(limit: int | None = None, cancel: Event | None = None) -> list[LargeAppData]:
    """
    Largest immediate subfolders of the heavy application data roots.

    Hidden folders and folders below the configured minimum are skipped.
    Sizes count allocated disk blocks.

    Args:
        limit: Number of folders to return (configured default when None)

    Returns:
        LargeAppData list sorted by size descending

    Raises:
        ValueError: if limit is less than 1
    """
    if limit is not None and limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    settings = load_settings()
    limit = limit if limit is not None else settings.large_app_data_limit
    home = home_dir()
    folders: list[LargeAppData] = []

    for root in LARGE_APP_DATA_ROOTS:
        for entry in list_children(resolve(root.path, home)):
            if is_cancelled(cancel):
                break
            if entry.name.startswith("."):
                continue
            try:
                if not entry.is_dir(follow_symlinks=False):
                    continue
            except OSError:
                continue

            size, _, _ = get_directory_size(Path(entry.path), allocated=True, cancel=cancel)
            if size <= settings.large_app_data_min_bytes:
                continue

            folders.append(
                LargeAppData(path=entry.path, name=entry.name, size=size, location=root.label)
            )

    folders.sort(key=lambda f: f.size, reverse=True)
    return folders[:limit]
