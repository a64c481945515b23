"""Deletion execution with safety checks for reclaim.

Every operation takes a single path, re-validates it and reports a
DeleteResult; nothing here raises for a vanished or undeletable path.
"""

import logging
import os
import shutil
from pathlib import Path
from threading import Event
from typing import Callable, Iterable, Iterator

from send2trash import send2trash

from reclaim.catalog import (
    BLOCKED_PATHS,
    CACHE_ROOTS,
    DEVELOPER_CACHES,
    DOCKER_CACHE,
    LEFTOVER_ROOTS,
)
from reclaim.config import load_settings
from reclaim.errors import PathGoneError, PermissionDeniedError, ReclaimError
from reclaim.models import BatchProgress, BatchSummary, DeleteOutcome, DeleteResult
from reclaim.scanner import configured_home, expand_path, is_cancelled, path_size, resolve

log = logging.getLogger(__name__)

DOCKER_MARKER = "com.docker.docker"

DeleteOperation = Callable[[str], DeleteResult]

# Permanent deletes are confined to what the matching scan can report.
CACHE_DELETE_ROOTS = tuple(root.path for root in CACHE_ROOTS)
ORPHAN_DELETE_ROOTS = tuple(template for template, _ in LEFTOVER_ROOTS)
DEVELOPER_CACHE_PATHS = tuple(spec.path for spec in DEVELOPER_CACHES) + (DOCKER_CACHE.path,)


class RefusedError(ReclaimError):
    """The path is not allowed to be deleted."""


def _normalize(path: Path) -> set[str]:
    return {os.path.abspath(path), os.path.realpath(path)}


def is_path_safe(path: Path) -> bool:
    """
    Check if a path may be deleted.

    Blocked locations (home, top-level user folders, system roots) may not
    be deleted themselves; their children may. Configured protected paths
    are refused together with everything below them.

    Args:
        path: Path to check

    Returns:
        True if safe to delete, False otherwise
    """
    home = configured_home()
    candidates = _normalize(path)

    if candidates & _normalize(Path.home()):
        return False

    for blocked in BLOCKED_PATHS:
        if candidates & _normalize(resolve(blocked, home)):
            return False

    for protected in load_settings().protected_paths:
        for protected_str in _normalize(expand_path(protected)):
            for candidate in candidates:
                if candidate == protected_str or candidate.startswith(protected_str.rstrip("/") + "/"):
                    return False

    return True


def is_inside_allowed_path(path: Path, roots: Iterable[str], exact: bool = False) -> bool:
    """
    Check if path is inside one of the catalog roots an operation owns.

    Args:
        path: Path to check
        roots: Catalog path templates (``~`` resolves to the scanned home)
        exact: Require path to be one of the roots rather than below one

    Returns:
        True if path is inside allowed locations
    """
    home = configured_home()
    candidates = _normalize(path)

    for root in roots:
        for root_str in _normalize(resolve(root, home)):
            for candidate in candidates:
                if exact and candidate == root_str:
                    return True
                if not exact and candidate.startswith(root_str.rstrip("/") + "/"):
                    return True

    return False


def _validate(path_str: str, roots: Iterable[str] | None = None, exact: bool = False) -> Path:
    path = expand_path(path_str)
    if not os.path.lexists(path):
        raise PathGoneError("Path no longer exists", path)
    if not is_path_safe(path):
        raise RefusedError("Refusing to delete protected path", path)
    if roots is not None and not is_inside_allowed_path(path, roots, exact):
        raise RefusedError("Path is outside the locations this operation may delete", path)
    return path


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def _execute(
    path_str: str,
    action: Callable[[Path], DeleteOutcome],
    roots: Iterable[str] | None = None,
    exact: bool = False,
) -> DeleteResult:
    """Validate path_str, run action on it and translate errors into a result."""
    try:
        path = _validate(path_str, roots, exact)
        size = path_size(path)
        outcome = action(path)
    except PathGoneError as e:
        log.info("%s", e)
        return DeleteResult(path=path_str, success=False, outcome=DeleteOutcome.NOT_FOUND, error=str(e))
    except RefusedError as e:
        log.warning("%s", e)
        return DeleteResult(path=path_str, success=False, outcome=DeleteOutcome.REFUSED, error=str(e))
    except FileNotFoundError as e:
        # Vanished between validation and removal.
        error = PathGoneError("Path no longer exists", e.filename or path_str)
        return DeleteResult(path=path_str, success=False, outcome=DeleteOutcome.NOT_FOUND, error=str(error))
    except PermissionError as e:
        error = PermissionDeniedError(f"Permission denied ({e.strerror or e})", path_str)
        log.warning("%s", error)
        return DeleteResult(
            path=path_str, success=False, outcome=DeleteOutcome.PERMISSION_DENIED, error=str(error)
        )
    except OSError as e:
        log.warning("Delete failed for %s: %s", path_str, e)
        return DeleteResult(path=path_str, success=False, outcome=DeleteOutcome.FAILED, error=f"OS error: {e}")

    log.info("%s %s (%d bytes)", outcome.value, path_str, size)
    return DeleteResult(path=path_str, success=True, outcome=outcome, bytes_freed=size)


def _delete_permanently(path: Path) -> DeleteOutcome:
    _remove(path)
    return DeleteOutcome.DELETED


def _move_to_trash(path: Path) -> DeleteOutcome:
    send2trash(str(path))
    return DeleteOutcome.TRASHED


def _empty_directory(path: Path) -> DeleteOutcome:
    if DOCKER_MARKER in str(path):
        raise RefusedError(
            "Use 'docker system prune' or Docker Desktop to clean Docker data", path
        )
    if not path.is_dir():
        raise RefusedError("Developer cache is not a directory", path)
    with os.scandir(path) as entries:
        children = [Path(e.path) for e in entries]
    for child in children:
        _remove(child)
    return DeleteOutcome.DELETED


def delete_cache(path: str) -> DeleteResult:
    """Permanently delete a cache entry."""
    return _execute(path, _delete_permanently, CACHE_DELETE_ROOTS)


def clean_developer_cache(path: str) -> DeleteResult:
    """Empty a developer cache directory, keeping the directory itself."""
    return _execute(path, _empty_directory, DEVELOPER_CACHE_PATHS, exact=True)


def delete_orphan(path: str) -> DeleteResult:
    """Permanently delete leftover application data."""
    return _execute(path, _delete_permanently, ORPHAN_DELETE_ROOTS)


def delete_large_app_data(path: str) -> DeleteResult:
    """Move a large application data folder to the trash."""
    return _execute(path, _move_to_trash)


def move_file_to_trash(path: str) -> DeleteResult:
    """Move a large file to the trash."""
    return _execute(path, _move_to_trash)


def move_duplicate_to_trash(path: str) -> DeleteResult:
    """Move a duplicate copy to the trash."""
    return _execute(path, _move_to_trash)


DELETE_OPERATIONS: dict[str, DeleteOperation] = {
    "caches": delete_cache,
    "developer": clean_developer_cache,
    "orphans": delete_orphan,
    "app_data": delete_large_app_data,
    "large_files": move_file_to_trash,
    "duplicates": move_duplicate_to_trash,
}


# =============================================================================
# Batch deletion
# =============================================================================


def iter_batch_delete(
    paths: list[str],
    operation: DeleteOperation,
    names: dict[str, str] | None = None,
    cancel: Event | None = None,
) -> Iterator[BatchProgress]:
    """
    Delete paths one at a time, yielding progress after each.

    A failed item does not stop the batch. Cancellation is checked before
    each item.

    Args:
        paths: Paths to delete, in order
        operation: Single-path delete operation
        names: Optional display names keyed by path
        cancel: Optional event that stops before the next item

    Yields:
        BatchProgress for each completed item
    """
    total = len(paths)
    for index, path in enumerate(paths, start=1):
        if is_cancelled(cancel):
            log.info("Batch cancelled after %d of %d items", index - 1, total)
            return
        result = operation(path)
        item = (names or {}).get(path) or Path(path).name or path
        yield BatchProgress(index=index, total=total, item=item, path=path, result=result)


def run_batch_delete(
    paths: list[str],
    operation: DeleteOperation,
    names: dict[str, str] | None = None,
    progress_callback: Callable[[BatchProgress], None] | None = None,
    cancel: Event | None = None,
) -> BatchSummary:
    """
    Run a serial batch delete and aggregate the outcome.

    Returns:
        BatchSummary with per-item results and success/failure counts
    """
    results = []
    for progress in iter_batch_delete(paths, operation, names, cancel):
        results.append(progress.result)
        if progress_callback:
            progress_callback(progress)

    return BatchSummary(results=results, cancelled=len(results) < len(paths))
