"""Filesystem walking helpers shared by the reclaim scanners."""

import getpass
import logging
import os
import platform
import shutil
import socket
import subprocess
from pathlib import Path
from threading import Event
from typing import Iterator

from reclaim.config import load_settings
from reclaim.errors import ScanRootUnavailableError, TraversalAccessError
from reclaim.models import DiskUsage, SystemInfo

log = logging.getLogger(__name__)


def expand_path(path: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expanduser(os.path.expandvars(path)))


def configured_home() -> Path:
    """The configured home (or RECLAIM_HOME), falling back to ~. Not validated."""
    settings = load_settings()
    return expand_path(settings.home) if settings.home else Path.home()


def home_dir() -> Path:
    """
    Resolve the home directory to scan.

    Raises:
        ScanRootUnavailableError: if the directory is missing or not a directory
    """
    home = configured_home()

    if not home.is_dir():
        log.warning("Home directory unavailable: %s", home)
        raise ScanRootUnavailableError("Home directory is not accessible", home)
    return home


def resolve(template: str, home: Path) -> Path:
    """Resolve a catalog path template against home."""
    if template == "~":
        return home
    if template.startswith("~/"):
        return home / template[2:]
    return expand_path(template)


def is_cancelled(cancel: Event | None) -> bool:
    return cancel is not None and cancel.is_set()


def get_directory_size(
    path: Path,
    allocated: bool = False,
    cancel: Event | None = None,
) -> tuple[int, int, int]:
    """
    Calculate the total size of a directory.

    Symlinks are never followed. Unreadable entries are skipped.

    Args:
        path: Directory to measure
        allocated: Count allocated disk blocks instead of apparent size
            (correct for sparse files such as VM disk images)
        cancel: Optional event that stops the walk early

    Returns:
        Tuple of (total_bytes, file_count, dir_count)
    """
    total_size = 0
    file_count = 0
    dir_count = 0
    stack = [path]

    while stack:
        if is_cancelled(cancel):
            break
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if entry.is_file(follow_symlinks=False):
                            st = entry.stat(follow_symlinks=False)
                            total_size += _entry_size(st, allocated)
                            file_count += 1
                        elif entry.is_dir(follow_symlinks=False):
                            dir_count += 1
                            stack.append(Path(entry.path))
                    except OSError as e:
                        log.debug("%s", TraversalAccessError(str(e), entry.path))
                        continue
        except OSError as e:
            log.debug("%s", TraversalAccessError(f"Skipping unreadable directory ({e})", current))
            continue

    return total_size, file_count, dir_count


def _entry_size(st: os.stat_result, allocated: bool) -> int:
    if allocated and hasattr(st, "st_blocks"):
        # st_blocks is in 512-byte units
        return st.st_blocks * 512
    return st.st_size


def path_size(path: Path, allocated: bool = False) -> int:
    """Size of a file or directory; 0 if it cannot be read."""
    try:
        if path.is_symlink():
            return 0
        if path.is_dir():
            return get_directory_size(path, allocated=allocated)[0]
        return _entry_size(path.stat(), allocated)
    except OSError:
        return 0


def list_children(root: Path) -> list[os.DirEntry]:
    """
    Top-level entries of root, sorted by name.

    Returns an empty list when root is missing or unreadable.
    """
    try:
        with os.scandir(root) as entries:
            return sorted(entries, key=lambda e: e.name)
    except FileNotFoundError:
        log.debug("Scan root does not exist: %s", root)
        return []
    except OSError as e:
        log.warning("Skipping unreadable scan root %s: %s", root, e)
        return []


def iter_files(
    root: Path,
    skip_hidden: bool = True,
    cancel: Event | None = None,
) -> Iterator[tuple[Path, os.stat_result]]:
    """
    Walk regular files under root in a deterministic order.

    Entries are visited depth-first in name order. Symlinks are not
    followed; hidden files and directories are skipped unless asked.

    Yields:
        (path, stat_result) for each regular file
    """
    try:
        with os.scandir(root) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        log.debug("%s", TraversalAccessError(f"Skipping unreadable directory ({e})", root))
        return

    for entry in entries:
        if is_cancelled(cancel):
            return
        if skip_hidden and entry.name.startswith("."):
            continue
        try:
            if entry.is_dir(follow_symlinks=False):
                yield from iter_files(Path(entry.path), skip_hidden, cancel)
            elif entry.is_file(follow_symlinks=False):
                yield Path(entry.path), entry.stat(follow_symlinks=False)
        except OSError as e:
            log.debug("%s", TraversalAccessError(str(e), entry.path))
            continue


def get_disk_usage(mount_point: str = "/") -> DiskUsage:
    """
    Get overall disk usage for a mount point.

    Args:
        mount_point: Mount point to check (default: /)

    Returns:
        DiskUsage with total, used, and free bytes
    """
    try:
        usage = shutil.disk_usage(mount_point)
    except OSError as e:
        log.warning("Could not read disk usage for %s: %s", mount_point, e)
        return DiskUsage(total_bytes=0, used_bytes=0, free_bytes=0, mount_point=mount_point)

    # Report "used" as everything not available to the user, like statvfs f_bavail.
    return DiskUsage(
        total_bytes=usage.total,
        used_bytes=usage.total - usage.free,
        free_bytes=usage.free,
        mount_point=mount_point,
    )


def _os_version() -> str:
    if platform.system() == "Darwin":
        try:
            result = subprocess.run(
                ["sw_vers", "-productVersion"],
                capture_output=True,
                text=True,
                timeout=5,
            )
            if result.returncode == 0 and result.stdout.strip():
                return f"macOS {result.stdout.strip()}"
        except (OSError, subprocess.TimeoutExpired):
            pass
        return "macOS"
    return f"{platform.system()} {platform.release()}".strip()


def _username() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return os.environ.get("USER", "Unknown")


def get_system_info() -> SystemInfo:
    """Host name, user, home directory and root volume usage."""
    home = configured_home()

    return SystemInfo(
        os_version=_os_version(),
        hostname=socket.gethostname() or "Unknown",
        username=_username(),
        home_directory=str(home),
        disk_usage=get_disk_usage(),
    )
