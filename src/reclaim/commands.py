"""Request/response command surface.

The presentation layer talks to the engine only through ``invoke``. Every
call returns a CommandResult; whole-command failures (an unavailable scan
root, unknown command, bad parameters, a failed delete) come back with
``ok=False`` and a human-readable ``error``.
"""

import logging
import os
import platform
import subprocess
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import ConfigDict, ValidationError, validate_call

from reclaim import caches, cleaner, developer, duplicates, large_files, orphans
from reclaim.apps import scan_installed_apps
from reclaim.errors import ReclaimError, ScanRootUnavailableError
from reclaim.models import CommandResult, DeleteOutcome, DeleteResult
from reclaim.scanner import expand_path, get_disk_usage, get_system_info

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    name: str
    handler: Callable[..., Any]
    description: str


def _min_size(min_size_mb: int) -> int:
    if isinstance(min_size_mb, bool) or not isinstance(min_size_mb, int) or min_size_mb < 0:
        raise ValueError(f"min_size_mb must be a non-negative integer, got {min_size_mb!r}")
    return min_size_mb


def reveal_in_finder(path: str) -> DeleteResult:
    """Ask the desktop file browser to show path."""
    target = expand_path(path)
    if not os.path.lexists(target):
        return DeleteResult(
            path=path,
            success=False,
            outcome=DeleteOutcome.NOT_FOUND,
            error=f"Path no longer exists: {path}",
        )

    if platform.system() == "Darwin":
        cmd = ["open", "-R", str(target)]
    else:
        cmd = ["xdg-open", str(target if target.is_dir() else target.parent)]

    try:
        subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError as e:
        return DeleteResult(
            path=path,
            success=False,
            outcome=DeleteOutcome.FAILED,
            error=f"Failed to open file browser: {e}",
        )
    return DeleteResult(path=path, success=True, outcome=DeleteOutcome.REVEALED)


def format_bytes(bytes: int) -> str:
    """Binary-unit size string with two decimals (e.g. "1.50 GB")."""
    kb = 1024
    mb = kb * 1024
    gb = mb * 1024
    tb = gb * 1024

    if bytes >= tb:
        return f"{bytes / tb:.2f} TB"
    elif bytes >= gb:
        return f"{bytes / gb:.2f} GB"
    elif bytes >= mb:
        return f"{bytes / mb:.2f} MB"
    elif bytes >= kb:
        return f"{bytes / kb:.2f} KB"
    return f"{bytes} B"


_COMMANDS: list[Command] = [
    # System
    Command("get_system_info", get_system_info, "Host, user and disk summary"),
    Command("get_disk_usage_info", get_disk_usage, "Root volume usage"),
    Command("format_bytes", format_bytes, "Format a byte count"),
    # Caches
    Command("scan_all_caches", caches.scan_all_caches, "Scan user and system caches"),
    Command("scan_user_caches", caches.scan_user_caches, "Scan user caches"),
    Command("scan_system_caches", caches.scan_system_caches, "Scan system caches"),
    Command("get_total_cache_size", caches.total_cache_size, "Total size of all caches"),
    Command("delete_cache", cleaner.delete_cache, "Delete a cache entry"),
    # Developer
    Command("is_developer_user", developer.is_developer_user, "Detect developer tooling"),
    Command("scan_developer_caches", developer.scan_developer_caches, "Scan developer caches"),
    Command(
        "get_total_developer_cache_size",
        developer.total_developer_cache_size,
        "Total size of developer caches",
    ),
    Command("clean_developer_cache", cleaner.clean_developer_cache, "Empty a developer cache"),
    # Leftovers
    Command("scan_installed_apps", scan_installed_apps, "List installed applications"),
    Command("scan_orphan_files", orphans.scan_orphan_files, "Find leftover app data"),
    Command("get_orphan_total_size", orphans.total_orphan_size, "Total size of leftovers"),
    Command("delete_orphan", cleaner.delete_orphan, "Delete leftover app data"),
    Command("scan_large_app_data", large_files.scan_large_app_data, "Largest app data folders"),
    Command("delete_large_app_data", cleaner.delete_large_app_data, "Trash an app data folder"),
    Command("reveal_in_finder", reveal_in_finder, "Show a path in the file browser"),
    # Large files
    Command(
        "scan_common_large_files",
        lambda min_size_mb: large_files.scan_common_large_files(_min_size(min_size_mb)),
        "Large files in common folders",
    ),
    Command(
        "scan_large_files",
        lambda directory, min_size_mb, categories=None: large_files.scan_large_files(
            directory, _min_size(min_size_mb), categories
        ),
        "Large files in one directory",
    ),
    Command("move_file_to_trash", cleaner.move_file_to_trash, "Trash a large file"),
    # Duplicates
    Command(
        "scan_common_duplicates",
        lambda min_size_mb: duplicates.scan_common_duplicates(_min_size(min_size_mb)),
        "Duplicates across common folders",
    ),
    Command(
        "scan_duplicates",
        lambda directory, min_size_mb: duplicates.scan_duplicates(directory, _min_size(min_size_mb)),
        "Duplicates in one directory",
    ),
    Command(
        "get_duplicates_wasted_space",
        lambda min_size_mb: duplicates.total_duplicates_wasted(_min_size(min_size_mb)),
        "Space wasted by duplicates",
    ),
    Command("move_duplicate_to_trash", cleaner.move_duplicate_to_trash, "Trash a duplicate copy"),
]

COMMANDS: dict[str, Command] = {c.name: c for c in _COMMANDS}

# Handlers wrapped so that wrong parameter names or types fail before the call.
# Event parameters need arbitrary types.
_VALIDATED: dict[str, Callable[..., Any]] = {
    c.name: validate_call(config=ConfigDict(arbitrary_types_allowed=True))(c.handler) for c in _COMMANDS
}


def invoke(name: str, **params: Any) -> CommandResult:
    """
    Run a command by name.

    Args:
        name: Command name (see COMMANDS)
        **params: Command parameters

    Returns:
        CommandResult; ok=False carries the error message
    """
    command = COMMANDS.get(name)
    if command is None:
        return CommandResult(command=name, ok=False, error=f"Unknown command: {name}")

    try:
        data = _VALIDATED[name](**params)
    except ValidationError as e:
        return CommandResult(command=name, ok=False, error=f"Invalid parameters: {e}")
    except ScanRootUnavailableError as e:
        log.warning("Command %s failed: %s", name, e)
        return CommandResult(command=name, ok=False, error=str(e))
    except ValueError as e:
        return CommandResult(command=name, ok=False, error=f"Invalid parameters: {e}")
    except ReclaimError as e:
        log.warning("Command %s failed: %s", name, e)
        return CommandResult(command=name, ok=False, error=str(e))

    if isinstance(data, DeleteResult):
        return CommandResult(command=name, ok=data.success, data=data, error=data.error)
    return CommandResult(command=name, data=data)
