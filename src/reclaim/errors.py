"""Exception taxonomy for reclaim.

Scanners absorb per-entry errors (skip and continue). Only
ScanRootUnavailableError fails a whole scan command; delete operations
translate their errors into DeleteResult outcomes instead of raising.
"""

from pathlib import Path


class ReclaimError(Exception):
    """Base class for all reclaim errors."""

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None

    def __str__(self) -> str:
        if self.path:
            return f"{self.message}: {self.path}"
        return self.message


class TraversalAccessError(ReclaimError):
    """A subtree could not be read during a scan."""


class HashComputationError(ReclaimError):
    """A file could not be read while computing its content digest."""


class PathGoneError(ReclaimError):
    """The target of a delete no longer exists."""


class PermissionDeniedError(ReclaimError):
    """The operating system refused a delete."""


class ScanRootUnavailableError(ReclaimError):
    """An entire scan root (e.g. the home directory) is inaccessible."""
