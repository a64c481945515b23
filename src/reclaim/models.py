"""Data models for reclaim."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


def format_size(size_bytes: int) -> str:
    """Human-readable size string (decimal units like macOS)."""
    if size_bytes >= 1000**3:
        return f"{size_bytes / (1000**3):.1f} GB"
    elif size_bytes >= 1000**2:
        return f"{size_bytes / (1000**2):.1f} MB"
    elif size_bytes >= 1000:
        return f"{size_bytes / 1000:.1f} KB"
    else:
        return f"{size_bytes} B"


class Snapshot(BaseModel):
    """Base for scan results: immutable once produced."""

    model_config = ConfigDict(frozen=True)

    @property
    def size_human(self) -> str:
        return format_size(getattr(self, "size", 0))


# =============================================================================
# Caches
# =============================================================================


class CacheType(str, Enum):
    """Classification of a cache folder."""

    BROWSER = "Browser"
    SYSTEM = "System"
    APPLICATION = "Application"
    DEVELOPER = "Developer"
    UNKNOWN = "Unknown"


class CacheEntry(Snapshot):
    """A top-level folder found under a cache root."""

    path: str = Field(..., description="Absolute path (unique key)")
    name: str = Field(..., description="Folder name")
    size: int = Field(..., ge=0, description="Total size in bytes")
    cache_type: CacheType = Field(..., description="Classification")
    is_developer_related: bool = Field(False, description="Matches a developer-tool pattern")
    is_safe_to_delete: bool = Field(False, description="Removal should not break anything")
    description: str = Field("", description="Human-readable description")

    @model_validator(mode="after")
    def _system_never_safe(self) -> "CacheEntry":
        if self.cache_type == CacheType.SYSTEM and self.is_safe_to_delete:
            raise ValueError("System caches can never be marked safe to delete")
        return self


class DeveloperCache(Snapshot):
    """A named developer-tool cache location from the catalog."""

    name: str = Field(..., description="Catalog name")
    path: str = Field(..., description="Location on disk")
    size: int = Field(0, ge=0, description="Size in bytes (0 when missing)")
    description: str = Field("", description="What the cache holds")
    exists: bool = Field(False, description="Whether the location exists")
    safe_to_clean: bool = Field(True, description="Static catalog safety flag")

    @model_validator(mode="after")
    def _missing_has_no_size(self) -> "DeveloperCache":
        if not self.exists and self.size != 0:
            raise ValueError("A missing developer cache cannot have a size")
        return self


# =============================================================================
# Installed apps and leftovers
# =============================================================================


class InstalledApp(Snapshot):
    """An installed application bundle."""

    name: str
    bundle_id: str = ""
    path: str = ""


class OrphanType(str, Enum):
    """Which leftover root an orphan was found under."""

    APPLICATION_SUPPORT = "ApplicationSupport"
    PREFERENCES = "Preferences"
    CONTAINERS = "Containers"
    CACHES = "Caches"
    LOGS = "Logs"
    OTHER = "Other"


class OrphanFile(Snapshot):
    """Data left behind by an application that is no longer installed."""

    path: str
    name: str
    size: int = Field(..., ge=0)
    orphan_type: OrphanType
    possible_app_name: str = "Unknown"


# =============================================================================
# Large files and folders
# =============================================================================


class FileCategory(str, Enum):
    """Category of a large file, derived from its extension."""

    VIDEO = "Video"
    IMAGE = "Image"
    AUDIO = "Audio"
    ARCHIVE = "Archive"
    DOCUMENT = "Document"
    APPLICATION = "Application"
    DISK_IMAGE = "DiskImage"
    OTHER = "Other"


class LargeFile(Snapshot):
    """A file above the large-file threshold."""

    path: str
    name: str
    size: int = Field(..., ge=0)
    category: FileCategory = FileCategory.OTHER
    last_modified: Optional[int] = Field(None, description="Unix timestamp, if known")
    extension: str = ""


class LargeAppData(Snapshot):
    """A heavy application data folder."""

    path: str
    name: str
    size: int = Field(..., ge=0)
    location: str = Field(..., description="Root it was found under")


# =============================================================================
# Duplicates
# =============================================================================


class DuplicateFile(Snapshot):
    """One member of a duplicate group."""

    path: str
    name: str


class DuplicateGroup(Snapshot):
    """Files sharing identical content. files[0] is the copy that is kept."""

    hash: str = Field(..., description="Content digest (group key)")
    file_size: int = Field(..., ge=0, description="Size shared by every member")
    files: list[DuplicateFile] = Field(..., min_length=2)
    total_wasted: int = Field(0, ge=0, description="file_size * (len(files) - 1)")

    @model_validator(mode="before")
    @classmethod
    def _fill_wasted(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("total_wasted") is None:
            files = data.get("files") or []
            size = data.get("file_size") or 0
            data = {**data, "total_wasted": size * max(len(files) - 1, 0)}
        return data

    @model_validator(mode="after")
    def _check_wasted(self) -> "DuplicateGroup":
        expected = self.file_size * (len(self.files) - 1)
        if self.total_wasted != expected:
            raise ValueError(f"total_wasted must be {expected}, got {self.total_wasted}")
        return self

    @property
    def original(self) -> DuplicateFile:
        """The retained copy."""
        return self.files[0]

    @property
    def wasted_files(self) -> list[DuplicateFile]:
        """Copies that deletions target."""
        return self.files[1:]


# =============================================================================
# System information
# =============================================================================


class DiskUsage(BaseModel):
    """Overall disk usage information."""

    total_bytes: int = Field(..., ge=0, description="Total disk size in bytes")
    used_bytes: int = Field(..., ge=0, description="Used space in bytes")
    free_bytes: int = Field(..., ge=0, description="Free space in bytes")
    mount_point: str = Field("/", description="Mount point")

    @property
    def total_gb(self) -> float:
        """Total size in GB (decimal, like macOS)."""
        return self.total_bytes / (1000**3)

    @property
    def used_gb(self) -> float:
        """Used space in GB (decimal, like macOS)."""
        return self.used_bytes / (1000**3)

    @property
    def free_gb(self) -> float:
        """Free space in GB (decimal, like macOS)."""
        return self.free_bytes / (1000**3)

    @property
    def used_percentage(self) -> float:
        """Percentage of disk used."""
        return (self.used_bytes / self.total_bytes) * 100 if self.total_bytes > 0 else 0.0


class SystemInfo(BaseModel):
    """Host and disk summary."""

    os_version: str
    hostname: str
    username: str
    home_directory: str
    disk_usage: DiskUsage


# =============================================================================
# Deletion
# =============================================================================


class DeleteOutcome(str, Enum):
    """What happened to a delete request."""

    DELETED = "deleted"
    TRASHED = "trashed"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    REFUSED = "refused"
    FAILED = "failed"
    REVEALED = "revealed"


class DeleteResult(BaseModel):
    """Result of a single-path delete."""

    path: str = Field(..., description="Path that was targeted")
    success: bool = Field(True, description="Whether the delete succeeded")
    outcome: DeleteOutcome = Field(DeleteOutcome.DELETED, description="What happened")
    bytes_freed: int = Field(0, ge=0, description="Bytes freed (or moved to trash)")
    error: Optional[str] = Field(None, description="Error message if failed")


class BatchProgress(BaseModel):
    """Emitted after each item of a batch delete."""

    index: int = Field(..., ge=1, description="1-based position in the batch")
    total: int = Field(..., ge=0)
    item: str = Field(..., description="Display name of the item")
    path: str
    result: DeleteResult


class BatchSummary(BaseModel):
    """Aggregated outcome of a batch delete."""

    results: list[DeleteResult] = Field(default_factory=list)
    cancelled: bool = False

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def fail_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def failed_paths(self) -> list[str]:
        return [r.path for r in self.results if not r.success]

    @property
    def bytes_freed(self) -> int:
        return sum(r.bytes_freed for r in self.results if r.success)


class CommandResult(BaseModel):
    """Envelope returned by the command surface."""

    command: str
    ok: bool = True
    data: Any = None
    error: Optional[str] = None
