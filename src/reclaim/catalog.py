"""Static path catalog and classification tables for reclaim.

Paths starting with ``~`` are resolved against the scanned home directory
(see ``reclaim.scanner.resolve``); absolute paths are used as-is.
"""

from pydantic import BaseModel, ConfigDict, Field

from reclaim.models import CacheType, FileCategory, OrphanType


class CacheRoot(BaseModel):
    """A directory whose top-level children are cache entries."""

    model_config = ConfigDict(frozen=True)

    path: str
    force_type: CacheType | None = None


class ClassificationRule(BaseModel):
    """A cache type and the name fragments that select it."""

    model_config = ConfigDict(frozen=True)

    cache_type: CacheType
    patterns: tuple[str, ...]
    prefix_only: bool = False

    def matches(self, name: str) -> bool:
        if self.prefix_only:
            return any(name.startswith(p) for p in self.patterns)
        return any(p in name for p in self.patterns)


class DevCacheSpec(BaseModel):
    """A named developer-tool cache location."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    description: str
    safe_to_clean: bool = True


class DataRoot(BaseModel):
    """A root directory tagged with the label results carry."""

    model_config = ConfigDict(frozen=True)

    path: str
    label: str


# =============================================================================
# Caches
# =============================================================================

CACHE_ROOTS: tuple[CacheRoot, ...] = (
    CacheRoot(path="~/Library/Caches"),
    CacheRoot(path="/Library/Caches", force_type=CacheType.SYSTEM),
)

DEVELOPER_PATTERNS: tuple[str, ...] = (
    "com.apple.dt.Xcode",
    "org.cocoapods",
    "com.microsoft.VSCode",
    "JetBrains",
    "npm",
    "yarn",
    "Yarn",
    "cargo",
    "gradle",
    "maven",
    "Homebrew",
    "homebrew",
    "pip",
    "composer",
    "go-build",
    "rustup",
    "CocoaPods",
    "Google.AndroidStudio",
    "com.docker",
    "Android",
)

BROWSER_PATTERNS: tuple[str, ...] = (
    "com.apple.Safari",
    "com.google.Chrome",
    "org.mozilla.firefox",
    "Firefox",
    "com.microsoft.edgemac",
    "com.brave.Browser",
    "com.operasoftware.Opera",
    "company.thebrowser.Browser",
)

SYSTEM_PATTERNS: tuple[str, ...] = (
    "com.apple.",
    "CloudKit",
    "CoreSimulator",
)

# Reverse-DNS bundle identifiers (com.vendor.App) belong to some application.
APPLICATION_PREFIXES: tuple[str, ...] = (
    "com.",
    "org.",
    "net.",
    "io.",
    "co.",
    "us.",
    "de.",
    "dev.",
    "app.",
)

# Evaluated top to bottom; the first matching rule wins.
CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(cache_type=CacheType.DEVELOPER, patterns=DEVELOPER_PATTERNS),
    ClassificationRule(cache_type=CacheType.BROWSER, patterns=BROWSER_PATTERNS),
    ClassificationRule(cache_type=CacheType.SYSTEM, patterns=SYSTEM_PATTERNS),
    ClassificationRule(
        cache_type=CacheType.APPLICATION, patterns=APPLICATION_PREFIXES, prefix_only=True
    ),
)

# Caches whose removal disables or degrades core OS functionality.
PROTECTED_CACHE_PATTERNS: tuple[str, ...] = (
    "CloudKit",
    "CoreSimulator",
    "com.apple.bird",
    "com.apple.akd",
    "com.apple.nsurlsessiond",
    "com.apple.iconservices",
    "com.apple.LaunchServices",
    "com.apple.kernelcaches",
    "com.apple.amsengagementd",
    "com.apple.containermanagerd",
    "FamilyCircle",
    "GeoServices",
)

# =============================================================================
# Developer tooling
# =============================================================================

DEVELOPER_MARKERS: tuple[str, ...] = (
    "~/.npm",
    "~/.cargo",
    "~/.gradle",
    "~/Library/Developer/Xcode",
    "~/.git",
    "/Applications/Xcode.app",
    "/Applications/Visual Studio Code.app",
)

DEVELOPER_CACHES: tuple[DevCacheSpec, ...] = (
    DevCacheSpec(name="npm Cache", path="~/.npm", description="Node.js package manager cache"),
    DevCacheSpec(name="Yarn Cache", path="~/.yarn/cache", description="Yarn package manager cache"),
    DevCacheSpec(name="pnpm Store", path="~/.pnpm-store", description="pnpm package manager store"),
    DevCacheSpec(
        name="Cargo Cache",
        path="~/.cargo/registry/cache",
        description="Rust package registry cache",
    ),
    DevCacheSpec(
        name="CocoaPods Cache",
        path="~/Library/Caches/CocoaPods",
        description="iOS dependency manager cache",
    ),
    DevCacheSpec(
        name="Xcode DerivedData",
        path="~/Library/Developer/Xcode/DerivedData",
        description="Xcode build artifacts (safe to clean)",
    ),
    DevCacheSpec(
        name="Xcode Archives",
        path="~/Library/Developer/Xcode/Archives",
        description="Xcode archived builds",
        safe_to_clean=False,
    ),
    DevCacheSpec(name="Gradle Cache", path="~/.gradle/caches", description="Android/Java build cache"),
    DevCacheSpec(
        name="Maven Repository",
        path="~/.m2/repository",
        description="Maven dependencies (partial clean recommended)",
        safe_to_clean=False,
    ),
    DevCacheSpec(
        name="Homebrew Cache",
        path="~/Library/Caches/Homebrew",
        description="Homebrew package downloads",
    ),
    DevCacheSpec(name="pip Cache", path="~/Library/Caches/pip", description="Python package cache"),
    DevCacheSpec(
        name="VS Code Cache",
        path="~/Library/Application Support/Code/Cache",
        description="Visual Studio Code cache",
    ),
    DevCacheSpec(
        name="Android SDK Cache",
        path="~/Library/Android/sdk/.temp",
        description="Android SDK temporary files",
    ),
    DevCacheSpec(
        name="Composer Cache",
        path="~/.composer/cache",
        description="PHP Composer package cache",
    ),
    DevCacheSpec(
        name="Go Modules Cache",
        path="~/go/pkg/mod/cache",
        description="Go modules cache",
    ),
)

DOCKER_CACHE = DevCacheSpec(
    name="Docker Desktop",
    path="~/Library/Containers/com.docker.docker/Data",
    description="Docker Desktop data (use 'docker system prune' to clean)",
    safe_to_clean=False,
)

# =============================================================================
# Installed apps and leftovers
# =============================================================================

APPLICATION_DIRS: tuple[str, ...] = ("/Applications", "~/Applications")

LEFTOVER_ROOTS: tuple[tuple[str, OrphanType], ...] = (
    ("~/Library/Application Support", OrphanType.APPLICATION_SUPPORT),
    ("~/Library/Preferences", OrphanType.PREFERENCES),
    ("~/Library/Containers", OrphanType.CONTAINERS),
    ("~/Library/Caches", OrphanType.CACHES),
    ("~/Library/Logs", OrphanType.LOGS),
)

# =============================================================================
# Large data
# =============================================================================

LARGE_APP_DATA_ROOTS: tuple[DataRoot, ...] = (
    DataRoot(path="~/Library/Application Support", label="ApplicationSupport"),
    DataRoot(path="~/Library/Containers", label="Containers"),
    DataRoot(path="~/Library/Caches", label="Caches"),
)

COMMON_DATA_ROOTS: tuple[str, ...] = (
    "~/Downloads",
    "~/Desktop",
    "~/Documents",
    "~/Movies",
    "~/Music",
    "~/Pictures",
)

DUPLICATE_ROOTS: tuple[str, ...] = (
    "~/Downloads",
    "~/Desktop",
    "~/Documents",
    "~/Pictures",
)

EXTENSION_CATEGORIES: dict[FileCategory, frozenset[str]] = {
    FileCategory.VIDEO: frozenset(
        {"mp4", "mov", "avi", "mkv", "wmv", "flv", "webm", "m4v", "mpeg", "mpg", "3gp"}
    ),
    FileCategory.IMAGE: frozenset(
        {
            "jpg", "jpeg", "png", "gif", "bmp", "tiff", "tif", "raw", "cr2", "nef",
            "arw", "heic", "heif", "webp", "psd", "svg",
        }
    ),
    FileCategory.AUDIO: frozenset({"mp3", "wav", "flac", "aac", "m4a", "wma", "ogg", "aiff", "alac"}),
    FileCategory.ARCHIVE: frozenset({"zip", "rar", "7z", "tar", "gz", "bz2", "xz", "iso", "pkg"}),
    FileCategory.DOCUMENT: frozenset(
        {"pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "pages", "numbers", "keynote"}
    ),
    FileCategory.APPLICATION: frozenset({"app"}),
    FileCategory.DISK_IMAGE: frozenset({"dmg"}),
}

# Never deleted, regardless of what a scan reported.
BLOCKED_PATHS: tuple[str, ...] = (
    "~",
    "~/Documents",
    "~/Desktop",
    "~/Downloads",
    "~/Pictures",
    "~/Music",
    "~/Movies",
    "~/Library",
    "~/Library/Caches",
    "~/Library/Application Support",
    "~/Library/Containers",
    "~/Library/Preferences",
    "~/Library/Logs",
    "/",
    "/System",
    "/Library",
    "/Library/Caches",
    "/Applications",
    "/usr",
    "/bin",
    "/sbin",
    "/var",
    "/private",
    "/Users",
)


def category_for_extension(extension: str) -> FileCategory:
    """Map a file extension (with or without the dot) to a category."""
    ext = extension.lower().lstrip(".")
    for category, extensions in EXTENSION_CATEGORIES.items():
        if ext in extensions:
            return category
    return FileCategory.OTHER
