"""Cache discovery and classification."""

import logging
from pathlib import Path
from threading import Event

from reclaim.catalog import (
    CACHE_ROOTS,
    CLASSIFICATION_RULES,
    DEVELOPER_PATTERNS,
    PROTECTED_CACHE_PATTERNS,
    CacheRoot,
    ClassificationRule,
)
from reclaim.models import CacheEntry, CacheType
from reclaim.scanner import get_directory_size, home_dir, is_cancelled, list_children, resolve

log = logging.getLogger(__name__)


def classify_cache(
    name: str,
    rules: tuple[ClassificationRule, ...] = CLASSIFICATION_RULES,
) -> CacheType:
    """Return the type of the first rule matching name, or Unknown."""
    for rule in rules:
        if rule.matches(name):
            return rule.cache_type
    return CacheType.UNKNOWN


def is_developer_cache(name: str) -> bool:
    return any(p in name for p in DEVELOPER_PATTERNS)


def is_protected_cache(name: str) -> bool:
    return any(p in name for p in PROTECTED_CACHE_PATTERNS)


def is_safe_to_delete(name: str, cache_type: CacheType) -> bool:
    """
    Decide whether removing a cache is expected to be harmless.

    System and Unknown caches are never safe, nor is anything on the
    protected allowlist.
    """
    if cache_type in (CacheType.SYSTEM, CacheType.UNKNOWN):
        return False
    return not is_protected_cache(name)


def describe_cache(name: str, cache_type: CacheType) -> str:
    if cache_type == CacheType.BROWSER:
        return f"Browser cache for {name.split('.')[-1] or name}"
    return {
        CacheType.DEVELOPER: "Developer tools cache",
        CacheType.SYSTEM: "System cache (use caution)",
        CacheType.APPLICATION: "Application cache",
        CacheType.UNKNOWN: "Unknown cache type",
    }[cache_type]


def scan_cache_root(
    root: Path,
    force_type: CacheType | None = None,
    cancel: Event | None = None,
) -> list[CacheEntry]:
    """
    Scan one cache root; each top-level directory becomes an entry.

    Args:
        root: Directory to scan
        force_type: Classify every entry with this type instead of by name
        cancel: Optional event that stops the scan early

    Returns:
        CacheEntry list sorted by size descending
    """
    entries: list[CacheEntry] = []

    for child in list_children(root):
        if is_cancelled(cancel):
            break
        try:
            if not child.is_dir(follow_symlinks=False):
                continue
        except OSError:
            continue

        name = child.name
        size, _, _ = get_directory_size(Path(child.path), cancel=cancel)
        cache_type = force_type or classify_cache(name)

        entries.append(
            CacheEntry(
                path=child.path,
                name=name,
                size=size,
                cache_type=cache_type,
                is_developer_related=is_developer_cache(name),
                is_safe_to_delete=is_safe_to_delete(name, cache_type),
                description=describe_cache(name, cache_type),
            )
        )

    entries.sort(key=lambda e: e.size, reverse=True)
    return entries


def _scan_roots(roots: tuple[CacheRoot, ...], cancel: Event | None = None) -> list[CacheEntry]:
    home = home_dir()
    results: list[CacheEntry] = []
    seen: set[str] = set()

    for root in roots:
        for entry in scan_cache_root(resolve(root.path, home), root.force_type, cancel):
            if entry.path in seen:
                continue
            seen.add(entry.path)
            results.append(entry)

    results.sort(key=lambda e: e.size, reverse=True)
    log.debug("Cache scan found %d entries", len(results))
    return results


def scan_user_caches(cancel: Event | None = None) -> list[CacheEntry]:
    """Scan ~/Library/Caches."""
    return _scan_roots(tuple(r for r in CACHE_ROOTS if r.force_type is None), cancel)


def scan_system_caches(cancel: Event | None = None) -> list[CacheEntry]:
    """Scan /Library/Caches (every entry is classified System)."""
    return _scan_roots(tuple(r for r in CACHE_ROOTS if r.force_type is not None), cancel)


def scan_all_caches(cancel: Event | None = None) -> list[CacheEntry]:
    """
    Scan every catalog cache root.

    Unreadable subtrees are skipped; the scan only fails when the home
    directory itself is unavailable.

    Returns:
        CacheEntry list sorted by size descending
    """
    return _scan_roots(CACHE_ROOTS, cancel)


def total_cache_size() -> int:
    return sum(e.size for e in scan_all_caches())
