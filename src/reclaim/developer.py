"""Developer environment detection and developer cache scanning."""

import logging
from threading import Event

from reclaim.catalog import DEVELOPER_CACHES, DEVELOPER_MARKERS, DOCKER_CACHE, DevCacheSpec
from reclaim.models import DeveloperCache
from reclaim.scanner import get_directory_size, home_dir, is_cancelled, resolve

log = logging.getLogger(__name__)


def is_developer_user() -> bool:
    """True if any developer-tool marker exists."""
    home = home_dir()
    for marker in DEVELOPER_MARKERS:
        if resolve(marker, home).exists():
            log.debug("Developer marker found: %s", marker)
            return True
    return False


def _measure(spec: DevCacheSpec, home, cancel: Event | None) -> DeveloperCache:
    path = resolve(spec.path, home)
    exists = path.is_dir()
    size = get_directory_size(path, allocated=True, cancel=cancel)[0] if exists else 0

    return DeveloperCache(
        name=spec.name,
        path=str(path),
        size=size,
        description=spec.description,
        exists=exists,
        safe_to_clean=spec.safe_to_clean,
    )


def scan_developer_caches(cancel: Event | None = None) -> list[DeveloperCache]:
    """
    Report every catalog developer cache.

    Missing locations are still reported, with exists=False and size 0.
    Docker Desktop data is only reported when present.

    Returns:
        DeveloperCache list sorted by size descending
    """
    home = home_dir()
    caches: list[DeveloperCache] = []

    for spec in DEVELOPER_CACHES:
        if is_cancelled(cancel):
            break
        caches.append(_measure(spec, home, cancel))

    docker = _measure(DOCKER_CACHE, home, cancel)
    if docker.exists:
        caches.append(docker)

    caches.sort(key=lambda c: c.size, reverse=True)
    return caches


def total_developer_cache_size() -> int:
    return sum(c.size for c in scan_developer_caches() if c.exists)
