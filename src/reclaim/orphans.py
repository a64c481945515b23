"""Leftover data detection for applications that are no longer installed."""

import logging
import re
from difflib import SequenceMatcher
from pathlib import Path
from threading import Event
from typing import Iterable

from reclaim.apps import scan_installed_apps
from reclaim.catalog import LEFTOVER_ROOTS
from reclaim.models import InstalledApp, OrphanFile, OrphanType
from reclaim.scanner import home_dir, is_cancelled, list_children, path_size, resolve

log = logging.getLogger(__name__)

# An entry scoring at least this against an installed app belongs to it.
OWNED_THRESHOLD = 0.8

# Minimum score for naming an installed app as the likely owner.
SUGGEST_THRESHOLD = 0.5

UNKNOWN_APP = "Unknown"

FILLER_TOKENS = frozenset(
    {
        "com", "org", "net", "io", "co", "dev", "app", "apps", "the", "inc",
        "plist", "helper", "agent", "savedstate", "binarycookies", "mac", "macos",
        "osx", "desktop", "launcher", "data", "support",
    }
)

_CAMEL = re.compile(r"([a-z0-9])([A-Z])")
_SPLIT = re.compile(r"[^a-z0-9]+")


def tokenize(text: str) -> list[str]:
    """
    Split a folder name or app name into comparable tokens.

    Case-insensitive; splits on separators and camel-case boundaries and
    drops filler tokens.

    >>> tokenize("com.getdropbox.DropboxHelper.plist")
    ['getdropbox', 'dropbox']
    """
    spaced = _CAMEL.sub(r"\1 \2", text)
    return [t for t in _SPLIT.split(spaced.lower()) if t and t not in FILLER_TOKENS]


def _overlap(a: list[str], b: list[str]) -> float:
    if not a or not b:
        return 0.0
    common = len(set(a) & set(b))
    return common / min(len(set(a)), len(set(b)))


def _jaccard(a: list[str], b: list[str]) -> float:
    if not a or not b:
        return 0.0
    sa, sb = set(a), set(b)
    return len(sa & sb) / len(sa | sb)


def _ratio(a: list[str], b: list[str]) -> float:
    if not a or not b:
        return 0.0
    return SequenceMatcher(None, "".join(a), "".join(b)).ratio()


def score_match(name: str, app: InstalledApp) -> float:
    """
    Similarity between a leftover entry name and an installed app, in [0, 1].

    Bundle-id equality (or the entry being a bundle-id-prefixed variant such
    as ``com.foo.Bar.savedState``) scores 1.0.
    """
    lowered = name.lower()
    bundle_id = app.bundle_id.lower()
    if bundle_id and (lowered == bundle_id or lowered.startswith(bundle_id + ".")):
        return 1.0

    entry_tokens = tokenize(name)
    name_tokens = tokenize(app.name)
    bundle_tokens = tokenize(app.bundle_id)

    return max(
        _overlap(entry_tokens, name_tokens),
        _ratio(entry_tokens, name_tokens),
        _jaccard(entry_tokens, bundle_tokens),
        _ratio(entry_tokens, bundle_tokens),
    )


def match_app(name: str, apps: Iterable[InstalledApp]) -> tuple[InstalledApp | None, float]:
    """Best-scoring installed app for name (ties keep the first app)."""
    best: InstalledApp | None = None
    best_score = 0.0
    for app in apps:
        score = score_match(name, app)
        if score > best_score:
            best, best_score = app, score
    return best, best_score


def _scan_leftover_root(
    root: Path,
    orphan_type: OrphanType,
    apps: list[InstalledApp],
    cancel: Event | None,
) -> list[OrphanFile]:
    orphans: list[OrphanFile] = []

    for entry in list_children(root):
        if is_cancelled(cancel):
            break
        name = entry.name
        if name.startswith(".") or name.startswith("com.apple."):
            continue

        app, score = match_app(name, apps)
        if score >= OWNED_THRESHOLD:
            continue

        size = path_size(Path(entry.path))
        if size <= 0:
            continue

        orphans.append(
            OrphanFile(
                path=entry.path,
                name=name,
                size=size,
                orphan_type=orphan_type,
                possible_app_name=app.name if app and score >= SUGGEST_THRESHOLD else UNKNOWN_APP,
            )
        )

    return orphans


def scan_orphan_files(
    installed_apps: list[InstalledApp] | None = None,
    cancel: Event | None = None,
) -> list[OrphanFile]:
    """
    Find leftover-root entries that no installed application owns.

    Args:
        installed_apps: Apps to match against (enumerated when None)
        cancel: Optional event that stops the scan early

    Returns:
        OrphanFile list sorted by size descending
    """
    home = home_dir()
    apps = installed_apps if installed_apps is not None else scan_installed_apps()
    log.debug("Matching leftovers against %d installed apps", len(apps))

    orphans: list[OrphanFile] = []
    for template, orphan_type in LEFTOVER_ROOTS:
        if is_cancelled(cancel):
            break
        orphans.extend(_scan_leftover_root(resolve(template, home), orphan_type, apps, cancel))

    orphans.sort(key=lambda o: o.size, reverse=True)
    return orphans


def total_orphan_size() -> int:
    return sum(o.size for o in scan_orphan_files())
