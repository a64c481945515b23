"""Installed application enumeration."""

import logging
import plistlib
from pathlib import Path

from reclaim.catalog import APPLICATION_DIRS
from reclaim.models import InstalledApp
from reclaim.scanner import home_dir, list_children, resolve

log = logging.getLogger(__name__)


def read_bundle_id(app_path: Path) -> str:
    """CFBundleIdentifier from an app bundle's Info.plist, or ""."""
    plist_path = app_path / "Contents" / "Info.plist"
    try:
        with open(plist_path, "rb") as f:
            info = plistlib.load(f)
    except FileNotFoundError:
        return ""
    except (OSError, ValueError, plistlib.InvalidFileException) as e:
        log.debug("Unreadable Info.plist %s: %s", plist_path, e)
        return ""

    bundle_id = info.get("CFBundleIdentifier") if isinstance(info, dict) else None
    return bundle_id if isinstance(bundle_id, str) else ""


def scan_installed_apps(app_dirs: tuple[str, ...] = APPLICATION_DIRS) -> list[InstalledApp]:
    """
    List .app bundles in the application directories.

    Returns:
        InstalledApp list sorted by name
    """
    home = home_dir()
    apps: list[InstalledApp] = []

    for template in app_dirs:
        for entry in list_children(resolve(template, home)):
            if not entry.name.endswith(".app"):
                continue
            path = Path(entry.path)
            apps.append(
                InstalledApp(
                    name=path.stem,
                    bundle_id=read_bundle_id(path),
                    path=str(path),
                )
            )

    apps.sort(key=lambda a: a.name.lower())
    return apps
