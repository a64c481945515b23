"""User configuration for reclaim."""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

log = logging.getLogger(__name__)

CONFIG_DIR = Path(os.path.expanduser("~/.reclaim"))
CONFIG_FILE = CONFIG_DIR / "config.json"


class Settings(BaseModel):
    """Tunable scan and cleanup settings."""

    home: Optional[str] = Field(None, description="Home directory to scan instead of ~")
    large_app_data_limit: int = Field(50, ge=1, description="Largest app-data folders to return")
    large_app_data_min_bytes: int = Field(
        1_000_000, ge=0, description="Minimum size for an app-data folder to be reported"
    )
    default_large_file_mb: int = Field(100, ge=0, description="Default large-file threshold")
    default_duplicate_mb: int = Field(1, ge=0, description="Default duplicate-scan threshold")
    protected_paths: list[str] = Field(
        default_factory=list, description="Extra paths that must never be deleted"
    )
    hash_chunk_size: int = Field(65536, gt=0, description="Read size for full-content hashing")
    partial_hash_size: int = Field(8192, gt=0, description="Prefix size for the quick hash pass")


def config_file() -> Path:
    """Location of the config file (RECLAIM_CONFIG overrides)."""
    override = os.environ.get("RECLAIM_CONFIG")
    if override:
        return Path(os.path.expanduser(override))
    return CONFIG_FILE


def load_settings() -> Settings:
    """
    Load settings from disk.

    Missing or unreadable files fall back to defaults. RECLAIM_HOME, when
    set, takes precedence over the configured home.

    Returns:
        Settings instance
    """
    path = config_file()
    data: dict = {}

    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Ignoring unreadable config %s: %s", path, e)
            data = {}

    try:
        settings = Settings(**data) if isinstance(data, dict) else Settings()
    except ValidationError as e:
        log.warning("Ignoring invalid config %s: %s", path, e)
        settings = Settings()

    env_home = os.environ.get("RECLAIM_HOME")
    if env_home:
        settings = settings.model_copy(update={"home": env_home})

    return settings


def save_settings(settings: Settings) -> bool:
    """Save settings to disk. Returns False if the file could not be written."""
    path = config_file()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(settings.model_dump(exclude_none=True), f, indent=2)
        return True
    except OSError as e:
        log.warning("Could not save config %s: %s", path, e)
        return False
