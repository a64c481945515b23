"""Shared fixtures for reclaim tests."""

import json
from pathlib import Path

import pytest


@pytest.fixture
def fake_home(tmp_path, monkeypatch) -> Path:
    """An empty home directory that every scanner resolves ~ against."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("RECLAIM_HOME", str(home))
    monkeypatch.setenv("RECLAIM_CONFIG", str(tmp_path / "config.json"))
    return home


@pytest.fixture
def write_config(tmp_path):
    """Write a config file picked up through RECLAIM_CONFIG."""

    def _write(**values) -> Path:
        path = tmp_path / "config.json"
        path.write_text(json.dumps(values))
        return path

    return _write


def make_file(path: Path, size: int = 0, content: bytes | None = None) -> Path:
    """Create a file with real (non-sparse) content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content if content is not None else b"x" * size)
    return path
