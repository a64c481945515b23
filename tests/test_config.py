"""Tests for configuration loading."""

import json

from reclaim.config import Settings, config_file, load_settings, save_settings


class TestLoadSettings:
    def test_defaults_when_missing(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RECLAIM_CONFIG", str(tmp_path / "missing.json"))
        monkeypatch.delenv("RECLAIM_HOME", raising=False)
        settings = load_settings()
        assert settings == Settings()
        assert settings.large_app_data_limit == 50
        assert settings.partial_hash_size == 8192

    def test_reads_file(self, tmp_path, monkeypatch, write_config):
        monkeypatch.setenv("RECLAIM_CONFIG", str(write_config(default_large_file_mb=250)))
        assert load_settings().default_large_file_mb == 250

    def test_corrupt_file_falls_back(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        monkeypatch.setenv("RECLAIM_CONFIG", str(path))
        assert load_settings() == Settings()

    def test_invalid_values_fall_back(self, monkeypatch, write_config):
        monkeypatch.setenv("RECLAIM_CONFIG", str(write_config(hash_chunk_size=0)))
        assert load_settings().hash_chunk_size == 65536

    def test_env_home_overrides_file(self, tmp_path, monkeypatch, write_config):
        monkeypatch.setenv("RECLAIM_CONFIG", str(write_config(home="/from/file")))
        monkeypatch.setenv("RECLAIM_HOME", str(tmp_path))
        assert load_settings().home == str(tmp_path)


class TestSaveSettings:
    def test_round_trip(self, tmp_path, monkeypatch):
        path = tmp_path / "nested" / "config.json"
        monkeypatch.setenv("RECLAIM_CONFIG", str(path))
        monkeypatch.delenv("RECLAIM_HOME", raising=False)

        assert save_settings(Settings(protected_paths=["~/Keep"], default_duplicate_mb=5))
        assert json.loads(path.read_text())["default_duplicate_mb"] == 5

        loaded = load_settings()
        assert loaded.protected_paths == ["~/Keep"]
        assert loaded.default_duplicate_mb == 5

    def test_config_file_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RECLAIM_CONFIG", str(tmp_path / "c.json"))
        assert config_file() == tmp_path / "c.json"
