"""Tests for CLI interface."""

from unittest.mock import patch

from typer.testing import CliRunner

from conftest import make_file
from reclaim.cli import app

runner = CliRunner()


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "reclaim version" in result.stdout

    def test_version_short_flag(self):
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert "reclaim version" in result.stdout


class TestHelp:
    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("status", "caches", "dev", "orphans", "large", "app-data", "duplicates", "clean"):
            assert command in result.stdout


class TestScanCommands:
    def test_status(self, fake_home):
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert "Capacity" in result.stdout

    def test_caches(self, fake_home):
        make_file(fake_home / "Library" / "Caches" / "com.spotify.client" / "f", 10)
        result = runner.invoke(app, ["caches", "--user"])
        assert result.exit_code == 0
        assert "Total safe to clean: 10 B" in result.stdout

    def test_dev(self, fake_home):
        make_file(fake_home / ".npm" / "blob", 10)
        result = runner.invoke(app, ["dev"])
        assert result.exit_code == 0
        assert "Developer Caches" in result.stdout

    def test_orphans(self, fake_home):
        make_file(fake_home / "Library" / "Logs" / "GoneApp" / "log", 10)
        with patch("reclaim.orphans.scan_installed_apps", return_value=[]):
            result = runner.invoke(app, ["orphans"])
        assert result.exit_code == 0
        assert "Total: 10 B" in result.stdout

    def test_large(self, fake_home):
        make_file(fake_home / "Downloads" / "huge.iso", 1024 * 1024)
        result = runner.invoke(app, ["large", "--min-size", "1"])
        assert result.exit_code == 0
        assert "1 large file(s)" in result.stdout

    def test_duplicates_none(self, fake_home):
        result = runner.invoke(app, ["duplicates", "--min-size", "0"])
        assert result.exit_code == 0
        assert "No duplicates found" in result.stdout

    def test_unavailable_home_exits_nonzero(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RECLAIM_HOME", str(tmp_path / "gone"))
        monkeypatch.setenv("RECLAIM_CONFIG", str(tmp_path / "config.json"))
        result = runner.invoke(app, ["caches"])
        assert result.exit_code == 1
        assert "Home directory" in result.stdout


class TestClean:
    def test_unknown_kind(self, fake_home):
        result = runner.invoke(app, ["clean", "bogus", "/tmp/x", "-y"])
        assert result.exit_code == 1
        assert "Unknown kind" in result.stdout

    def test_cancelled_at_prompt(self, fake_home):
        target = make_file(fake_home / "Library" / "Caches" / "old" / "f", 10)
        result = runner.invoke(app, ["clean", "caches", str(target.parent)], input="n\n")
        assert result.exit_code == 0
        assert target.exists()

    def test_deletes_with_yes(self, fake_home):
        target = make_file(fake_home / "Library" / "Caches" / "old" / "f", 10)
        result = runner.invoke(app, ["clean", "caches", str(target.parent), "-y"])
        assert result.exit_code == 0
        assert not target.exists()
        assert "Cleanup Complete" in result.stdout

    def test_partial_failure_exits_nonzero(self, fake_home):
        target = make_file(fake_home / "Library" / "Caches" / "old" / "f", 10)
        missing = fake_home / "Library" / "Caches" / "missing"
        result = runner.invoke(app, ["clean", "caches", str(target.parent), str(missing), "-y"])
        assert result.exit_code == 1
        assert "Partial Cleanup" in result.stdout


class TestReveal:
    def test_missing_path(self, tmp_path):
        result = runner.invoke(app, ["reveal", str(tmp_path / "missing")])
        assert result.exit_code == 1
        assert "no longer exists" in result.stdout
