"""Tests for leftover application data detection."""

import pytest

from conftest import make_file
from reclaim.models import InstalledApp, OrphanType
from reclaim.orphans import (
    OWNED_THRESHOLD,
    SUGGEST_THRESHOLD,
    match_app,
    score_match,
    scan_orphan_files,
    tokenize,
)

SLACK = InstalledApp(name="Slack", bundle_id="com.tinyspeck.slackmacgap", path="/Applications/Slack.app")
DROPBOX = InstalledApp(name="Dropbox", bundle_id="com.getdropbox.dropbox", path="/Applications/Dropbox.app")
CODE = InstalledApp(
    name="Visual Studio Code", bundle_id="com.microsoft.VSCode", path="/Applications/Visual Studio Code.app"
)


class TestTokenize:
    def test_splits_camel_case_and_drops_filler(self):
        assert tokenize("com.getdropbox.DropboxHelper.plist") == ["getdropbox", "dropbox"]

    def test_separators(self):
        assert tokenize("Visual Studio Code") == ["visual", "studio", "code"]

    def test_empty(self):
        assert tokenize("") == []


class TestScoreMatch:
    def test_bundle_id_equal(self):
        assert score_match("com.tinyspeck.slackmacgap", SLACK) == 1.0

    def test_bundle_id_case_insensitive(self):
        assert score_match("COM.TINYSPECK.SLACKMACGAP", SLACK) == 1.0

    def test_bundle_id_prefixed_variant(self):
        assert score_match("com.tinyspeck.slackmacgap.savedState", SLACK) == 1.0

    def test_app_name_folder(self):
        assert score_match("Slack", SLACK) >= OWNED_THRESHOLD

    def test_unrelated(self):
        assert score_match("com.example.Unrelated", SLACK) < SUGGEST_THRESHOLD

    def test_score_bounded(self):
        for name in ("Slack", "Dropbox", "x", "Code Helper"):
            assert 0.0 <= score_match(name, CODE) <= 1.0


class TestMatchApp:
    def test_best_app(self):
        app, score = match_app("com.getdropbox.dropbox", [SLACK, DROPBOX])
        assert app == DROPBOX
        assert score == 1.0

    def test_no_apps(self):
        assert match_app("Slack", []) == (None, 0.0)


class TestScanOrphanFiles:
    def test_finds_leftovers_and_skips_installed(self, fake_home):
        support = fake_home / "Library" / "Application Support"
        make_file(support / "Slack" / "storage", 100)
        make_file(support / "OldEditor" / "state", 300)
        make_file(support / "com.apple.TextEdit" / "x", 50)
        make_file(support / ".hidden" / "x", 50)
        (support / "EmptyDir").mkdir()
        make_file(fake_home / "Library" / "Preferences" / "com.defunct.tool.plist", 200)

        orphans = scan_orphan_files(installed_apps=[SLACK])

        assert [(o.name, o.orphan_type) for o in orphans] == [
            ("OldEditor", OrphanType.APPLICATION_SUPPORT),
            ("com.defunct.tool.plist", OrphanType.PREFERENCES),
        ]
        assert orphans[0].size == 300
        assert orphans[0].possible_app_name == "Unknown"

    def test_scans_caches_and_logs(self, fake_home):
        make_file(fake_home / "Library" / "Caches" / "com.gone.app" / "c", 10)
        make_file(fake_home / "Library" / "Logs" / "GoneApp" / "log.txt", 10)

        types = {o.orphan_type for o in scan_orphan_files(installed_apps=[])}

        assert types == {OrphanType.CACHES, OrphanType.LOGS}

    def test_bundle_id_variants_are_owned(self, fake_home):
        make_file(
            fake_home / "Library" / "Containers" / "com.tinyspeck.slackmacgap" / "Data" / "x", 10
        )
        assert scan_orphan_files(installed_apps=[SLACK]) == []

    def test_missing_library_is_empty(self, fake_home):
        assert scan_orphan_files(installed_apps=[]) == []

    def test_unavailable_home_raises(self, tmp_path, monkeypatch):
        from reclaim.errors import ScanRootUnavailableError

        monkeypatch.setenv("RECLAIM_HOME", str(tmp_path / "gone"))
        monkeypatch.setenv("RECLAIM_CONFIG", str(tmp_path / "config.json"))
        with pytest.raises(ScanRootUnavailableError):
            scan_orphan_files(installed_apps=[])
