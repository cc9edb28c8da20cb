import json

import pytest

from nextpint_backend.app.services.data_stores import app_settings, backup, beers, profiles, sessions

def _seed():
    profiles.create_user_profile({"favorite_styles": ["IPA"]})
    beers.add_imported_beer({"name": "A", "brewery": "B", "style": "IPA", "rating": 4})
    app_settings.initialize_settings()

def test_backup_has_all_sections_and_checksum():
    _seed()
    doc = backup.create_backup()
    for key in ("version", "created_at", "user_profile", "imported_beers", "sessions", "settings", "checksum"):
        assert key in doc
    assert len(doc["checksum"]) == 64
    assert json.loads(backup.export_backup())["imported_beers"][0]["name"] == "A"

def test_restore_into_a_fresh_data_dir(tmp_path, monkeypatch):
    _seed()
    exported = backup.export_backup()

    monkeypatch.setenv("DATA_DIR", str(tmp_path / "other"))
    assert profiles.get_user_profile() is None
    out = backup.restore_backup(exported)
    assert out == {"ok": True, "profile_restored": True, "beers": 1, "sessions": 0}
    assert profiles.get_user_profile()["preferences"]["favorite_styles"] == ["IPA"]
    assert beers.get_imported_beers()[0]["name"] == "A"
    assert sessions.get_sessions() == []

def test_tampered_backup_rejected_unless_unverified():
    _seed()
    doc = backup.create_backup()
    doc["imported_beers"] = []
    with pytest.raises(ValueError, match="checksum"):
        backup.restore_backup(doc)
    assert len(beers.get_imported_beers()) == 1

    assert backup.restore_backup(doc, verify=False)["beers"] == 0
    assert beers.get_imported_beers() == []

@pytest.mark.parametrize("doc", ["not json", "[]", {"version": "1.0.0"}])
def test_malformed_backups(doc):
    with pytest.raises(ValueError, match="Invalid backup"):
        backup.restore_backup(doc)
