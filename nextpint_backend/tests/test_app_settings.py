import json

import pytest

from nextpint_backend.app.services.data_stores import app_settings

def test_defaults_when_nothing_stored():
    s = app_settings.get_settings()
    assert s["launch_count"] == 1
    assert s["onboarding_completed"] is False
    assert s["cache_settings"] == {"max_cache_size": 10 * 1024 * 1024, "cache_retention_days": 30}
    assert app_settings.is_first_launch()

def test_initialize_counts_launches():
    first = app_settings.initialize_settings()
    assert first["launch_count"] == 1
    second = app_settings.initialize_settings()
    assert second["launch_count"] == 2
    assert second["first_launch"] == first["first_launch"]
    assert not app_settings.is_first_launch()

def test_onboarding_flags():
    app_settings.initialize_settings()
    assert app_settings.complete_onboarding()["onboarding_completed"] is True
    assert app_settings.reset_onboarding()["onboarding_completed"] is False

def test_update_rejects_bad_types():
    app_settings.initialize_settings()
    with pytest.raises(ValueError, match="Analytics enabled must be a boolean"):
        app_settings.update_settings({"analytics_enabled": "yes"})

def test_cache_settings_partial_update_and_storage_info():
    app_settings.initialize_settings()
    out = app_settings.update_cache_settings({"cache_retention_days": 7})
    assert out["cache_settings"] == {"max_cache_size": 10 * 1024 * 1024, "cache_retention_days": 7}
    with pytest.raises(ValueError):
        app_settings.update_cache_settings({"max_cache_size": 0})

    info = app_settings.get_storage_info()
    assert info["used_size"] > 0
    assert info["retention_days"] == 7

def test_reset_keeps_launch_history_and_onboarding():
    app_settings.initialize_settings()
    app_settings.initialize_settings()
    app_settings.complete_onboarding()
    app_settings.update_settings({"analytics_enabled": True})

    reset = app_settings.reset_to_defaults()
    assert reset["launch_count"] == 2
    assert reset["onboarding_completed"] is True
    assert reset["analytics_enabled"] is False

def test_export_import_roundtrip_and_errors():
    app_settings.initialize_settings()
    app_settings.complete_onboarding()
    exported = app_settings.export_settings()
    app_settings.clear_settings()
    assert app_settings.get_settings()["onboarding_completed"] is False

    assert app_settings.import_settings(exported)["onboarding_completed"] is True

    with pytest.raises(ValueError, match="Failed to import settings"):
        app_settings.import_settings("{oops")
    bad = json.loads(exported)
    bad["launch_count"] = -1
    with pytest.raises(ValueError, match="Failed to import settings"):
        app_settings.import_settings(json.dumps(bad))
