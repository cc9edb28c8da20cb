import pytest

from nextpint_backend.app.services.data_stores import profiles

def test_no_profile_initially():
    assert profiles.get_user_profile() is None
    assert profiles.has_user_profile() is False
    with pytest.raises(KeyError):
        profiles.update_user_preferences({"favorite_styles": ["IPA"]})

def test_create_with_partial_preferences_keeps_defaults():
    p = profiles.create_user_profile({"favorite_styles": ["IPA"], "flavor_profile": {"hoppy": 5}})
    prefs = p["preferences"]
    assert prefs["favorite_styles"] == ["IPA"]
    assert prefs["flavor_profile"]["hoppy"] == 5
    assert prefs["flavor_profile"]["malty"] == 3
    assert prefs["budget_range"] == {"min": 0, "max": 10000, "currency": "JPY"}
    assert p["settings"]["language"] == "ja-JP"
    assert profiles.has_user_profile()

def test_update_preferences_merges_and_stamps():
    p = profiles.create_user_profile()
    out = profiles.update_user_preferences({"budget_range": {"max": 3000}, "avoid_list": ["smoked"]})
    assert out["id"] == p["id"]
    assert out["preferences"]["budget_range"] == {"min": 0, "max": 3000, "currency": "JPY"}
    assert out["preferences"]["avoid_list"] == ["smoked"]
    assert out["updated_at"] >= p["updated_at"]

def test_invalid_preferences_rejected():
    profiles.create_user_profile()
    with pytest.raises(ValueError, match="hoppy must be a number between 1 and 5"):
        profiles.update_user_preferences({"flavor_profile": {"hoppy": 9}})
    with pytest.raises(ValueError, match="Budget maximum"):
        profiles.update_user_preferences({"budget_range": {"min": 500, "max": 100}})
    # the stored profile is unchanged
    assert profiles.get_user_profile()["preferences"]["flavor_profile"]["hoppy"] == 3

def test_update_settings_and_delete():
    profiles.create_user_profile()
    out = profiles.update_user_settings({"theme": "dark"})
    assert out["settings"]["theme"] == "dark"
    assert out["settings"]["notifications"] is True
    profiles.delete_user_profile()
    assert profiles.get_user_profile() is None

def test_validate_user_profile_reports_missing_parts():
    result = profiles.validate_user_profile({})
    assert result["is_valid"] is False
    assert "User ID is required" in result["errors"]
    assert "Preferences are required" in result["errors"]
