import json

import pytest

from nextpint_backend.app.services.analytics import events
from nextpint_backend.app.services.data_stores import beers, profiles
from nextpint_backend.app.services.prompts.import_parser import apply_import, parse_import_data

PAYLOAD = {
    "userProfile": {
        "favoriteStyles": ["IPA", "Saison"],
        "preferredBreweries": ["Far Yeast"],
        "flavorProfile": {"hoppy": 7, "malty": 2},
    },
    "beerHistory": [
        {"name": "Hazy Days", "brewery": "Far Yeast", "style": "IPA", "rating": 4.5,
         "drankAt": "2024-06-01", "tags": ["hazy"], "imageUrl": "http://x/y.png"},
        {"name": "Saison Du", "brewery": "Baird", "style": "Saison", "source": "ratebeer"},
    ],
    "importMetadata": {"source": "untappd", "exportedAt": "2024-06-30"},
}

def test_parses_fenced_reply_with_chatter():
    text = "Sure! Here you go:\n```json\n" + json.dumps(PAYLOAD) + "\n```\nEnjoy."
    result = parse_import_data(text)
    assert result["is_valid"], result["errors"]

    prefs = result["user_profile"]
    assert prefs["favorite_styles"] == ["IPA", "Saison"]
    assert prefs["flavor_profile"] == {"hoppy": 5, "malty": 2}

    first, second = result["beer_history"]
    assert first["checkin_date"].startswith("2024-06-01")
    assert first["image_url"] == "http://x/y.png"
    assert first["source"] == "untappd"
    assert second["source"] == "ratebeer"
    assert second["rating"] == 0 and second["tags"] == []
    assert result["import_metadata"] == {"source": "untappd", "exported_at": "2024-06-30"}

def test_bare_object_and_snake_case_keys():
    text = 'noise {"beer_history": [{"name": "A", "brewery": "B", "style": "C", "source": "myspace"}]} noise'
    result = parse_import_data(text)
    assert result["is_valid"]
    assert result["user_profile"] is None
    assert result["beer_history"][0]["source"] == "manual"

def test_collects_per_beer_errors():
    doc = {"beerHistory": [
        {"name": "ok", "brewery": "b", "style": "s"},
        {"brewery": "b", "style": "s", "rating": 9},
        "not an object",
    ]}
    result = parse_import_data(json.dumps(doc))
    assert result["is_valid"] is False
    assert "beerHistory[1].name is required" in result["errors"]
    assert "beerHistory[1].rating must be a number between 0 and 5" in result["errors"]
    assert "beerHistory[2] must be an object" in result["errors"]
    assert [b["name"] for b in result["beer_history"]] == ["ok"]

@pytest.mark.parametrize("text, message", [
    ("", "Import data is empty"),
    ("[1, 2]", "Import data must be a JSON object"),
    ('{"hello": 1}', "Import data must contain userProfile or beerHistory"),
])
def test_rejects_unusable_documents(text, message):
    result = parse_import_data(text)
    assert result["is_valid"] is False
    assert result["errors"] == [message]

def test_invalid_json_reports_position():
    result = parse_import_data('{"beerHistory": [}')
    assert result["is_valid"] is False
    assert result["errors"][0].startswith("Invalid JSON")

def test_apply_creates_profile_and_merges_beers():
    result = parse_import_data(json.dumps(PAYLOAD))
    out = apply_import(result)
    assert out == {"ok": True, "profile_imported": True, "added": 2, "updated": 0, "source": "untappd"}

    prefs = profiles.get_user_profile()["preferences"]
    assert prefs["flavor_profile"]["hoppy"] == 5
    assert prefs["flavor_profile"]["bitter"] == 3
    assert len(beers.get_imported_beers()) == 2

    # a second import of the same history refreshes instead of duplicating
    again = apply_import(result)
    assert again["added"] == 0 and again["updated"] == 2
    assert len(beers.get_imported_beers()) == 2
    assert len(events.get_events_by_type("data_import_success")) == 2

def test_apply_refuses_invalid_result():
    with pytest.raises(ValueError, match="Invalid import data"):
        apply_import(parse_import_data("[]"))
    assert beers.get_imported_beers() == []

@pytest.mark.parametrize("value", ["Infinity", "-Infinity", "NaN"])
def test_non_finite_flavor_values_are_errors(value):
    result = parse_import_data('{"userProfile": {"flavorProfile": {"hoppy": %s, "malty": 4}}}' % value)
    assert result["is_valid"] is False
    assert result["errors"] == ["userProfile.flavorProfile.hoppy must be a number"]

@pytest.mark.parametrize("field", ["abv", "ibu"])
def test_non_finite_beer_numbers_are_errors(field):
    text = '{"beerHistory": [{"name": "A", "brewery": "B", "style": "IPA", "%s": NaN}]}' % field
    result = parse_import_data(text)
    assert result["is_valid"] is False
    assert result["errors"][0].startswith(f"beerHistory[0].{field} must be a number")
    assert result["beer_history"] == []

@pytest.mark.parametrize("budget, message", [
    ({"min": -1, "max": 100}, "userProfile.budgetRange.min cannot be negative"),
    ({"min": 5000, "max": 100}, "userProfile.budgetRange.max must not be less than min"),
    ({"min": 0}, "userProfile.budgetRange must have numeric min and max"),
])
def test_budget_range_checked_like_the_profile_store(budget, message):
    result = parse_import_data(json.dumps({"userProfile": {"budgetRange": budget}}))
    assert result["is_valid"] is False
    assert result["errors"] == [message]

def test_valid_budget_range_is_kept():
    result = parse_import_data(json.dumps({"userProfile": {"budgetRange": {"min": 500, "max": 3000}}}))
    assert result["is_valid"]
    assert result["user_profile"]["budget_range"] == {"min": 500, "max": 3000, "currency": "JPY"}

def test_apply_writes_nothing_when_a_beer_would_be_rejected():
    result = {
        "is_valid": True,
        "errors": [],
        "user_profile": {"favorite_styles": ["IPA"]},
        "beer_history": [
            {"name": "Good", "brewery": "B", "style": "IPA", "rating": 4},
            {"name": "A", "brewery": "B", "style": "IPA", "rating": 4, "abv": float("nan")},
        ],
        "import_metadata": {},
    }
    with pytest.raises(ValueError, match="Invalid beer data for A"):
        apply_import(result)
    assert profiles.get_user_profile() is None
    assert beers.get_imported_beers() == []
    assert events.get_events_by_type("data_import_success") == []
