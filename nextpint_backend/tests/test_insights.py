from datetime import datetime, timezone

import pytest

from nextpint_backend.app.services.analytics import insights
from nextpint_backend.app.services.data_stores import beers as beer_store

def _b(name, style, brewery="Far Yeast", when=None):
    return {"name": name, "style": style, "brewery": brewery, "rating": 4, "checkin_date": when}

@pytest.mark.parametrize("month, season", [(1, "Winter"), (3, "Spring"), (6, "Summer"), (9, "Fall"), (12, "Winter")])
def test_season_for_month(month, season):
    assert insights.season_for_month(month) == season

def test_favorites_ranked_by_count():
    rows = [_b("a", "Stout"), _b("b", "IPA", "Baird"), _b("c", "IPA", "Baird")]
    assert insights.favorite_styles(rows) == ["IPA", "Stout"]
    assert insights.brewery_preferences(rows) == ["Baird", "Far Yeast"]

def test_tasting_patterns():
    rows = [
        _b("a", "IPA", when="2024-06-03"),   # Monday
        _b("b", "IPA", when="2024-06-10"),   # Monday
        _b("c", "IPA", when="2024-12-07"),   # Saturday
        _b("d", "IPA"),
    ]
    out = insights.tasting_patterns(rows)
    assert out["most_active_day"] == "Monday"
    assert out["preferred_time"] == "Evening"
    assert out["seasonal_trends"] == {"Summer": 2, "Winter": 1}

    assert insights.tasting_patterns([])["most_active_day"] == "Saturday"

def test_discovery_metrics():
    now = datetime(2024, 6, 15, tzinfo=timezone.utc)
    rows = [
        _b("a", "IPA", when="2024-06-03"),
        _b("b", "Stout", when="2024-06-10"),
        _b("c", "IPA", when="2024-05-30"),
        _b("d", "Lager", when="2024-05-01"),
    ]
    out = insights.discovery_metrics(rows, [], now=now)
    assert out == {"new_styles_this_month": 2, "adventurousness_score": 75, "consistency_score": 0}

    empty = insights.discovery_metrics([], [], now=now)
    assert empty == {"new_styles_this_month": 0, "adventurousness_score": 0, "consistency_score": 100}

def test_personality_and_related_styles():
    explorer = [_b("a", "IPA"), _b("b", "Stout"), _b("c", "Sour")]
    balanced = [_b("a", "IPA"), _b("b", "IPA"), _b("c", "Stout"), _b("d", "Stout")]
    loyal = [_b(x, "IPA") for x in "abcd"]
    assert insights.personality_type(explorer) == insights.PERSONALITY_EXPLORER
    assert insights.personality_type(balanced) == insights.PERSONALITY_BALANCED
    assert insights.personality_type(loyal) == insights.PERSONALITY_LOYALIST

    assert insights.related_styles(["IPA", "Stout"]) == ["Double IPA", "Session IPA", "Hazy IPA"]
    assert insights.related_styles(["Sour"]) == []

def test_get_insights_reads_stores():
    beer_store.add_imported_beers([
        {"name": "A", "brewery": "Far Yeast", "style": "IPA", "rating": 4},
        {"name": "B", "brewery": "Baird", "style": "Stout", "rating": 3},
    ])
    out = insights.get_insights()
    assert out["total_beers"] == 2
    assert out["total_sessions"] == 0
    assert out["favorite_styles"] == ["IPA", "Stout"]
    assert out["recommendations"]["breweries_to_explore"] == insights.BREWERIES_TO_EXPLORE
    assert out["recommendations"]["next_styles"][0] == "Double IPA"
