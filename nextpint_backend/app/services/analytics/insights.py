# nextpint_backend/app/services/analytics/insights.py
from __future__ import annotations

"""
Insight generation: rudimentary statistics derived from beer history and
search sessions. The aggregation helpers are pure (lists in, dicts out);
get_insights() wires them to the local stores.
"""

from collections import Counter
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from nextpint_backend.app.config.manifest import top_n
from nextpint_backend.app.services.data_stores import beers as beer_store
from nextpint_backend.app.services.data_stores import sessions as session_store
from nextpint_backend.app.utils.timefmt import parse_dt, round_half_up, utcnow

# Monday-first, matching datetime.weekday()
DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
DEFAULT_ACTIVE_DAY = "Saturday"
DEFAULT_PREFERRED_TIME = "Evening"

RELATED_STYLES: Dict[str, List[str]] = {
    "IPA": ["Double IPA", "Session IPA", "Hazy IPA", "Belgian IPA"],
    "Stout": ["Imperial Stout", "Coffee Stout", "Chocolate Stout", "Milk Stout"],
    "Pilsner": ["Czech Pilsner", "German Pilsner", "Italian Pilsner"],
    "Wheat": ["Hefeweizen", "Witbier", "American Wheat", "Berliner Weisse"],
    "Porter": ["Robust Porter", "Smoked Porter", "Baltic Porter"],
    "Lager": ["Vienna Lager", "Märzen", "Schwarzbier", "Helles"],
}
BREWERIES_TO_EXPLORE = ["Local Craft Breweries", "Award Winners", "Seasonal Specialists"]

PERSONALITY_EXPLORER = "Explorer - You love trying new styles and breweries"
PERSONALITY_BALANCED = "Balanced Drinker - You enjoy both favorites and new discoveries"
PERSONALITY_LOYALIST = "Loyalist - You know what you like and stick with favorites"


def _drank_at(beer: Dict[str, Any]) -> Optional[datetime]:
    return parse_dt(beer.get("checkin_date") or beer.get("drank_at"))

def _top_names(values: Iterable[Any], n: Optional[int] = None) -> List[str]:
    counts = Counter(v for v in values if v)
    return [name for name, _ in counts.most_common(n or top_n())]

def season_for_month(month: int) -> str:
    """month is 1-12."""
    if 3 <= month <= 5:
        return "Spring"
    if 6 <= month <= 8:
        return "Summer"
    if 9 <= month <= 11:
        return "Fall"
    return "Winter"


def favorite_styles(beers: List[Dict[str, Any]]) -> List[str]:
    return _top_names(b.get("style") for b in beers)

def brewery_preferences(beers: List[Dict[str, Any]]) -> List[str]:
    return _top_names(b.get("brewery") for b in beers)

def tasting_patterns(beers: List[Dict[str, Any]]) -> Dict[str, Any]:
    days: Counter = Counter()
    seasons: Counter = Counter()
    for beer in beers:
        when = _drank_at(beer)
        if when is None:
            continue
        days[DAY_NAMES[when.weekday()]] += 1
        seasons[season_for_month(when.month)] += 1

    most_active = days.most_common(1)
    return {
        "most_active_day": most_active[0][0] if most_active else DEFAULT_ACTIVE_DAY,
        # no time-of-day is recorded for check-ins
        "preferred_time": DEFAULT_PREFERRED_TIME,
        "seasonal_trends": dict(seasons),
    }

def discovery_metrics(beers: List[Dict[str, Any]], sessions: List[Dict[str, Any]],
                      now: Optional[datetime] = None) -> Dict[str, int]:
    now = parse_dt(now) or utcnow()
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    recent_styles = set()
    for b in beers:
        when = _drank_at(b)
        if when is not None and when >= month_start:
            recent_styles.add(b.get("style"))
    total = max(len(beers), 1)
    distinct_styles = len({b.get("style") for b in beers})
    distinct_names = len({b.get("name") for b in beers})

    adventurousness = min(100.0, distinct_styles / total * 100)
    consistency = max(0.0, 100 - distinct_names / total * 100)
    return {
        "new_styles_this_month": len(recent_styles),
        "adventurousness_score": int(round_half_up(adventurousness)),
        "consistency_score": int(round_half_up(consistency)),
    }

def related_styles(favorites: List[str], limit: int = 3) -> List[str]:
    out: List[str] = []
    for style in favorites:
        for rec in RELATED_STYLES.get(style, []):
            if rec not in out:
                out.append(rec)
    return out[:limit]

def personality_type(beers: List[Dict[str, Any]]) -> str:
    variety = len({b.get("style") for b in beers}) / max(len(beers), 1)
    if variety > 0.7:
        return PERSONALITY_EXPLORER
    if variety > 0.4:
        return PERSONALITY_BALANCED
    return PERSONALITY_LOYALIST

def recommendations(beers: List[Dict[str, Any]], sessions: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "next_styles": related_styles(favorite_styles(beers)),
        "breweries_to_explore": list(BREWERIES_TO_EXPLORE),
        "personality_type": personality_type(beers),
    }

def get_insights(now: Optional[datetime] = None) -> Dict[str, Any]:
    beers = beer_store.get_imported_beers()
    sessions = session_store.get_sessions()
    return {
        "total_beers": len(beers),
        "total_sessions": len(sessions),
        "favorite_styles": favorite_styles(beers),
        "brewery_preferences": brewery_preferences(beers),
        "tasting_patterns": tasting_patterns(beers),
        "discovery_metrics": discovery_metrics(beers, sessions, now),
        "recommendations": recommendations(beers, sessions),
    }


__all__ = [
    "season_for_month", "favorite_styles", "brewery_preferences", "tasting_patterns",
    "discovery_metrics", "related_styles", "personality_type", "recommendations", "get_insights",
]
