# nextpint_backend/app/services/prompts/import_parser.py
from __future__ import annotations

"""
Shape validation for the JSON an AI assistant sends back from the
data-import prompt, and the step that applies a valid payload.

parse_import_data() never raises on malformed input: every problem ends up
in result["errors"].
"""

import json, math, re
from typing import Any, Dict, List, Optional, Tuple

from nextpint_backend.app.schemas import FLAVOR_AXES, IMPORT_SOURCES, ImportSource
from nextpint_backend.app.services.analytics import events as analytics_events
from nextpint_backend.app.services.data_stores import beers, profiles
from nextpint_backend.app.utils.checks import in_range, is_blank, is_number, join_errors
from nextpint_backend.app.utils.logs import get_logger
from nextpint_backend.app.utils.timefmt import now_iso, to_iso

log = get_logger("import_parser")

_FENCE = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)

# camelCase (what the prompt asks for) -> storage field
_PROFILE_KEYS = {
    "favoriteStyles": "favorite_styles",
    "preferredBreweries": "preferred_breweries",
    "avoidList": "avoid_list",
    "locationPreferences": "location_preferences",
    "flavorProfile": "flavor_profile",
    "budgetRange": "budget_range",
}
_BEER_TEXT_KEYS = {
    "name": "name", "brewery": "brewery", "style": "style", "notes": "notes",
    "venue": "venue", "location": "location", "imageUrl": "image_url", "sourceId": "source_id",
}
_DATE_KEYS = ("drankAt", "drank_at", "checkinDate", "checkin_date", "date")


def _pick(obj: Dict[str, Any], *names: str) -> Any:
    for n in names:
        if n in obj:
            return obj[n]
    return None

def _finite(v: Any) -> bool:
    # json.loads accepts NaN and Infinity
    return is_number(v) and math.isfinite(v)

def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()

def _extract_json_text(text: str) -> str:
    m = _FENCE.search(text)
    if m:
        return m.group(1).strip()
    # tolerate chatter around a bare object
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        return text[start:end + 1]
    return text.strip()

def _string_list(value: Any) -> Optional[List[str]]:
    if not isinstance(value, list):
        return None
    return [str(v).strip() for v in value if v is not None and str(v).strip()]

def _parse_profile(raw: Any, errors: List[str]) -> Optional[Dict[str, Any]]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        errors.append("userProfile must be an object")
        return None

    prefs: Dict[str, Any] = {}
    for camel, field in _PROFILE_KEYS.items():
        value = _pick(raw, camel, field)
        if value is None:
            continue
        if field == "flavor_profile":
            if not isinstance(value, dict):
                errors.append("userProfile.flavorProfile must be an object")
                continue
            flavor = {}
            for axis in FLAVOR_AXES:
                v = value.get(axis)
                if v is None:
                    continue
                if not _finite(v):
                    errors.append(f"userProfile.flavorProfile.{axis} must be a number")
                    continue
                flavor[axis] = int(min(5, max(1, round(v))))
            if flavor:
                prefs[field] = flavor
        elif field == "budget_range":
            if not isinstance(value, dict) or not _finite(value.get("min")) or not _finite(value.get("max")):
                errors.append("userProfile.budgetRange must have numeric min and max")
            elif value["min"] < 0:
                errors.append("userProfile.budgetRange.min cannot be negative")
            elif value["max"] < value["min"]:
                errors.append("userProfile.budgetRange.max must not be less than min")
            else:
                prefs[field] = {"min": value["min"], "max": value["max"], "currency": value.get("currency") or "JPY"}
        else:
            items = _string_list(value)
            if items is None:
                errors.append(f"userProfile.{camel} must be an array")
            else:
                prefs[field] = items
    return prefs

def _parse_beer(raw: Any, idx: int, default_source: str) -> Tuple[Optional[Dict[str, Any]], List[str]]:
    where = f"beerHistory[{idx}]"
    if not isinstance(raw, dict):
        return None, [f"{where} must be an object"]

    errors: List[str] = []
    beer: Dict[str, Any] = {}
    for key, field in _BEER_TEXT_KEYS.items():
        value = _pick(raw, key, field)
        if value is not None and str(value).strip():
            beer[field] = str(value).strip()
    for required in ("name", "brewery", "style"):
        if is_blank(beer.get(required)):
            errors.append(f"{where}.{required} is required")

    rating = raw.get("rating", 0)
    if rating is None:
        rating = 0
    if not in_range(rating, 0, 5):
        errors.append(f"{where}.rating must be a number between 0 and 5")
    beer["rating"] = rating

    for key, hi in (("abv", 100), ("ibu", None)):
        value = raw.get(key)
        if value is None:
            continue
        if not _finite(value) or value < 0 or (hi is not None and value > hi):
            errors.append(f"{where}.{key} must be a number" + (f" between 0 and {hi}" if hi else " of 0 or more"))
        else:
            beer[key] = value

    tags = raw.get("tags", [])
    tag_list = _string_list(tags if tags is not None else [])
    if tag_list is None:
        errors.append(f"{where}.tags must be an array")
    else:
        beer["tags"] = tag_list

    when = _pick(raw, *_DATE_KEYS)
    if when is not None:
        iso = to_iso(when)
        if iso is None:
            errors.append(f"{where}.drankAt is not a valid date")
        else:
            beer["checkin_date"] = iso

    source = str(raw.get("source") or "").strip().lower()
    beer["source"] = source if source in IMPORT_SOURCES else default_source
    return beer, errors

def _result(errors, user_profile=None, beer_history=None, metadata=None) -> Dict[str, Any]:
    return {
        "is_valid": not errors,
        "errors": errors,
        "user_profile": user_profile,
        "beer_history": beer_history or [],
        "import_metadata": metadata or {},
    }

def parse_import_data(text: Any) -> Dict[str, Any]:
    if not isinstance(text, str) or not text.strip():
        return _result(["Import data is empty"])
    try:
        doc = json.loads(_extract_json_text(text))
    except json.JSONDecodeError as e:
        return _result([f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})"])
    if not isinstance(doc, dict):
        return _result(["Import data must be a JSON object"])

    errors: List[str] = []
    raw_meta = _pick(doc, "importMetadata", "import_metadata")
    metadata: Dict[str, Any] = {}
    if isinstance(raw_meta, dict):
        metadata = {_snake(k): v for k, v in raw_meta.items()}
    elif raw_meta is not None:
        errors.append("importMetadata must be an object")
    meta_source = str(metadata.get("source") or "").strip().lower()
    default_source = meta_source if meta_source in IMPORT_SOURCES else ImportSource.MANUAL.value

    raw_profile = _pick(doc, "userProfile", "user_profile")
    raw_history = _pick(doc, "beerHistory", "beer_history")
    if raw_profile is None and raw_history is None:
        return _result(["Import data must contain userProfile or beerHistory"], metadata=metadata)

    user_profile = _parse_profile(raw_profile, errors)

    history: List[Dict[str, Any]] = []
    if raw_history is not None:
        if not isinstance(raw_history, list):
            errors.append("beerHistory must be an array")
        else:
            for i, raw in enumerate(raw_history):
                beer, beer_errors = _parse_beer(raw, i, default_source)
                errors.extend(beer_errors)
                if beer is not None and not beer_errors:
                    history.append(beer)

    return _result(errors, user_profile, history, metadata)

def _check_history(history: List[Dict[str, Any]]) -> None:
    # nothing is written unless every beer would pass the store checks
    stamp = now_iso()
    for beer in history:
        staged = {"tags": [], "source": ImportSource.MANUAL.value, **beer, "id": "staged", "imported_at": stamp}
        check = beers.validate_imported_beer(staged)
        if not check["is_valid"]:
            raise ValueError(f"Invalid beer data for {beer.get('name')}: {join_errors(check['errors'])}")

def apply_import(result: Dict[str, Any]) -> Dict[str, Any]:
    """Persist a valid parse result: beers are checked up front, then the profile and beers are written."""
    if not isinstance(result, dict) or not result.get("is_valid"):
        errors = (result or {}).get("errors") if isinstance(result, dict) else None
        raise ValueError(f"Invalid import data: {', '.join(errors or ['not validated'])}")

    history = result.get("beer_history") or []
    _check_history(history)

    prefs = result.get("user_profile")
    profile_imported = False
    if prefs:
        if profiles.has_user_profile():
            profiles.update_user_preferences(prefs)
        else:
            profiles.create_user_profile(prefs)
        profile_imported = True

    counts = {"added": 0, "updated": 0}
    if history:
        counts = beers.merge_imported_beers(history)

    source = (result.get("import_metadata") or {}).get("source") or "unknown"
    analytics_events.track_event("data_import_success", {
        "user_profile_imported": profile_imported,
        "beer_history_count": len(history),
        "source": source,
    })
    log.info("Applied import from %s: profile=%s beers=%s", source, profile_imported, counts)
    return {"ok": True, "profile_imported": profile_imported, **counts, "source": source}


__all__ = ["parse_import_data", "apply_import"]
