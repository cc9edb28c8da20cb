# nextpint_backend/app/services/data_stores/beers.py
from __future__ import annotations

import uuid
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

from nextpint_backend.app.config.manifest import top_n
from nextpint_backend.app.schemas import IMPORT_SOURCES, ImportSource
from nextpint_backend.app.utils.checks import in_range, is_blank, is_number, join_errors
from nextpint_backend.app.utils.logs import get_logger
from nextpint_backend.app.utils.timefmt import now_iso, parse_dt, round_half_up
from . import kv_store
from .kv_store import validation_result

log = get_logger("beers")

STORAGE_KEY = kv_store.STORAGE_KEYS["IMPORTED_BEERS"]

# set once at creation
_IMMUTABLE = ("id", "imported_at")


def _normalize_tags(v):
    if not isinstance(v, list):
        return v
    out, seen = [], set()
    for t in v:
        if t is None:
            continue
        s = str(t).strip()
        if s and s.lower() not in seen:
            seen.add(s.lower())
            out.append(s)
    return out

def _save(beers: List[Dict[str, Any]]) -> None:
    kv_store.set_item(STORAGE_KEY, beers)

def _new_beer(data: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError("beer must be a dict")
    now = now_iso()
    beer = dict(data)
    beer.setdefault("tags", [])
    beer.setdefault("source", ImportSource.MANUAL.value)
    beer["tags"] = _normalize_tags(beer["tags"])
    beer["id"] = str(uuid.uuid4())
    beer["imported_at"] = now
    beer["updated_at"] = now
    return beer


# ---- reads ----

def get_imported_beers() -> List[Dict[str, Any]]:
    beers = kv_store.get_item(STORAGE_KEY, default=[])
    if not isinstance(beers, list):
        log.warning("Ignoring malformed beer history (expected list, got %s)", type(beers).__name__)
        return []
    return [b for b in beers if isinstance(b, dict)]

def get_imported_beer(beer_id: str) -> Optional[Dict[str, Any]]:
    for beer in get_imported_beers():
        if beer.get("id") == beer_id:
            return beer
    return None


# ---- writes ----

def add_imported_beer(beer: Dict[str, Any]) -> Dict[str, Any]:
    new_beer = _new_beer(beer)
    result = validate_imported_beer(new_beer)
    if not result["is_valid"]:
        raise ValueError(f"Invalid beer data: {join_errors(result['errors'])}")

    beers = get_imported_beers()
    beers.append(new_beer)
    _save(beers)
    log.info("Added beer %s (%s)", new_beer["id"], new_beer.get("name"))
    return new_beer

def add_imported_beers(items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    new_beers = [_new_beer(b) for b in items]
    for beer in new_beers:
        result = validate_imported_beer(beer)
        if not result["is_valid"]:
            raise ValueError(f"Invalid beer data for {beer.get('name')}: {join_errors(result['errors'])}")

    beers = get_imported_beers()
    beers.extend(new_beers)
    _save(beers)
    log.info("Added %d beers", len(new_beers))
    return new_beers

def update_imported_beer(beer_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(updates, dict):
        raise TypeError("updates must be a dict")
    beers = get_imported_beers()
    idx = next((i for i, b in enumerate(beers) if b.get("id") == beer_id), None)
    if idx is None:
        raise KeyError(f"beer not found: {beer_id}")

    merged = {**beers[idx], **{k: v for k, v in updates.items() if k not in _IMMUTABLE}}
    if "tags" in updates:
        merged["tags"] = _normalize_tags(merged["tags"])
    merged["updated_at"] = now_iso()

    result = validate_imported_beer(merged)
    if not result["is_valid"]:
        raise ValueError(f"Invalid beer data: {join_errors(result['errors'])}")

    beers[idx] = merged
    _save(beers)
    return merged

def delete_imported_beer(beer_id: str) -> None:
    beers = get_imported_beers()
    kept = [b for b in beers if b.get("id") != beer_id]
    if len(kept) == len(beers):
        raise KeyError(f"beer not found: {beer_id}")
    _save(kept)

def clear_all_beers() -> None:
    kv_store.remove_item(STORAGE_KEY)

def _match_key(beer: Dict[str, Any]) -> tuple:
    return (str(beer.get("name") or "").strip().lower(), str(beer.get("brewery") or "").strip().lower())

def merge_imported_beers(items: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """
    Import-flow merge: a beer whose (name, brewery) matches a stored one
    refreshes that record; everything else is appended as new.
    Validation is all-or-nothing, as with add_imported_beers.
    """
    beers = get_imported_beers()
    index = {_match_key(b): i for i, b in enumerate(beers)}
    added = updated = 0
    now = now_iso()

    staged: List[Dict[str, Any]] = []
    for item in items:
        key = _match_key(item)
        if key in index:
            i = index[key]
            patch = {k: v for k, v in item.items() if k not in _IMMUTABLE and v is not None}
            if "tags" in patch:
                patch["tags"] = _normalize_tags(list(beers[i].get("tags") or []) + list(patch["tags"] or []))
            merged = {**beers[i], **patch, "updated_at": now}
            staged.append(merged)
            beers[i] = merged
            updated += 1
        else:
            new_beer = _new_beer(item)
            staged.append(new_beer)
            beers.append(new_beer)
            index[key] = len(beers) - 1
            added += 1

    for beer in staged:
        result = validate_imported_beer(beer)
        if not result["is_valid"]:
            raise ValueError(f"Invalid beer data for {beer.get('name')}: {join_errors(result['errors'])}")

    _save(beers)
    log.info("Merged beer import: %d added, %d updated", added, updated)
    return {"added": added, "updated": updated}


# ---- queries ----

def _beer_date(beer: Dict[str, Any]):
    return parse_dt(beer.get("checkin_date")) or parse_dt(beer.get("imported_at"))

def filter_beers(flt: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    flt = flt or {}
    styles = flt.get("styles") or []
    breweries = flt.get("breweries") or []
    sources = [getattr(s, "value", s) for s in (flt.get("sources") or [])]
    rating_range = flt.get("rating_range")
    date_range = flt.get("date_range")
    search = (flt.get("search_text") or "").strip().lower()

    start = end = None
    if date_range:
        start, end = parse_dt(date_range.get("start")), parse_dt(date_range.get("end"))

    def match(beer: Dict[str, Any]) -> bool:
        if styles and beer.get("style") not in styles:
            return False
        if breweries and beer.get("brewery") not in breweries:
            return False
        if rating_range:
            rating = beer.get("rating")
            if not is_number(rating) or rating < rating_range["min"] or rating > rating_range["max"]:
                return False
        if date_range:
            when = _beer_date(beer)
            if when is None or (start and when < start) or (end and when > end):
                return False
        if sources and beer.get("source") not in sources:
            return False
        if search:
            tags = beer.get("tags") if isinstance(beer.get("tags"), list) else []
            hay = " ".join(
                [str(beer.get(k) or "") for k in ("name", "brewery", "style", "notes")] + [str(t) for t in tags]
            ).lower()
            if search not in hay:
                return False
        return True

    return [b for b in get_imported_beers() if match(b)]

def get_unique_styles() -> List[str]:
    return sorted({b["style"] for b in get_imported_beers() if b.get("style")})

def get_unique_breweries() -> List[str]:
    return sorted({b["brewery"] for b in get_imported_beers() if b.get("brewery")})

def _top_counts(values: Iterable[str], n: int) -> List[Dict[str, Any]]:
    # Counter.most_common keeps first-seen order on ties
    return [{"name": name, "count": count} for name, count in Counter(values).most_common(n)]

def get_beer_stats() -> Dict[str, Any]:
    beers = get_imported_beers()
    if not beers:
        return {"total_count": 0, "average_rating": 0, "top_breweries": [], "top_styles": []}

    ratings = [b["rating"] for b in beers if is_number(b.get("rating"))]
    average = sum(ratings) / len(beers) if ratings else 0
    n = top_n()
    return {
        "total_count": len(beers),
        "average_rating": round_half_up(average, 1),
        "top_breweries": _top_counts((b.get("brewery") for b in beers if b.get("brewery")), n),
        "top_styles": _top_counts((b.get("style") for b in beers if b.get("style")), n),
    }


# ---- validation ----

def validate_imported_beer(beer: Dict[str, Any]) -> Dict[str, Any]:
    errors: List[str] = []

    if not beer.get("id"):
        errors.append("Beer ID is required")
    if is_blank(beer.get("name")):
        errors.append("Beer name is required")
    if is_blank(beer.get("brewery")):
        errors.append("Brewery name is required")
    if is_blank(beer.get("style")):
        errors.append("Beer style is required")
    if not in_range(beer.get("rating"), 0, 5):
        errors.append("Rating must be a number between 0 and 5")
    if beer.get("abv") is not None and not in_range(beer.get("abv"), 0, 100):
        errors.append("ABV must be a number between 0 and 100")
    if beer.get("ibu") is not None and not (is_number(beer.get("ibu")) and beer["ibu"] >= 0):
        errors.append("IBU must be a positive number")
    if beer.get("source") not in IMPORT_SOURCES:
        errors.append("Invalid import source")
    if not isinstance(beer.get("tags"), list):
        errors.append("Tags must be an array")
    if not beer.get("imported_at"):
        errors.append("Import date is required")

    return validation_result(errors)


__all__ = [
    "STORAGE_KEY",
    "get_imported_beers", "get_imported_beer",
    "add_imported_beer", "add_imported_beers", "update_imported_beer",
    "delete_imported_beer", "clear_all_beers", "merge_imported_beers",
    "filter_beers", "get_unique_styles", "get_unique_breweries", "get_beer_stats",
    "validate_imported_beer",
]
