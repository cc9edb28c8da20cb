# nextpint_backend/app/services/data_stores/profiles.py
from __future__ import annotations

import copy, uuid
from typing import Any, Dict, List, Optional

from nextpint_backend.app.config.manifest import DATA_VERSION, SUPPORTED_AI_SERVICES
from nextpint_backend.app.schemas import FLAVOR_AXES
from nextpint_backend.app.utils.checks import in_range, is_number, join_errors
from nextpint_backend.app.utils.logs import get_logger
from nextpint_backend.app.utils.timefmt import now_iso
from . import kv_store
from .kv_store import validation_result

log = get_logger("profiles")

STORAGE_KEY = kv_store.STORAGE_KEYS["USER_PROFILE"]


def get_default_preferences() -> Dict[str, Any]:
    return {
        "favorite_styles": [],
        "flavor_profile": {axis: 3 for axis in FLAVOR_AXES},
        "avoid_list": [],
        "preferred_breweries": [],
        "budget_range": {"min": 0, "max": 10000, "currency": "JPY"},
        "location_preferences": [],
    }

def get_default_user_settings() -> Dict[str, Any]:
    return {
        "language": "ja-JP",
        "theme": "auto",
        "notifications": True,
        "data_retention_days": 365,
        "ai_preference": list(SUPPORTED_AI_SERVICES),
    }


def _merge_preferences(base: Dict[str, Any], patch: Dict[str, Any]) -> Dict[str, Any]:
    # one level deep: a partial flavor_profile/budget_range keeps the other axes
    out = copy.deepcopy(base)
    for k, v in copy.deepcopy(patch).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = {**out[k], **v}
        else:
            out[k] = v
    return out


def get_user_profile() -> Optional[Dict[str, Any]]:
    profile = kv_store.get_item(STORAGE_KEY)
    return profile if isinstance(profile, dict) else None

def has_user_profile() -> bool:
    return get_user_profile() is not None

def save_user_profile(profile: Dict[str, Any]) -> Dict[str, Any]:
    result = validate_user_profile(profile)
    if not result["is_valid"]:
        raise ValueError(f"Invalid user profile: {join_errors(result['errors'])}")
    profile = dict(profile)
    profile["updated_at"] = now_iso()
    kv_store.set_item(STORAGE_KEY, profile)
    return profile

def create_user_profile(preferences: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    now = now_iso()
    prefs = _merge_preferences(get_default_preferences(), preferences or {})
    profile = {
        "id": str(uuid.uuid4()),
        "version": DATA_VERSION,
        "preferences": prefs,
        "settings": get_default_user_settings(),
        "created_at": now,
        "updated_at": now,
    }
    saved = save_user_profile(profile)
    log.info("Created user profile %s", saved["id"])
    return saved

def update_user_preferences(preferences: Dict[str, Any]) -> Dict[str, Any]:
    profile = get_user_profile()
    if profile is None:
        raise KeyError("user profile not found")
    profile["preferences"] = _merge_preferences(profile.get("preferences") or {}, preferences or {})
    return save_user_profile(profile)

def update_user_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    profile = get_user_profile()
    if profile is None:
        raise KeyError("user profile not found")
    profile["settings"] = {**(profile.get("settings") or {}), **(settings or {})}
    return save_user_profile(profile)

def delete_user_profile() -> None:
    kv_store.remove_item(STORAGE_KEY)


def validate_user_profile(profile: Dict[str, Any]) -> Dict[str, Any]:
    errors: List[str] = []

    if not profile.get("id"):
        errors.append("User ID is required")
    if not profile.get("version"):
        errors.append("Version is required")

    prefs = profile.get("preferences")
    if not isinstance(prefs, dict):
        errors.append("Preferences are required")
    else:
        flavor = prefs.get("flavor_profile")
        if not isinstance(flavor, dict):
            errors.append("Flavor profile is required")
        else:
            for axis in FLAVOR_AXES:
                if not in_range(flavor.get(axis), 1, 5):
                    errors.append(f"{axis} must be a number between 1 and 5")

        budget = prefs.get("budget_range")
        if not isinstance(budget, dict):
            errors.append("Budget range is required")
        else:
            lo, hi = budget.get("min"), budget.get("max")
            if not is_number(lo) or lo < 0:
                errors.append("Budget minimum cannot be negative")
            if not is_number(hi) or (is_number(lo) and hi < lo):
                errors.append("Budget maximum must be greater than minimum")
            if not budget.get("currency"):
                errors.append("Budget currency is required")

    if not isinstance(profile.get("settings"), dict):
        errors.append("Settings are required")
    if not profile.get("created_at"):
        errors.append("Created date is required")

    return validation_result(errors)


__all__ = [
    "STORAGE_KEY", "get_default_preferences", "get_default_user_settings",
    "get_user_profile", "has_user_profile", "save_user_profile", "create_user_profile",
    "update_user_preferences", "update_user_settings", "delete_user_profile",
    "validate_user_profile",
]
