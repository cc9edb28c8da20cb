# nextpint_backend/app/services/data_stores/app_settings.py
from __future__ import annotations

import json
from typing import Any, Dict, List

from nextpint_backend.app.config.manifest import APP_VERSION
from nextpint_backend.app.utils.checks import is_number, join_errors
from nextpint_backend.app.utils.timefmt import now_iso
from . import kv_store
from .kv_store import validation_result

STORAGE_KEY = kv_store.STORAGE_KEYS["APP_SETTINGS"]

_BOOL_FIELDS = {
    "onboarding_completed": "Onboarding completed",
    "data_backup_enabled": "Data backup enabled",
    "analytics_enabled": "Analytics enabled",
    "crash_reporting_enabled": "Crash reporting enabled",
    "auto_update_templates": "Auto update templates",
}


def get_default_settings() -> Dict[str, Any]:
    now = now_iso()
    return {
        "version": APP_VERSION,
        "first_launch": now,
        "last_launch": now,
        "launch_count": 1,
        "onboarding_completed": False,
        "data_backup_enabled": True,
        "analytics_enabled": False,
        "crash_reporting_enabled": False,
        "auto_update_templates": True,
        "cache_settings": {
            "max_cache_size": 10 * 1024 * 1024,
            "cache_retention_days": 30,
        },
    }


def _stored() -> Dict[str, Any] | None:
    settings = kv_store.get_item(STORAGE_KEY)
    return settings if isinstance(settings, dict) else None

def get_settings() -> Dict[str, Any]:
    return _stored() or get_default_settings()

def save_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    result = validate_settings(settings)
    if not result["is_valid"]:
        raise ValueError(f"Invalid settings: {join_errors(result['errors'])}")
    kv_store.set_item(STORAGE_KEY, settings)
    return settings

def update_settings(updates: Dict[str, Any]) -> Dict[str, Any]:
    return save_settings({**get_settings(), **(updates or {})})

def initialize_settings() -> Dict[str, Any]:
    """Called once per app start: bumps the launch counter or seeds defaults."""
    existing = _stored()
    if existing:
        existing["launch_count"] = int(existing.get("launch_count") or 0) + 1
        existing["last_launch"] = now_iso()
        return save_settings(existing)
    return save_settings(get_default_settings())

def complete_onboarding() -> Dict[str, Any]:
    return update_settings({"onboarding_completed": True})

def reset_onboarding() -> Dict[str, Any]:
    return update_settings({"onboarding_completed": False})

def is_first_launch() -> bool:
    return get_settings().get("launch_count") == 1

def get_storage_info() -> Dict[str, Any]:
    cache = get_settings().get("cache_settings") or {}
    return {
        "used_size": kv_store.get_storage_size()["used_size"],
        "max_size": cache.get("max_cache_size"),
        "retention_days": cache.get("cache_retention_days"),
    }

def update_cache_settings(partial: Dict[str, Any]) -> Dict[str, Any]:
    current = get_settings()
    return update_settings({"cache_settings": {**(current.get("cache_settings") or {}), **(partial or {})}})

def reset_to_defaults() -> Dict[str, Any]:
    current = get_settings()
    reset = {
        **get_default_settings(),
        # keep launch history and onboarding state
        "first_launch": current.get("first_launch"),
        "launch_count": current.get("launch_count"),
        "onboarding_completed": current.get("onboarding_completed"),
        "last_launch": now_iso(),
    }
    return save_settings(reset)

def export_settings() -> str:
    return json.dumps(get_settings(), ensure_ascii=False, indent=2)

def import_settings(settings_json: str) -> Dict[str, Any]:
    try:
        settings = json.loads(settings_json)
        if not isinstance(settings, dict):
            raise ValueError("settings must be a JSON object")
        result = validate_settings(settings)
        if not result["is_valid"]:
            raise ValueError(f"Invalid settings format: {join_errors(result['errors'])}")
    except (TypeError, ValueError) as e:
        raise ValueError(f"Failed to import settings: {e}") from e
    return save_settings(settings)

def clear_settings() -> None:
    kv_store.remove_item(STORAGE_KEY)


def validate_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    errors: List[str] = []

    if not settings.get("version"):
        errors.append("Version is required")
    if not settings.get("first_launch"):
        errors.append("First launch date is required")
    if not settings.get("last_launch"):
        errors.append("Last launch date is required")

    count = settings.get("launch_count")
    if not is_number(count) or count < 0:
        errors.append("Launch count must be a non-negative number")

    for field, label in _BOOL_FIELDS.items():
        if not isinstance(settings.get(field), bool):
            errors.append(f"{label} must be a boolean")

    cache = settings.get("cache_settings")
    if not isinstance(cache, dict):
        errors.append("Cache settings are required")
    else:
        size = cache.get("max_cache_size")
        if not is_number(size) or size <= 0:
            errors.append("Max cache size must be a positive number")
        days = cache.get("cache_retention_days")
        if not is_number(days) or days <= 0:
            errors.append("Cache retention days must be a positive number")

    return validation_result(errors)


__all__ = [
    "STORAGE_KEY", "get_default_settings",
    "get_settings", "save_settings", "update_settings", "initialize_settings",
    "complete_onboarding", "reset_onboarding", "is_first_launch", "get_storage_info",
    "update_cache_settings", "reset_to_defaults", "export_settings", "import_settings",
    "clear_settings", "validate_settings",
]
