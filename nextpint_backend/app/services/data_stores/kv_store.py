# nextpint_backend/app/services/data_stores/kv_store.py
from __future__ import annotations

"""
Key-value storage adapter: one JSON document per key under
<DATA_DIR>/storage/<key>.json.

Reads never raise: a missing or corrupt document reads as `default`
(corruption is logged). Writes raise StorageError so callers can surface
the failure.
"""

import re
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, List

from nextpint_backend.app.config.manifest import storage_quota_bytes
from nextpint_backend.app.config.paths import ensure_data_dir_exists
from nextpint_backend.app.utils.logs import get_logger
from .io_utils import atomic_write, dump_json, read_json

log = get_logger("storage")

_IO_LOCK = RLock()
_KEY_PAT = re.compile(r"^[A-Za-z0-9_.-]+$")

STORAGE_KEYS: Dict[str, str] = {
    "USER_PROFILE": "user_profile",
    "IMPORTED_BEERS": "imported_beers",
    "SEARCH_SESSIONS": "search_sessions",
    "PROMPT_TEMPLATES_CACHE": "prompt_templates_cache",
    "APP_SETTINGS": "app_settings",
    "ANALYTICS_EVENTS": "analytics_events",
}


class StorageError(RuntimeError):
    """Raised when a write/remove against local storage fails."""


def _storage_dir() -> Path:
    return ensure_data_dir_exists("storage")

def _key_path(key: str) -> Path:
    if not isinstance(key, str) or not _KEY_PAT.match(key) or key in (".", ".."):
        raise ValueError(f"invalid storage key: {key!r}")
    return _storage_dir() / f"{key}.json"


def set_item(key: str, value: Any) -> None:
    path = _key_path(key)
    try:
        text = dump_json(value)
        with _IO_LOCK:
            atomic_write(path, text)
    except (TypeError, ValueError, OSError) as e:
        log.error("Error saving data for key %s: %s", key, e)
        raise StorageError(f"Failed to save data: {e}") from e

def get_item(key: str, default: Any = None) -> Any:
    path = _key_path(key)
    try:
        with _IO_LOCK:
            return read_json(path, default=default)
    except (ValueError, OSError) as e:
        log.error("Error retrieving data for key %s: %s", key, e)
        return default

def remove_item(key: str) -> None:
    path = _key_path(key)
    try:
        with _IO_LOCK:
            path.unlink(missing_ok=True)
    except OSError as e:
        log.error("Error removing data for key %s: %s", key, e)
        raise StorageError(f"Failed to remove data: {e}") from e

def get_all_keys() -> List[str]:
    try:
        return sorted(p.stem for p in _storage_dir().glob("*.json"))
    except OSError as e:
        log.error("Error getting all keys: %s", e)
        return []

def clear() -> None:
    for key in get_all_keys():
        remove_item(key)

def get_storage_size() -> Dict[str, int]:
    """Bytes used by stored documents vs. the nominal quota."""
    try:
        used = sum(p.stat().st_size for p in _storage_dir().glob("*.json"))
    except OSError as e:
        log.error("Error calculating storage size: %s", e)
        return {"used_size": 0, "total_size": 0}
    return {"used_size": int(used), "total_size": storage_quota_bytes()}

def validate_data(data: Any, validator: Callable[[Any], Dict[str, Any]]) -> Dict[str, Any]:
    try:
        return validator(data)
    except Exception as e:  # validators are caller-supplied
        return {"is_valid": False, "errors": [f"Validation error: {e}"]}

def get_storage_keys() -> Dict[str, str]:
    return dict(STORAGE_KEYS)


def validation_result(errors: List[str]) -> Dict[str, Any]:
    return {"is_valid": not errors, "errors": list(errors)}


__all__ = [
    "STORAGE_KEYS", "StorageError",
    "set_item", "get_item", "remove_item", "get_all_keys", "clear",
    "get_storage_size", "validate_data", "get_storage_keys", "validation_result",
]
