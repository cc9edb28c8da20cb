# nextpint_backend/app/services/data_stores/backup.py
from __future__ import annotations

import hashlib, json
from typing import Any, Dict, Union

from nextpint_backend.app.config.manifest import DATA_VERSION
from nextpint_backend.app.utils.logs import get_logger
from nextpint_backend.app.utils.timefmt import now_iso
from . import app_settings, beers, kv_store, profiles, sessions

log = get_logger("backup")

_SECTIONS = ("user_profile", "imported_beers", "sessions", "settings")


def _checksum(doc: Dict[str, Any]) -> str:
    body = {k: v for k, v in doc.items() if k != "checksum"}
    canonical = json.dumps(body, sort_keys=True, ensure_ascii=False, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

def create_backup() -> Dict[str, Any]:
    doc = {
        "version": DATA_VERSION,
        "created_at": now_iso(),
        "user_profile": profiles.get_user_profile(),
        "imported_beers": beers.get_imported_beers(),
        "sessions": sessions.get_sessions(),
        "settings": app_settings.get_settings(),
    }
    doc["checksum"] = _checksum(doc)
    return doc

def export_backup() -> str:
    return json.dumps(create_backup(), ensure_ascii=False, indent=2)

def restore_backup(doc: Union[str, Dict[str, Any]], verify: bool = True) -> Dict[str, Any]:
    """
    Write every section of a backup document back to local storage.
    Sections are checked up front so a bad document leaves storage untouched.
    """
    if isinstance(doc, str):
        try:
            doc = json.loads(doc)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid backup: not JSON ({e})") from e
    if not isinstance(doc, dict):
        raise ValueError("Invalid backup: expected an object")

    missing = [k for k in _SECTIONS if k not in doc]
    if missing:
        raise ValueError(f"Invalid backup: missing {', '.join(missing)}")
    if verify and doc.get("checksum") != _checksum(doc):
        raise ValueError("Invalid backup: checksum mismatch")
    if not isinstance(doc["imported_beers"], list) or not isinstance(doc["sessions"], list):
        raise ValueError("Invalid backup: imported_beers and sessions must be lists")

    profile = doc["user_profile"]
    if profile is not None:
        result = profiles.validate_user_profile(profile)
        if not result["is_valid"]:
            raise ValueError(f"Invalid backup: {', '.join(result['errors'])}")
    result = app_settings.validate_settings(doc["settings"] or {})
    if not result["is_valid"]:
        raise ValueError(f"Invalid backup: {', '.join(result['errors'])}")

    if profile is None:
        profiles.delete_user_profile()
    else:
        kv_store.set_item(profiles.STORAGE_KEY, profile)
    kv_store.set_item(beers.STORAGE_KEY, doc["imported_beers"])
    kv_store.set_item(sessions.STORAGE_KEY, doc["sessions"])
    kv_store.set_item(app_settings.STORAGE_KEY, doc["settings"])

    counts = {
        "ok": True,
        "profile_restored": profile is not None,
        "beers": len(doc["imported_beers"]),
        "sessions": len(doc["sessions"]),
    }
    log.info("Restored backup from %s: %s", doc.get("created_at"), counts)
    return counts


__all__ = ["create_backup", "export_backup", "restore_backup"]
