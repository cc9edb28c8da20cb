# nextpint_backend/app/services/analytics/events.py
from __future__ import annotations

"""
Append-only analytics event log, kept locally under the analytics_events
storage key. Nothing leaves the device.
"""

import json, uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from nextpint_backend.app.config.manifest import DATA_VERSION, DEBUG_MODE, default_user_id
from nextpint_backend.app.services.data_stores import kv_store, sessions
from nextpint_backend.app.utils.logs import get_logger
from nextpint_backend.app.utils.timefmt import now_iso, parse_dt

log = get_logger("analytics")

STORAGE_KEY = kv_store.STORAGE_KEYS["ANALYTICS_EVENTS"]


def _load() -> List[Dict[str, Any]]:
    events = kv_store.get_item(STORAGE_KEY, default=[])
    if not isinstance(events, list):
        log.error("Failed to load analytics events: expected list, got %s", type(events).__name__)
        return []
    return [e for e in events if isinstance(e, dict)]

def _save(events: List[Dict[str, Any]]) -> None:
    try:
        kv_store.set_item(STORAGE_KEY, events)
    except kv_store.StorageError as e:
        # losing an analytics event must never break the user's action
        log.error("Failed to save analytics events: %s", e)

def track_event(event: str, data: Any = None, session_id: Optional[str] = None,
                user_id: Optional[str] = None) -> Dict[str, Any]:
    if not isinstance(event, str) or not event.strip():
        raise ValueError("event name is required")
    if session_id is None:
        active = sessions.get_active_session()
        session_id = active.get("session_id") if active else None
    record = {
        "id": uuid.uuid4().hex,
        "event": event.strip(),
        "timestamp": now_iso(),
        "data": data,
        "session_id": session_id,
        "user_id": user_id or default_user_id(),
    }
    events = _load()
    events.append(record)
    _save(events)
    if DEBUG_MODE:
        log.debug("Analytics event: %s", record)
    return record

def get_events(start: Any = None, end: Any = None) -> List[Dict[str, Any]]:
    """Events with start <= timestamp <= end; either bound may be omitted."""
    lo: Optional[datetime] = parse_dt(start)
    hi: Optional[datetime] = parse_dt(end)
    out = []
    for e in _load():
        ts = parse_dt(e.get("timestamp"))
        if ts is None:
            continue
        if lo and ts < lo:
            continue
        if hi and ts > hi:
            continue
        out.append(e)
    return out

def get_events_by_type(event_type: str) -> List[Dict[str, Any]]:
    return [e for e in _load() if e.get("event") == event_type]

def clear_data() -> None:
    _save([])

def export_data() -> str:
    return json.dumps({
        "events": _load(),
        "exported_at": now_iso(),
        "version": DATA_VERSION,
    }, ensure_ascii=False, indent=2)


__all__ = ["STORAGE_KEY", "track_event", "get_events", "get_events_by_type", "clear_data", "export_data"]
