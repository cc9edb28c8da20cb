# nextpint_backend/app/services/data_stores/sessions.py
from __future__ import annotations

import uuid
from datetime import timedelta
from typing import Any, Dict, List, Optional

from nextpint_backend.app.config.manifest import default_user_id
from nextpint_backend.app.schemas import SESSION_STATUSES, SessionStatus
from nextpint_backend.app.utils.checks import in_range, is_blank, join_errors
from nextpint_backend.app.utils.logs import get_logger
from nextpint_backend.app.utils.timefmt import now_iso, parse_dt, round_half_up, utcnow
from . import kv_store
from .kv_store import validation_result

log = get_logger("sessions")

STORAGE_KEY = kv_store.STORAGE_KEYS["SEARCH_SESSIONS"]

_IMMUTABLE = ("session_id", "created_at")


def _save(sessions: List[Dict[str, Any]]) -> None:
    kv_store.set_item(STORAGE_KEY, sessions)

def _find_index(sessions: List[Dict[str, Any]], session_id: str) -> int:
    for i, s in enumerate(sessions):
        if s.get("session_id") == session_id:
            return i
    raise KeyError(f"session not found: {session_id}")

def _check(session: Dict[str, Any]) -> None:
    result = validate_session(session)
    if not result["is_valid"]:
        raise ValueError(f"Invalid session data: {join_errors(result['errors'])}")


# ---- reads ----

def get_sessions() -> List[Dict[str, Any]]:
    sessions = kv_store.get_item(STORAGE_KEY, default=[])
    if not isinstance(sessions, list):
        log.warning("Ignoring malformed session store (expected list, got %s)", type(sessions).__name__)
        return []
    return [s for s in sessions if isinstance(s, dict)]

def get_session(session_id: str) -> Optional[Dict[str, Any]]:
    return next((s for s in get_sessions() if s.get("session_id") == session_id), None)

def get_active_session() -> Optional[Dict[str, Any]]:
    return next((s for s in get_sessions() if s.get("status") == SessionStatus.ACTIVE.value), None)

def get_recent_sessions(limit: int = 10) -> List[Dict[str, Any]]:
    rows = get_sessions()
    rows.sort(key=lambda s: parse_dt(s.get("updated_at")) or parse_dt(0), reverse=True)
    return rows[: max(0, limit)]


# ---- writes ----

def create_session(data: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError("session must be a dict")
    now = now_iso()
    session = dict(data)
    session.setdefault("user_id", default_user_id())
    session.setdefault("status", SessionStatus.ACTIVE.value)
    session.setdefault("generated_prompts", [])
    session.setdefault("results", [])
    session["session_id"] = str(uuid.uuid4())
    session["created_at"] = now
    session["updated_at"] = now
    _check(session)

    sessions = get_sessions()
    sessions.append(session)
    _save(sessions)
    log.info("Created session %s", session["session_id"])
    return session

def update_session(session_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(updates, dict):
        raise TypeError("updates must be a dict")
    sessions = get_sessions()
    idx = _find_index(sessions, session_id)
    merged = {**sessions[idx], **{k: v for k, v in updates.items() if k not in _IMMUTABLE}}
    merged["updated_at"] = now_iso()
    _check(merged)

    sessions[idx] = merged
    _save(sessions)
    return merged

def delete_session(session_id: str) -> None:
    sessions = get_sessions()
    kept = [s for s in sessions if s.get("session_id") != session_id]
    if len(kept) == len(sessions):
        raise KeyError(f"session not found: {session_id}")
    _save(kept)

def clear_all_sessions() -> None:
    kv_store.remove_item(STORAGE_KEY)

def complete_session(session_id: str) -> Dict[str, Any]:
    return update_session(session_id, {"status": SessionStatus.COMPLETED.value})

def archive_old_sessions(days_old: int = 30) -> int:
    """Completed sessions untouched for `days_old` days become archived."""
    sessions = get_sessions()
    cutoff = utcnow() - timedelta(days=days_old)
    now = now_iso()
    archived = 0
    for s in sessions:
        updated = parse_dt(s.get("updated_at"))
        if s.get("status") == SessionStatus.COMPLETED.value and updated is not None and updated < cutoff:
            s["status"] = SessionStatus.ARCHIVED.value
            s["updated_at"] = now
            archived += 1
    if archived:
        _save(sessions)
        log.info("Archived %d sessions older than %d days", archived, days_old)
    return archived


# ---- prompt history / results ----

def add_generated_prompt(session_id: str, prompt: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(prompt, dict) or is_blank(prompt.get("content")):
        raise ValueError("Invalid generated prompt: content is required")
    session = get_session(session_id)
    if session is None:
        raise KeyError(f"session not found: {session_id}")
    entry = dict(prompt)
    entry.setdefault("id", str(uuid.uuid4()))
    entry.setdefault("generated_at", now_iso())
    entry.setdefault("copied_count", 0)
    prompts = list(session.get("generated_prompts") or []) + [entry]
    update_session(session_id, {"generated_prompts": prompts})
    return entry

def record_prompt_copied(session_id: str, prompt_id: str) -> Dict[str, Any]:
    session = get_session(session_id)
    if session is None:
        raise KeyError(f"session not found: {session_id}")
    prompts = [dict(p) for p in session.get("generated_prompts") or []]
    for p in prompts:
        if p.get("id") == prompt_id:
            p["copied_count"] = int(p.get("copied_count") or 0) + 1
            p["used_at"] = now_iso()
            update_session(session_id, {"generated_prompts": prompts})
            return p
    raise KeyError(f"prompt not found: {prompt_id}")

def add_session_result(session_id: str, result: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(result, dict):
        raise TypeError("result must be a dict")
    errors: List[str] = []
    if is_blank(result.get("prompt_id")):
        errors.append("Prompt ID is required")
    if is_blank(result.get("ai_service")):
        errors.append("AI service is required")
    if not in_range(result.get("satisfaction"), 1, 5):
        errors.append("Satisfaction must be a number between 1 and 5")
    if errors:
        raise ValueError(f"Invalid session result: {join_errors(errors)}")

    session = get_session(session_id)
    if session is None:
        raise KeyError(f"session not found: {session_id}")
    entry = {"input": "", "output": "", **result, "id": str(uuid.uuid4()), "processed_at": now_iso()}
    update_session(session_id, {"results": list(session.get("results") or []) + [entry]})
    return entry


# ---- queries ----

def filter_sessions(flt: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    flt = flt or {}
    statuses = [getattr(s, "value", s) for s in (flt.get("status") or [])]
    date_range = flt.get("date_range")
    search = (flt.get("search_text") or "").strip().lower()
    start = end = None
    if date_range:
        start, end = parse_dt(date_range.get("start")), parse_dt(date_range.get("end"))

    def match(s: Dict[str, Any]) -> bool:
        if statuses and s.get("status") not in statuses:
            return False
        if date_range:
            created = parse_dt(s.get("created_at"))
            if created is None or (start and created < start) or (end and created > end):
                return False
        if search:
            prof = s.get("profile") or {}
            taste = prof.get("taste_preference") or {}
            parts = [
                s.get("name") or "",
                prof.get("session_goal") or "",
                prof.get("mood") or "",
                taste.get("primary") or "",
                *[str(k) for k in (prof.get("search_keywords") or [])],
                s.get("notes") or "",
            ]
            if search not in " ".join(parts).lower():
                return False
        return True

    return [s for s in get_sessions() if match(s)]

def get_session_stats() -> Dict[str, Any]:
    sessions = get_sessions()
    total_prompts = sum(len(s.get("generated_prompts") or []) for s in sessions)
    average = total_prompts / len(sessions) if sessions else 0
    return {
        "total_count": len(sessions),
        "active_count": sum(1 for s in sessions if s.get("status") == SessionStatus.ACTIVE.value),
        "completed_count": sum(1 for s in sessions if s.get("status") == SessionStatus.COMPLETED.value),
        "average_prompts_per_session": round_half_up(average, 1),
    }


# ---- validation ----

def validate_session(session: Dict[str, Any]) -> Dict[str, Any]:
    errors: List[str] = []

    if not session.get("session_id"):
        errors.append("Session ID is required")
    if not session.get("user_id"):
        errors.append("User ID is required")
    if session.get("status") not in SESSION_STATUSES:
        errors.append("Invalid session status")

    profile = session.get("profile")
    if not isinstance(profile, dict):
        errors.append("Session profile is required")
    else:
        if is_blank(profile.get("session_goal")):
            errors.append("Session goal is required")
        if is_blank(profile.get("mood")):
            errors.append("Mood is required")

        taste = profile.get("taste_preference")
        if not isinstance(taste, dict):
            errors.append("Taste preference is required")
        else:
            if is_blank(taste.get("primary")):
                errors.append("Primary taste preference is required")
            if not isinstance(taste.get("avoid"), list):
                errors.append("Avoid list must be an array")
            if not in_range(taste.get("intensity"), 1, 5):
                errors.append("Intensity must be a number between 1 and 5")

        constraints = profile.get("constraints")
        if not isinstance(constraints, dict):
            errors.append("Constraints are required")
        elif not isinstance(constraints.get("other"), list):
            errors.append("Other constraints must be an array")

        if not isinstance(profile.get("search_keywords"), list):
            errors.append("Search keywords must be an array")

    if not isinstance(session.get("generated_prompts"), list):
        errors.append("Generated prompts must be an array")
    if not session.get("created_at"):
        errors.append("Created date is required")

    return validation_result(errors)


__all__ = [
    "STORAGE_KEY",
    "get_sessions", "get_session", "get_active_session", "get_recent_sessions",
    "create_session", "update_session", "delete_session", "clear_all_sessions",
    "complete_session", "archive_old_sessions",
    "add_generated_prompt", "record_prompt_copied", "add_session_result",
    "filter_sessions", "get_session_stats", "validate_session",
]
