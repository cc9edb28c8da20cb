# nextpint_backend/app/routers/sessions.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException

from nextpint_backend.app.schemas import SessionFilterIn, SessionIn, SessionPatch, SessionResultIn
from nextpint_backend.app.services.data_stores import sessions as store
from nextpint_backend.app.services.prompts.service import get_prompt_service
from nextpint_backend.app.utils.http_errors import http_errors

router = APIRouter(prefix="/sessions", tags=["sessions"])

@router.get("")
def list_sessions() -> Dict[str, Any]:
    return {"sessions": store.get_sessions()}

@router.post("")
def create_session(payload: SessionIn) -> Dict[str, Any]:
    data = payload.model_dump(mode="json", exclude_none=True)
    with http_errors("create session"):
        return {"session": store.create_session(data)}

@router.post("/filter")
def filter_sessions(flt: SessionFilterIn) -> Dict[str, Any]:
    rows = store.filter_sessions(flt.model_dump(mode="json", exclude_none=True))
    return {"sessions": rows, "count": len(rows)}

@router.get("/active")
def active_session() -> Dict[str, Any]:
    # null when nothing is active; not an error
    return {"session": store.get_active_session()}

@router.get("/recent")
def recent_sessions(limit: int = 10) -> Dict[str, Any]:
    return {"sessions": store.get_recent_sessions(limit)}

@router.get("/stats")
def session_stats() -> Dict[str, Any]:
    return store.get_session_stats()

@router.post("/archive")
def archive_sessions(days_old: int = 30) -> Dict[str, Any]:
    with http_errors("archive sessions"):
        return {"archived": store.archive_old_sessions(days_old)}

@router.delete("")
def clear_sessions() -> Dict[str, bool]:
    with http_errors("clear sessions"):
        store.clear_all_sessions()
    return {"ok": True}

# --- single session ---
@router.get("/{session_id}")
def get_session(session_id: str) -> Dict[str, Any]:
    doc = store.get_session(session_id)
    if doc is None:
        raise HTTPException(404, f"session not found: {session_id}")
    return {"session": doc}

@router.patch("/{session_id}")
def update_session(session_id: str, patch: SessionPatch) -> Dict[str, Any]:
    with http_errors("update session"):
        return {"session": store.update_session(session_id, patch.model_dump(mode="json", exclude_none=True))}

@router.delete("/{session_id}")
def delete_session(session_id: str) -> Dict[str, bool]:
    with http_errors("delete session"):
        store.delete_session(session_id)
    return {"ok": True}

@router.post("/{session_id}/complete")
def complete_session(session_id: str) -> Dict[str, Any]:
    with http_errors("complete session"):
        return {"session": store.complete_session(session_id)}

# --- prompts + results ---
@router.post("/{session_id}/prompts")
def generate_prompt(session_id: str, ai_service: Optional[str] = None) -> Dict[str, Any]:
    """Generate the discovery prompt from the session profile and keep it on the session."""
    with http_errors("generate prompt"):
        return {"prompt": get_prompt_service().generate_prompt_for_session(session_id, ai_service)}

@router.post("/{session_id}/prompts/{prompt_id}/copied")
def prompt_copied(session_id: str, prompt_id: str) -> Dict[str, Any]:
    with http_errors("record copy"):
        return {"prompt": store.record_prompt_copied(session_id, prompt_id)}

@router.post("/{session_id}/results")
def add_result(session_id: str, result: SessionResultIn) -> Dict[str, Any]:
    with http_errors("add session result"):
        return {"result": store.add_session_result(session_id, result.model_dump(mode="json", exclude_none=True))}
