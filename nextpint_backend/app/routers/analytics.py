# nextpint_backend/app/routers/analytics.py
from __future__ import annotations

import json
from typing import Any, Dict, Optional

from fastapi import APIRouter

from nextpint_backend.app.schemas import TrackEventIn
from nextpint_backend.app.services.analytics import events, insights
from nextpint_backend.app.utils.http_errors import http_errors

router = APIRouter(prefix="/analytics", tags=["analytics"])

@router.post("/events")
def track(payload: TrackEventIn) -> Dict[str, Any]:
    with http_errors("track event"):
        return {"event": events.track_event(payload.event, payload.data, payload.session_id, payload.user_id)}

@router.get("/events")
def list_events(start: Optional[str] = None, end: Optional[str] = None,
                event_type: Optional[str] = None) -> Dict[str, Any]:
    rows = events.get_events(start, end)
    if event_type:
        rows = [e for e in rows if e.get("event") == event_type]
    return {"events": rows, "count": len(rows)}

@router.delete("/events", response_model=Dict[str, bool])
def clear_events() -> Dict[str, bool]:
    events.clear_data()
    return {"ok": True}

@router.get("/export")
def export_events() -> Dict[str, Any]:
    return json.loads(events.export_data())

@router.get("/insights")
def get_insights() -> Dict[str, Any]:
    return insights.get_insights()
