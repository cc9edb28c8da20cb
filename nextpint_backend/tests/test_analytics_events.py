import json
from datetime import timedelta

import pytest

from nextpint_backend.app.services.analytics import events
from nextpint_backend.app.services.data_stores import sessions
from nextpint_backend.app.utils.timefmt import utcnow

def test_track_event_records_defaults(monkeypatch):
    monkeypatch.setenv("NEXTPINT_USER_ID", "u42")
    e = events.track_event("app_opened", {"from": "test"})
    assert e["event"] == "app_opened"
    assert e["user_id"] == "u42"
    assert e["session_id"] is None
    assert e["data"] == {"from": "test"}
    assert events.get_events() == [e]

def test_empty_event_name_rejected():
    with pytest.raises(ValueError):
        events.track_event("  ")

def test_session_defaults_to_active_session():
    s = sessions.create_session({"profile": {
        "session_goal": "g", "mood": "m",
        "taste_preference": {"primary": "p", "avoid": [], "intensity": 2},
        "constraints": {"other": []}, "search_keywords": [],
    }})
    assert events.track_event("x")["session_id"] == s["session_id"]
    assert events.track_event("y", session_id="explicit")["session_id"] == "explicit"

def test_range_and_type_queries():
    events.track_event("a")
    events.track_event("b")
    events.track_event("a")
    now = utcnow()
    assert len(events.get_events(start=now - timedelta(minutes=5), end=now + timedelta(minutes=5))) == 3
    assert events.get_events(start=now + timedelta(hours=1)) == []
    assert len(events.get_events_by_type("a")) == 2

def test_clear_and_export():
    events.track_event("a")
    doc = json.loads(events.export_data())
    assert [e["event"] for e in doc["events"]] == ["a"]
    assert doc["version"] and doc["exported_at"]

    events.clear_data()
    assert events.get_events() == []
