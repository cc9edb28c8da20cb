from __future__ import annotations
import pytest
from fastapi.testclient import TestClient

from nextpint_backend.app.main import app
from nextpint_backend.app.services.prompts.service import reset_prompt_service

# --- Data tree override: every test gets its own storage dir ---
@pytest.fixture(autouse=True)
def tmp_data_tree(tmp_path, monkeypatch):
    data = tmp_path / "data"
    monkeypatch.setenv("DATA_DIR", str(data))
    monkeypatch.delenv("NEXTPINT_USER_ID", raising=False)
    monkeypatch.delenv("NEXTPINT_TOP_N", raising=False)
    # the prompt registry caches saved templates per DATA_DIR
    reset_prompt_service()
    yield data
    reset_prompt_service()

@pytest.fixture
def client():
    # context manager runs the startup hook (settings init)
    with TestClient(app) as c:
        yield c

# --- Shared payloads ---
@pytest.fixture
def beer_payload():
    return lambda **kw: {
        "name": "Hazy Days", "brewery": "Far Yeast", "style": "IPA",
        "rating": 4, "abv": 6.5, **kw,
    }

@pytest.fixture
def session_payload():
    return lambda **kw: {
        "profile": {
            "session_goal": "find a new summer beer",
            "mood": "relaxed",
            "taste_preference": {"primary": "citrus", "avoid": ["smoky"], "intensity": 3},
            "constraints": {"location": "Tokyo", "other": []},
            "search_keywords": ["crisp", "light"],
        },
        **kw,
    }
