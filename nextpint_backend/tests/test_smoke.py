from fastapi.testclient import TestClient
from nextpint_backend.app.main import app

def test_health_and_root(client: TestClient):
    assert client.get("/health").json() == {"ok": True}
    r = client.get("/")
    assert r.status_code == 200 and r.json()["ok"] is True

def test_routers_are_mounted_under_api():
    paths = {getattr(r, "path", "") for r in app.routes}
    for p in ("/api/beers", "/api/sessions", "/api/profile", "/api/settings",
              "/api/prompts/templates", "/api/analytics/insights", "/api/backup"):
        assert p in paths, p

def test_startup_initializes_settings(client: TestClient):
    body = client.get("/api/settings").json()
    assert body["settings"]["launch_count"] == 1
    assert body["first_launch"] is True
