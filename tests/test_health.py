# tests/test_health.py
from fastapi.testclient import TestClient


def test_health_check(client: TestClient) -> None:
    """The health endpoint always answers ok."""
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_root_describes_api(client: TestClient) -> None:
    body = client.get("/").json()
    assert body["name"]
    assert body["docs"] == "/docs"
