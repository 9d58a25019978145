from fastapi.testclient import TestClient

from storefront.main import app


def test_health_ok(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "ok"
    assert body["db"] is True


def test_health_without_database():
    res = TestClient(app).get("/api/health")
    assert res.status_code == 200
    assert res.json()["status"] == "degraded"
