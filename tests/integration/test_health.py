"""Health endpoint tests."""

from fastapi.testclient import TestClient

from src.app.api.http.app_data import ApplicationDependencies


def test_liveness(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_readiness_checks_database_and_storage(client: TestClient):
    response = client.get("/health/ready")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ready"
    assert body["checks"]["database"]["status"] == "healthy"
    assert body["checks"]["attachments"]["status"] == "healthy"


def test_readiness_reports_unwritable_storage(
    client: TestClient, app_dependencies: ApplicationDependencies, monkeypatch
):
    monkeypatch.setattr(app_dependencies.attachment_store, "is_writable", lambda: False)

    response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["checks"]["attachments"]["status"] == "unhealthy"


def test_request_id_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
