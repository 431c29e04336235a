from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from rag_backend.api.routers import health
from rag_backend.main import create_app


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


def test_health_check(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


def test_health_check_db(client, monkeypatch):
    monkeypatch.setattr(health, "ping_database", AsyncMock(return_value=True))

    response = client.get("/api/v1/health/db")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Database connection OK"}


def test_health_check_db_unreachable(client, monkeypatch):
    monkeypatch.setattr(
        health,
        "ping_database",
        AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("refused"))),
    )

    response = client.get("/api/v1/health/db")

    assert response.status_code == 503


def test_correlation_id_is_echoed(client):
    response = client.get("/api/v1/health", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"
