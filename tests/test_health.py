"""Sanity tests for the FastAPI health endpoint."""

from fastapi.testclient import TestClient

from outfit_recs.api.main import app


def test_health_returns_ok() -> None:
    client = TestClient(app)
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_metrics_exposes_recommendation_counters() -> None:
    client = TestClient(app)
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "outfit_recommendation_requests_total" in response.text
