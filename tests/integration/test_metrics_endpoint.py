"""Integration tests for metrics and health endpoints."""

from __future__ import annotations


def test_metrics_endpoint_available(client):
    client.get("/api/Inventory")
    response = client.get("/metrics")
    assert response.status_code == 200
    body = response.content.decode()
    assert "homehub_http_requests_total" in body
    assert 'path="/api/Inventory"' in body


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
