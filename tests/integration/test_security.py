"""Security-related integration tests."""

from __future__ import annotations

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from homehub.config import get_settings
from homehub.db.repository import reset_repository_state
from homehub.server.app import create_app

ITEM = {"name": "Lentils", "quantityAvailable": 2, "minimumQuantity": 1}


@pytest.fixture()
def secure_client(monkeypatch) -> TestClient:
    monkeypatch.setenv("HOMEHUB_API_TOKEN", "secret-token")
    get_settings.cache_clear()
    reset_repository_state()
    app = create_app()
    client = TestClient(app)
    yield client
    monkeypatch.delenv("HOMEHUB_API_TOKEN", raising=False)
    get_settings.cache_clear()


def test_mutations_require_api_token(secure_client):
    response = secure_client.post("/api/Inventory", json=ITEM)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

    response = secure_client.post(
        "/api/Inventory",
        json=ITEM,
        headers={"Authorization": "Bearer secret-token"},
    )
    assert response.status_code == status.HTTP_201_CREATED


def test_alternate_token_locations_are_accepted(secure_client):
    response = secure_client.post(
        "/api/ShoppingList/generate", headers={"X-API-Key": "secret-token"}
    )
    assert response.status_code == status.HTTP_201_CREATED

    response = secure_client.post("/api/ShoppingList/generate?api_token=secret-token")
    assert response.status_code == status.HTTP_201_CREATED


def test_reads_do_not_require_token(secure_client):
    assert secure_client.get("/api/Inventory").status_code == status.HTTP_200_OK
