"""Shared helpers for integration tests."""

from __future__ import annotations

from homehub.config import get_settings


def auth_headers() -> dict[str, str]:
    token = get_settings().api_token
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


def create_inventory_item(client, name: str, available: float, minimum: float) -> str:
    response = client.post(
        "/api/Inventory",
        json={"name": name, "quantityAvailable": available, "minimumQuantity": minimum},
        headers=auth_headers(),
    )
    assert response.status_code == 201, response.text
    return response.json()
