"""Integration tests for the inventory endpoints."""

from __future__ import annotations

from fastapi import status

from tests.integration.utils import auth_headers, create_inventory_item


def test_inventory_create_get_update_delete_flow(client):
    response = client.post(
        "/api/Inventory",
        json={
            "name": "Milk",
            "quantityAvailable": 0.5,
            "minimumQuantity": 2.0,
            "notifyOnBelowMinimumQuantity": True,
        },
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_201_CREATED
    item_id = response.json()
    assert isinstance(item_id, str)

    response = client.get(f"/api/Inventory/{item_id}")
    assert response.status_code == status.HTTP_200_OK
    item = response.json()
    assert item["name"] == "Milk"
    assert item["quantityAvailable"] == 0.5
    assert item["minimumQuantity"] == 2.0
    assert item["isActive"] is True
    assert "notifyOnBelowMinimumQuantity" not in item

    response = client.put(
        f"/api/Inventory/{item_id}",
        json={"quantityAvailable": 3, "name": None},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_200_OK
    updated = response.json()
    assert updated["name"] == "Milk"
    assert updated["quantityAvailable"] == 3
    assert updated["minimumQuantity"] == 2.0

    response = client.delete(f"/api/Inventory/{item_id}", headers=auth_headers())
    assert response.status_code == status.HTTP_204_NO_CONTENT

    assert client.get(f"/api/Inventory/{item_id}").status_code == status.HTTP_404_NOT_FOUND
    response = client.delete(f"/api/Inventory/{item_id}", headers=auth_headers())
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert "was not found" in response.json()["detail"]


def test_inventory_list_is_paginated(client):
    for name in ["Apples", "Bananas", "Cherries"]:
        create_inventory_item(client, name, 1, 1)

    response = client.get("/api/Inventory", params={"pageNumber": 2, "pageSize": 2})

    assert response.status_code == status.HTTP_200_OK
    payload = response.json()
    assert [item["name"] for item in payload["items"]] == ["Cherries"]
    assert payload["totalCount"] == 3
    assert payload["pageNumber"] == 2
    assert payload["pageSize"] == 2
    assert payload["totalPages"] == 2
    assert payload["hasNextPage"] is False
    assert payload["hasPreviousPage"] is True


def test_inventory_list_uses_default_page_size(client):
    payload = client.get("/api/Inventory").json()

    assert payload["pageNumber"] == 1
    assert payload["pageSize"] == 10
    assert payload["items"] == []


def test_invalid_inventory_payloads_are_bad_requests(client):
    response = client.post(
        "/api/Inventory",
        json={"name": "", "quantityAvailable": 1, "minimumQuantity": 1},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.post(
        "/api/Inventory",
        json={"name": "Oil", "quantityAvailable": -1, "minimumQuantity": 1},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.post("/api/Inventory", json={"name": "Oil"}, headers=auth_headers())
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert isinstance(response.json()["detail"], list)


def test_page_number_must_be_positive(client):
    response = client.get("/api/Inventory", params={"pageNumber": 0})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_update_unknown_item_is_not_found(client):
    response = client.put("/api/Inventory/unknown", json={"name": "x"}, headers=auth_headers())
    assert response.status_code == status.HTTP_404_NOT_FOUND
