"""Integration tests for the shopping list endpoints."""

from __future__ import annotations

from fastapi import status

from tests.integration.utils import auth_headers, create_inventory_item


def _generate(client) -> str:
    response = client.post("/api/ShoppingList/generate", headers=auth_headers())
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def test_generate_lists_low_stock_items(client):
    milk = create_inventory_item(client, "Milk", 0.5, 2.0)
    create_inventory_item(client, "Salt", 1, 1)

    list_id = _generate(client)
    shopping_list = client.get(f"/api/ShoppingList/{list_id}").json()

    assert shopping_list["isCompleted"] is False
    assert len(shopping_list["items"]) == 1
    item = shopping_list["items"][0]
    assert item["inventoryItemId"] == milk
    assert item["quantityToBuy"] == 1.5
    assert item["isPurchased"] is False
    assert item["shoppingListId"] == list_id
    assert item["inventoryItem"]["name"] == "Milk"


def test_generate_with_no_low_stock_creates_empty_list(client):
    create_inventory_item(client, "Rice", 5, 1)

    list_id = _generate(client)

    assert client.get(f"/api/ShoppingList/{list_id}").json()["items"] == []
    listing = client.get("/api/ShoppingList").json()
    assert listing["totalCount"] == 1


def test_mark_item_purchased_and_list_completed(client):
    create_inventory_item(client, "Eggs", 0, 6)
    list_id = _generate(client)
    item_id = client.get(f"/api/ShoppingList/{list_id}").json()["items"][0]["id"]

    response = client.put(
        f"/api/ShoppingList/{list_id}/items/{item_id}",
        json={"isPurchased": True},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["items"][0]["isPurchased"] is True

    response = client.put(
        f"/api/ShoppingList/{list_id}",
        json={"isCompleted": True},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["isCompleted"] is True


def test_deleting_inventory_item_deactivates_list_entries(client):
    milk = create_inventory_item(client, "Milk", 0, 1)
    list_id = _generate(client)

    assert client.delete(f"/api/Inventory/{milk}", headers=auth_headers()).status_code == 204

    item = client.get(f"/api/ShoppingList/{list_id}").json()["items"][0]
    assert item["isActive"] is False
    assert item["inventoryItem"]["isActive"] is False


def test_unknown_shopping_list_is_not_found(client):
    assert client.get("/api/ShoppingList/missing").status_code == status.HTTP_404_NOT_FOUND
