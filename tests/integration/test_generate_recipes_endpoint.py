"""Integration tests for recipe suggestions generated from inventory."""

from __future__ import annotations

from fastapi import status

from homehub.errors import UpstreamServiceError
from homehub.server import deps
from tests.factories import generated_recipe
from tests.integration.utils import auth_headers, create_inventory_item

ENDPOINT = "/api/Recipe/generate-from-inventory"


def test_empty_ids_fail_before_any_generation(client, fake_generator):
    response = client.post(ENDPOINT, json={"inventoryItemIds": []}, headers=auth_headers())

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert fake_generator.calls == []


def test_unknown_id_is_not_found(client, fake_generator):
    response = client.post(ENDPOINT, json={"inventoryItemIds": ["ghost"]}, headers=auth_headers())

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert fake_generator.calls == []


def test_generated_ingredients_are_reconciled(client, fake_generator):
    flour = create_inventory_item(client, "Flour", 1, 1)
    fake_generator.recipes = [
        generated_recipe(
            "Bread",
            ingredients=[("flour", "1"), ("FLOUR", "0.5"), ("Saffron", "0.1")],
            steps=[(2, "Bake"), (1, "Knead")],
        ),
        generated_recipe("Two"),
        generated_recipe("Three"),
    ]

    response = client.post(
        ENDPOINT,
        json={"inventoryItemIds": [flour], "userDescription": "crusty"},
        headers=auth_headers(),
    )

    assert response.status_code == status.HTTP_200_OK
    recipes = response.json()
    assert len(recipes) == 3
    assert recipes[0]["ingredients"] == [
        {"inventoryItemId": flour, "inventoryItemName": "Flour", "quantity": 1.0},
        {"inventoryItemId": flour, "inventoryItemName": "Flour", "quantity": 0.5},
    ]
    assert [step["order"] for step in recipes[0]["steps"]] == [1, 2]
    assert fake_generator.calls == [(["Flour"], "crusty")]
    assert client.get("/api/Recipe").json()["totalCount"] == 0


def test_upstream_failure_is_bad_gateway(client, fake_generator):
    flour = create_inventory_item(client, "Flour", 1, 1)
    fake_generator.error = UpstreamServiceError("Recipe generation request timed out.")

    response = client.post(ENDPOINT, json={"inventoryItemIds": [flour]}, headers=auth_headers())

    assert response.status_code == status.HTTP_502_BAD_GATEWAY
    assert "timed out" in response.json()["detail"]


def test_template_fallback_without_api_key(app, client):
    app.dependency_overrides.pop(deps.get_recipe_generator)
    flour = create_inventory_item(client, "Flour", 1, 1)
    eggs = create_inventory_item(client, "Eggs", 1, 1)

    response = client.post(
        ENDPOINT,
        json={"inventoryItemIds": [flour, eggs]},
        headers=auth_headers(),
    )

    assert response.status_code == status.HTTP_200_OK
    titles = [recipe["title"] for recipe in response.json()]
    assert titles == ["Simple Flour Bowl", "Flour and Eggs Skillet", "Baked Flour and Eggs Medley"]
