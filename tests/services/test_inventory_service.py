"""Tests for the inventory service, including the cascading soft delete."""

from __future__ import annotations

from decimal import Decimal

import pytest

from homehub.cancellation import CancellationToken
from homehub.db.inventory import InventoryRepository
from homehub.db.models import RecipeORM, ShoppingListItemORM, ShoppingListORM
from homehub.db.recipes import RecipeRepository
from homehub.db.repository import session_scope
from homehub.db.shopping_list import ShoppingListRepository
from homehub.errors import DomainValidationError, NotFoundError, OperationCancelledError
from homehub.services.inventory import InventoryService
from tests.factories import seed_inventory_item


def _service(session, cancel=None) -> InventoryService:
    return InventoryService(InventoryRepository(session), cancel=cancel)


def test_create_and_get_item(session):
    service = _service(session)
    item_id = service.create_item("Oats", Decimal("1.25"), Decimal("2"))

    item = service.get_item(item_id)

    assert item.name == "Oats"
    assert item.quantity_available == Decimal("1.25")
    assert item.is_active is True


def test_create_rejects_negative_quantity(session):
    with pytest.raises(DomainValidationError):
        _service(session).create_item("Oats", Decimal("-1"), Decimal("2"))


def test_update_changes_only_supplied_fields(session):
    service = _service(session)
    item_id = service.create_item("Oats", Decimal("1"), Decimal("2"))

    updated = service.update_item(item_id, minimum_quantity=Decimal("3"))

    assert updated.name == "Oats"
    assert updated.quantity_available == Decimal("1")
    assert updated.minimum_quantity == Decimal("3")
    assert updated.updated_at is not None


def test_update_unknown_item_raises_not_found(session):
    with pytest.raises(NotFoundError, match="Inventory item with ID nope was not found."):
        _service(session).update_item("nope", name="x")


def test_delete_cascades_and_second_delete_fails():
    item_id = seed_inventory_item("Milk", "0", "2")
    other_id = seed_inventory_item("Bread", "0", "1")
    with session_scope() as session:
        for _ in range(2):
            shopping_list = ShoppingListORM()
            shopping_list.add_item(ShoppingListItemORM(shopping_list.id, item_id, Decimal("2")))
            shopping_list.add_item(ShoppingListItemORM(shopping_list.id, other_id, Decimal("1")))
            ShoppingListRepository(session).add(shopping_list)
        recipe = RecipeORM("French toast")
        recipe.add_ingredient(item_id, Decimal("0.5"))
        recipe.add_ingredient(other_id, Decimal("2"))
        recipe_id = RecipeRepository(session).add(recipe).id

    with session_scope() as session:
        _service(session).delete_item(item_id)

    with session_scope() as session:
        shopping_lists = ShoppingListRepository(session).page(1, 10).items
        recipe = RecipeRepository(session).get_with_relations(recipe_id)
        recipe_states = {i.inventory_item_id: i.is_active for i in recipe.ingredients}
        with pytest.raises(NotFoundError):
            _service(session).get_item(item_id)

    milk_items = [i for sl in shopping_lists for i in sl.items if i.inventory_item_id == item_id]
    bread_items = [i for sl in shopping_lists for i in sl.items if i.inventory_item_id == other_id]
    assert len(milk_items) == 2 and not any(i.is_active for i in milk_items)
    assert len(bread_items) == 2 and all(i.is_active for i in bread_items)
    assert recipe_states == {item_id: False, other_id: True}

    with pytest.raises(NotFoundError):
        with session_scope() as session:
            _service(session).delete_item(item_id)


def test_delete_unknown_item_raises_not_found(session):
    with pytest.raises(NotFoundError):
        _service(session).delete_item("missing")


def test_cancelled_delete_leaves_item_active():
    item_id = seed_inventory_item("Jam", "1", "1")
    token = CancellationToken()
    token.cancel()

    with pytest.raises(OperationCancelledError):
        with session_scope() as session:
            _service(session, cancel=token).delete_item(item_id)

    with session_scope() as session:
        assert _service(session).get_item(item_id).is_active is True


def test_list_items_excludes_deleted(session):
    service = _service(session)
    keep = service.create_item("Apples", Decimal("1"), Decimal("1"))
    drop = service.create_item("Beans", Decimal("1"), Decimal("1"))
    service.delete_item(drop)

    page = service.list_items(1, 10)

    assert [item.id for item in page.items] == [keep]
    assert page.total_count == 1
