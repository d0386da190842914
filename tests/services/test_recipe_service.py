"""Tests for recipe creation and reads."""

from __future__ import annotations

from decimal import Decimal

import pytest

from homehub.db.inventory import InventoryRepository
from homehub.db.recipes import RecipeRepository
from homehub.db.repository import session_scope
from homehub.errors import DomainValidationError, NotFoundError
from homehub.models.recipe import RecipeIngredientInput, RecipeStepInput
from homehub.services.recipes import RecipeService
from tests.factories import seed_inventory_item


class RecordingInventoryRepository(InventoryRepository):
    def __init__(self, session) -> None:
        super().__init__(session)
        self.looked_up: list[str] = []

    def get_active(self, item_id):
        self.looked_up.append(item_id)
        return super().get_active(item_id)


def _service(session, inventory=None) -> RecipeService:
    return RecipeService(RecipeRepository(session), inventory or InventoryRepository(session))


def _steps(*pairs):
    return [RecipeStepInput(order=order, description=text) for order, text in pairs]


def _ingredients(*pairs):
    return [
        RecipeIngredientInput(inventory_item_id=item_id, quantity=Decimal(quantity))
        for item_id, quantity in pairs
    ]


def _recipe_count() -> int:
    with session_scope() as session:
        return RecipeRepository(session).page(1, 10).total_count


def test_create_recipe_persists_sorted_steps_and_ingredients():
    flour = seed_inventory_item("Flour", "5", "1")
    eggs = seed_inventory_item("Eggs", "6", "2")

    with session_scope() as session:
        recipe_id = _service(session).create_recipe(
            "Pancakes",
            "Breakfast",
            _steps((3, "Serve"), (1, "Mix"), (2, "Fry")),
            _ingredients((flour, "0.5"), (eggs, "2")),
        )

    with session_scope() as session:
        recipe = _service(session).get_recipe(recipe_id)

    assert recipe.title == "Pancakes"
    assert [step.order for step in recipe.steps] == [1, 2, 3]
    assert {i.inventory_item_id for i in recipe.ingredients} == {flour, eggs}
    assert all(i.inventory_item is not None for i in recipe.ingredients)


def test_blank_title_is_rejected():
    with pytest.raises(DomainValidationError):
        with session_scope() as session:
            _service(session).create_recipe("  ", "", [], [])
    assert _recipe_count() == 0


def test_duplicate_step_order_creates_nothing():
    with pytest.raises(DomainValidationError):
        with session_scope() as session:
            _service(session).create_recipe("Soup", "", _steps((2, "Chop"), (2, "Boil")), [])
    assert _recipe_count() == 0


def test_blank_step_description_is_rejected():
    with pytest.raises(DomainValidationError):
        with session_scope() as session:
            _service(session).create_recipe("Soup", "", _steps((1, "   ")), [])


def test_unknown_ingredient_aborts_and_stops_lookups():
    flour = seed_inventory_item("Flour", "5", "1")
    sugar = seed_inventory_item("Sugar", "5", "1")

    with pytest.raises(NotFoundError, match="missing-id"):
        with session_scope() as session:
            inventory = RecordingInventoryRepository(session)
            try:
                _service(session, inventory).create_recipe(
                    "Cake",
                    "",
                    _steps((1, "Bake")),
                    _ingredients((flour, "1"), ("missing-id", "1"), (sugar, "1")),
                )
            finally:
                looked_up = list(inventory.looked_up)

    assert looked_up == [flour, "missing-id"]
    assert _recipe_count() == 0


def test_inactive_ingredient_is_not_found():
    item_id = seed_inventory_item("Cream", "1", "1")
    with session_scope() as session:
        inventory = InventoryRepository(session)
        inventory.deactivate_with_dependents(inventory.get_active(item_id))

    with pytest.raises(NotFoundError):
        with session_scope() as session:
            _service(session).create_recipe("Trifle", "", [], _ingredients((item_id, "1")))
    assert _recipe_count() == 0


@pytest.mark.parametrize("quantity", ["0", "-1"])
def test_non_positive_ingredient_quantity_is_rejected(quantity):
    flour = seed_inventory_item("Flour", "5", "1")

    with pytest.raises(DomainValidationError, match="greater than zero"):
        with session_scope() as session:
            _service(session).create_recipe("Bread", "", [], _ingredients((flour, quantity)))
    assert _recipe_count() == 0


def test_duplicate_ingredient_is_rejected():
    flour = seed_inventory_item("Flour", "5", "1")

    with pytest.raises(DomainValidationError, match="already exists"):
        with session_scope() as session:
            _service(session).create_recipe(
                "Bread", "", [], _ingredients((flour, "1"), (flour, "2"))
            )
    assert _recipe_count() == 0


def test_get_unknown_recipe_raises_not_found(session):
    with pytest.raises(NotFoundError, match="Recipe with ID nope"):
        _service(session).get_recipe("nope")


def test_deleted_ingredient_stays_visible_on_recipe():
    flour = seed_inventory_item("Flour", "5", "1")
    with session_scope() as session:
        recipe_id = _service(session).create_recipe("Bread", "", [], _ingredients((flour, "1")))
    with session_scope() as session:
        inventory = InventoryRepository(session)
        inventory.deactivate_with_dependents(inventory.get_active(flour))

    with session_scope() as session:
        recipe = _service(session).get_recipe(recipe_id)

    assert len(recipe.ingredients) == 1
    assert recipe.ingredients[0].is_active is False
    assert recipe.ingredients[0].inventory_item.is_active is False
