"""Tests for the deterministic template recipe generator."""

from __future__ import annotations

from decimal import Decimal

import pytest

from homehub.cancellation import CancellationToken
from homehub.errors import DomainValidationError, OperationCancelledError
from homehub.llm.fallback import TemplateRecipeGenerator


def test_three_recipes_use_first_one_two_and_three_items():
    recipes = TemplateRecipeGenerator().generate(["Flour", "Eggs", "Milk", "Butter"])

    assert [recipe.title for recipe in recipes] == [
        "Simple Flour Bowl",
        "Flour and Eggs Skillet",
        "Baked Flour, Eggs and Milk Medley",
    ]
    assert [
        [(i.inventory_item_name, i.quantity) for i in recipe.ingredients] for recipe in recipes
    ] == [
        [("Flour", Decimal("1"))],
        [("Flour", Decimal("1")), ("Eggs", Decimal("0.5"))],
        [("Flour", Decimal("1")), ("Eggs", Decimal("0.5")), ("Milk", Decimal("0.25"))],
    ]


def test_single_item_still_yields_three_recipes():
    recipes = TemplateRecipeGenerator().generate(["Rice"])

    assert [recipe.title for recipe in recipes] == [
        "Simple Rice Bowl",
        "Rice Skillet",
        "Baked Rice Medley",
    ]
    assert all(len(recipe.ingredients) == 1 for recipe in recipes)


def test_output_is_deterministic_and_steps_are_ordered():
    generator = TemplateRecipeGenerator()
    first = generator.generate(["Tomato", "Basil"], "vegetarian")
    second = generator.generate(["Tomato", "Basil"], "vegetarian")

    assert first == second
    for recipe in first:
        orders = [step.order for step in recipe.steps]
        assert orders == sorted(orders)
        assert "vegetarian" in recipe.description


def test_empty_names_are_rejected():
    with pytest.raises(DomainValidationError):
        TemplateRecipeGenerator().generate([])


def test_cancelled_token_stops_generation():
    token = CancellationToken()
    token.cancel()

    with pytest.raises(OperationCancelledError):
        TemplateRecipeGenerator().generate(["Rice"], cancel=token)
