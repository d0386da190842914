"""Recipe use cases: creation, reads and suggestions generated from inventory."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from homehub import metrics
from homehub.cancellation import CancellationToken, ensure_token
from homehub.db.inventory import InventoryRepository
from homehub.db.models import InventoryItemORM, RecipeORM
from homehub.db.recipes import RecipeRepository, to_model
from homehub.errors import DomainValidationError, HomeHubError, NotFoundError
from homehub.llm.interface import RecipeGenerator
from homehub.models.common import PaginationResult
from homehub.models.recipe import (
    GeneratedRecipe,
    GeneratedRecipeIngredientResponse,
    GeneratedRecipeResponse,
    Recipe,
    RecipeIngredientInput,
    RecipeStepInput,
)
from homehub.services.inventory import INVENTORY_ITEM

logger = logging.getLogger(__name__)

RECIPE = "Recipe"


def reconcile_generated_recipe(
    recipe: GeneratedRecipe,
    items: Sequence[InventoryItemORM],
) -> GeneratedRecipeResponse:
    """Bind generated ingredient names to inventory items.

    Names match case-insensitively against ``items`` (first match wins) and take the
    item's id and canonical name. Names without a match are dropped. Steps come back
    sorted by ``order``.
    """

    by_name: Dict[str, InventoryItemORM] = {}
    for item in items:
        by_name.setdefault(item.name.lower(), item)

    ingredients: List[GeneratedRecipeIngredientResponse] = []
    for ingredient in recipe.ingredients:
        match = by_name.get(ingredient.inventory_item_name.lower())
        if match is None:
            logger.debug("Dropping unmatched generated ingredient %r", ingredient.inventory_item_name)
            continue
        ingredients.append(
            GeneratedRecipeIngredientResponse(
                inventory_item_id=match.id,
                inventory_item_name=match.name,
                quantity=ingredient.quantity,
            )
        )

    return GeneratedRecipeResponse(
        title=recipe.title,
        description=recipe.description,
        steps=sorted(recipe.steps, key=lambda step: step.order),
        ingredients=ingredients,
    )


class RecipeService:
    """Recipe operations over a single unit of work."""

    def __init__(
        self,
        recipes: RecipeRepository,
        inventory: InventoryRepository,
        generator: RecipeGenerator | None = None,
        *,
        cancel: CancellationToken | None = None,
    ) -> None:
        self._recipes = recipes
        self._inventory = inventory
        self._generator = generator
        self._cancel = ensure_token(cancel)

    def create_recipe(
        self,
        title: str,
        description: Optional[str],
        steps: Iterable[RecipeStepInput],
        ingredients: Iterable[RecipeIngredientInput],
    ) -> str:
        """Build and persist a recipe, returning its id.

        Steps are validated first. Ingredients are then resolved in input order and the
        first id that is not an active inventory item aborts the whole command, so later
        ids are never looked up. Nothing is written unless every check passes.
        """

        self._cancel.raise_if_cancelled()
        recipe = RecipeORM(title, description)
        for step in steps:
            recipe.add_step(step.order, step.description)

        for ingredient in ingredients:
            self._cancel.raise_if_cancelled()
            item = self._inventory.get_active(ingredient.inventory_item_id)
            if item is None:
                raise NotFoundError(INVENTORY_ITEM, ingredient.inventory_item_id)
            recipe.add_ingredient(item.id, ingredient.quantity)

        self._cancel.raise_if_cancelled()
        self._recipes.add(recipe)
        logger.info(
            "Created recipe %s (%s) steps=%d ingredients=%d",
            recipe.id,
            recipe.title,
            len(recipe.steps),
            len(recipe.ingredients),
        )
        return recipe.id

    def get_recipe(self, recipe_id: str) -> Recipe:
        self._cancel.raise_if_cancelled()
        recipe = self._recipes.get_with_relations(recipe_id)
        if recipe is None:
            raise NotFoundError(RECIPE, recipe_id)
        return to_model(recipe)

    def list_recipes(self, page_number: int, page_size: int) -> PaginationResult[Recipe]:
        self._cancel.raise_if_cancelled()
        return self._recipes.page(page_number, page_size)

    def generate_from_inventory(
        self,
        inventory_item_ids: Sequence[str],
        user_description: Optional[str] = None,
    ) -> List[GeneratedRecipeResponse]:
        """Suggest recipes for the given inventory items without persisting anything."""

        if not inventory_item_ids:
            raise DomainValidationError("At least one inventory item ID must be provided.")
        if self._generator is None:
            raise RuntimeError("RecipeService was created without a recipe generator.")

        resolved: List[InventoryItemORM] = []
        for item_id in dict.fromkeys(inventory_item_ids):
            self._cancel.raise_if_cancelled()
            item = self._inventory.get_active(item_id)
            if item is None:
                raise NotFoundError(INVENTORY_ITEM, item_id)
            resolved.append(item)

        self._cancel.raise_if_cancelled()
        source = self._generator.source
        logger.info(
            "Generating recipes source=%s items=%d with_description=%s",
            source,
            len(resolved),
            bool(user_description and user_description.strip()),
        )
        try:
            generated = self._generator.generate(
                [item.name for item in resolved],
                user_description,
                cancel=self._cancel,
            )
        except HomeHubError:
            metrics.RECIPE_GENERATIONS.labels(source=source, status="error").inc()
            raise
        self._cancel.raise_if_cancelled()

        results = [reconcile_generated_recipe(recipe, resolved) for recipe in generated]
        metrics.RECIPE_GENERATIONS.labels(source=source, status="success").inc()
        return results


__all__ = ["RecipeService", "reconcile_generated_recipe", "RECIPE"]
