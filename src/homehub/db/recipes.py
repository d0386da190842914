"""Recipe persistence helpers."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from homehub.models.common import PaginationResult
from homehub.models.recipe import Recipe

from .inventory import to_model as inventory_to_model
from .models import RecipeORM
from .repository import paginate


def to_model(row: RecipeORM) -> Recipe:
    return Recipe.model_validate(
        {
            "id": row.id,
            "title": row.title,
            "description": row.description,
            "steps": [
                {"id": step.id, "order": step.order, "description": step.description}
                for step in row.ordered_steps
            ],
            "ingredients": [
                {
                    "id": ingredient.id,
                    "inventory_item_id": ingredient.inventory_item_id,
                    "inventory_item": (
                        inventory_to_model(ingredient.inventory_item)
                        if ingredient.inventory_item is not None
                        else None
                    ),
                    "quantity": ingredient.quantity,
                    "is_active": ingredient.is_active,
                }
                for ingredient in row.ingredients
            ],
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }
    )


class RecipeRepository:
    """Recipe persistence bound to one session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, recipe: RecipeORM) -> RecipeORM:
        self._session.add(recipe)
        self._session.flush()
        return recipe

    def get_with_relations(self, recipe_id: str) -> Optional[RecipeORM]:
        """Load a recipe with its steps and ingredients (and their inventory items)."""

        return self._session.get(RecipeORM, recipe_id)

    def page(self, page_number: int, page_size: int) -> PaginationResult[Recipe]:
        statement = select(RecipeORM).order_by(RecipeORM.title, RecipeORM.created_at)
        return paginate(self._session, statement, page_number, page_size, to_model)


__all__ = ["RecipeRepository", "to_model"]
