"""Recipe data contracts, including transient AI-generated suggestions."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from homehub.models.common import ApiModel, Quantity
from homehub.models.inventory import InventoryItem


class RecipeStep(ApiModel):
    id: str
    order: int
    description: str


class RecipeIngredient(ApiModel):
    """Ingredient row; inactive once its inventory item has been deleted."""

    id: str
    inventory_item_id: str
    inventory_item: Optional[InventoryItem] = Field(default=None)
    quantity: Quantity
    is_active: bool = Field(default=True)


class Recipe(ApiModel):
    """Persisted recipe with steps sorted by ``order``."""

    id: str
    title: str
    description: str = Field(default="")
    steps: List[RecipeStep] = Field(default_factory=list)
    ingredients: List[RecipeIngredient] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = Field(default=None)


class RecipeStepInput(ApiModel):
    order: int
    description: str


class RecipeIngredientInput(ApiModel):
    inventory_item_id: str
    quantity: Decimal


class RecipeCreateRequest(ApiModel):
    title: str
    description: Optional[str] = Field(default="")
    steps: List[RecipeStepInput] = Field(default_factory=list)
    ingredients: List[RecipeIngredientInput] = Field(default_factory=list)


class GeneratedRecipeStep(ApiModel):
    order: int
    description: str


class GeneratedRecipeIngredient(ApiModel):
    """Ingredient as named by the generator, before it is matched to inventory."""

    inventory_item_name: str
    quantity: Quantity


class GeneratedRecipe(ApiModel):
    title: str
    description: str = Field(default="")
    steps: List[GeneratedRecipeStep] = Field(default_factory=list)
    ingredients: List[GeneratedRecipeIngredient] = Field(default_factory=list)


class GeneratedRecipeIngredientResponse(ApiModel):
    inventory_item_id: str
    inventory_item_name: str
    quantity: Quantity


class GeneratedRecipeResponse(ApiModel):
    """Suggestion whose ingredients were reconciled against real inventory items."""

    title: str
    description: str
    steps: List[GeneratedRecipeStep]
    ingredients: List[GeneratedRecipeIngredientResponse]


class GenerateRecipesRequest(ApiModel):
    inventory_item_ids: List[str] = Field(default_factory=list)
    user_description: Optional[str] = Field(default=None, max_length=1000)


__all__ = [
    "Recipe",
    "RecipeStep",
    "RecipeIngredient",
    "RecipeStepInput",
    "RecipeIngredientInput",
    "RecipeCreateRequest",
    "GeneratedRecipe",
    "GeneratedRecipeStep",
    "GeneratedRecipeIngredient",
    "GeneratedRecipeIngredientResponse",
    "GeneratedRecipeResponse",
    "GenerateRecipesRequest",
]
