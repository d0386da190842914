"""Pydantic models defining shared data contracts."""

from homehub.models.common import ApiModel, PaginationResult, Quantity
from homehub.models.inventory import (
    InventoryItem,
    InventoryItemCreateRequest,
    InventoryItemUpdateRequest,
)
from homehub.models.recipe import (
    GeneratedRecipe,
    GeneratedRecipeIngredient,
    GeneratedRecipeIngredientResponse,
    GeneratedRecipeResponse,
    GeneratedRecipeStep,
    GenerateRecipesRequest,
    Recipe,
    RecipeCreateRequest,
    RecipeIngredient,
    RecipeIngredientInput,
    RecipeStep,
    RecipeStepInput,
)
from homehub.models.shopping import (
    ShoppingList,
    ShoppingListItem,
    ShoppingListItemUpdateRequest,
    ShoppingListUpdateRequest,
)

__all__ = [
    "ApiModel",
    "PaginationResult",
    "Quantity",
    "InventoryItem",
    "InventoryItemCreateRequest",
    "InventoryItemUpdateRequest",
    "GeneratedRecipe",
    "GeneratedRecipeIngredient",
    "GeneratedRecipeIngredientResponse",
    "GeneratedRecipeResponse",
    "GeneratedRecipeStep",
    "GenerateRecipesRequest",
    "Recipe",
    "RecipeCreateRequest",
    "RecipeIngredient",
    "RecipeIngredientInput",
    "RecipeStep",
    "RecipeStepInput",
    "ShoppingList",
    "ShoppingListItem",
    "ShoppingListItemUpdateRequest",
    "ShoppingListUpdateRequest",
]
