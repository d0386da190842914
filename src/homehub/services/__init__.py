"""Application services: each instance wraps the repositories of one unit of work."""

from homehub.services.inventory import InventoryService
from homehub.services.recipes import RecipeService, reconcile_generated_recipe
from homehub.services.shopping import ShoppingListService

__all__ = [
    "InventoryService",
    "RecipeService",
    "ShoppingListService",
    "reconcile_generated_recipe",
]
