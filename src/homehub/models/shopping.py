"""Shopping list models."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from homehub.models.common import ApiModel, Quantity
from homehub.models.inventory import InventoryItem


class ShoppingListItem(ApiModel):
    """Single entry on a shopping list."""

    id: str
    shopping_list_id: str
    inventory_item_id: str
    inventory_item: Optional[InventoryItem] = Field(default=None)
    quantity_to_buy: Quantity
    is_purchased: bool = Field(default=False)
    is_active: bool = Field(default=True)
    created_at: datetime
    updated_at: Optional[datetime] = Field(default=None)


class ShoppingList(ApiModel):
    id: str
    items: List[ShoppingListItem] = Field(default_factory=list)
    is_completed: bool = Field(default=False)
    created_at: datetime
    updated_at: Optional[datetime] = Field(default=None)


class ShoppingListUpdateRequest(ApiModel):
    is_completed: bool


class ShoppingListItemUpdateRequest(ApiModel):
    is_purchased: bool


__all__ = [
    "ShoppingList",
    "ShoppingListItem",
    "ShoppingListUpdateRequest",
    "ShoppingListItemUpdateRequest",
]
