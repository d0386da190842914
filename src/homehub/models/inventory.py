"""Inventory data contracts."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from homehub.models.common import ApiModel, Quantity


class InventoryItem(ApiModel):
    """Item tracked in the household pantry."""

    id: str
    name: str
    quantity_available: Quantity
    minimum_quantity: Quantity
    is_active: bool = Field(default=True)
    created_at: datetime
    updated_at: Optional[datetime] = Field(default=None)


class InventoryItemCreateRequest(ApiModel):
    name: str
    quantity_available: Decimal
    minimum_quantity: Decimal
    # Accepted from older clients and ignored; the entity no longer carries the flag.
    notify_on_below_minimum_quantity: Optional[bool] = Field(default=None, exclude=True)


class InventoryItemUpdateRequest(ApiModel):
    """Partial update: omitted or null fields keep their current value."""

    name: Optional[str] = Field(default=None)
    quantity_available: Optional[Decimal] = Field(default=None)
    minimum_quantity: Optional[Decimal] = Field(default=None)


__all__ = ["InventoryItem", "InventoryItemCreateRequest", "InventoryItemUpdateRequest"]
