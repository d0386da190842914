"""Inventory use cases: CRUD plus the cascading soft delete."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from homehub import metrics
from homehub.cancellation import CancellationToken, ensure_token
from homehub.db.inventory import InventoryRepository, to_model
from homehub.db.models import InventoryItemORM
from homehub.errors import NotFoundError
from homehub.models.common import PaginationResult
from homehub.models.inventory import InventoryItem

logger = logging.getLogger(__name__)

INVENTORY_ITEM = "Inventory item"


class InventoryService:
    """Inventory operations over a single unit of work."""

    def __init__(
        self,
        inventory: InventoryRepository,
        *,
        cancel: CancellationToken | None = None,
    ) -> None:
        self._inventory = inventory
        self._cancel = ensure_token(cancel)

    def _require_active(self, item_id: str) -> InventoryItemORM:
        item = self._inventory.get_active(item_id)
        if item is None:
            raise NotFoundError(INVENTORY_ITEM, item_id)
        return item

    def create_item(
        self,
        name: str,
        quantity_available: Decimal,
        minimum_quantity: Decimal,
    ) -> str:
        self._cancel.raise_if_cancelled()
        item = self._inventory.add(InventoryItemORM(name, quantity_available, minimum_quantity))
        logger.info("Created inventory item %s (%s)", item.id, item.name)
        return item.id

    def get_item(self, item_id: str) -> InventoryItem:
        self._cancel.raise_if_cancelled()
        return to_model(self._require_active(item_id))

    def list_items(self, page_number: int, page_size: int) -> PaginationResult[InventoryItem]:
        self._cancel.raise_if_cancelled()
        return self._inventory.page(page_number, page_size)

    def update_item(
        self,
        item_id: str,
        *,
        name: Optional[str] = None,
        quantity_available: Optional[Decimal] = None,
        minimum_quantity: Optional[Decimal] = None,
    ) -> InventoryItem:
        """Replace only the supplied fields; ``None`` keeps the current value."""

        self._cancel.raise_if_cancelled()
        item = self._require_active(item_id)
        self._cancel.raise_if_cancelled()
        item.apply_update(
            name=name,
            quantity_available=quantity_available,
            minimum_quantity=minimum_quantity,
        )
        self._inventory.save(item)
        logger.debug("Updated inventory item %s", item_id)
        return to_model(item)

    def delete_item(self, item_id: str) -> None:
        """Soft-delete the item and every active shopping list item and recipe ingredient using it."""

        self._cancel.raise_if_cancelled()
        item = self._require_active(item_id)
        shopping_count, ingredient_count = self._inventory.deactivate_with_dependents(
            item, cancel=self._cancel
        )
        metrics.INVENTORY_DEACTIVATIONS.labels(entity="inventory_item").inc()
        if shopping_count:
            metrics.INVENTORY_DEACTIVATIONS.labels(entity="shopping_list_item").inc(shopping_count)
        if ingredient_count:
            metrics.INVENTORY_DEACTIVATIONS.labels(entity="recipe_ingredient").inc(ingredient_count)
        logger.info(
            "Deactivated inventory item %s (shopping_list_items=%d recipe_ingredients=%d)",
            item_id,
            shopping_count,
            ingredient_count,
        )


__all__ = ["InventoryService", "INVENTORY_ITEM"]
