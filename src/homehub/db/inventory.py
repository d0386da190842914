"""Inventory data access helpers."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from homehub.cancellation import CancellationToken
from homehub.models.common import PaginationResult
from homehub.models.inventory import InventoryItem

from .models import InventoryItemORM, RecipeIngredientORM, ShoppingListItemORM
from .repository import paginate

logger = logging.getLogger(__name__)


def to_model(row: InventoryItemORM) -> InventoryItem:
    return InventoryItem.model_validate(
        {
            "id": row.id,
            "name": row.name,
            "quantity_available": row.quantity_available,
            "minimum_quantity": row.minimum_quantity,
            "is_active": row.is_active,
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }
    )


class InventoryRepository:
    """Inventory persistence bound to one session (one unit of work)."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, item: InventoryItemORM) -> InventoryItemORM:
        self._session.add(item)
        self._session.flush()
        return item

    def save(self, item: InventoryItemORM) -> InventoryItemORM:
        """Flush pending changes to ``item`` so timestamps and constraints apply."""

        self._session.flush()
        return item

    def get_active(self, item_id: str) -> Optional[InventoryItemORM]:
        """Return the item when it exists and has not been deleted."""

        return self._session.execute(
            select(InventoryItemORM).where(
                InventoryItemORM.id == item_id,
                InventoryItemORM.is_active.is_(True),
            )
        ).scalar_one_or_none()

    def list_active(self) -> List[InventoryItemORM]:
        return list(
            self._session.execute(
                select(InventoryItemORM)
                .where(InventoryItemORM.is_active.is_(True))
                .order_by(InventoryItemORM.name, InventoryItemORM.created_at)
            )
            .scalars()
            .all()
        )

    def list_below_minimum(self) -> List[InventoryItemORM]:
        """Active items whose available quantity is strictly below their minimum."""

        # Quantities are stored as text; compare as Decimal rather than in SQL.
        return [item for item in self.list_active() if item.is_below_minimum]

    def page(self, page_number: int, page_size: int) -> PaginationResult[InventoryItem]:
        statement = (
            select(InventoryItemORM)
            .where(InventoryItemORM.is_active.is_(True))
            .order_by(InventoryItemORM.name, InventoryItemORM.created_at)
        )
        return paginate(self._session, statement, page_number, page_size, to_model)

    def deactivate_with_dependents(
        self,
        item: InventoryItemORM,
        cancel: CancellationToken | None = None,
    ) -> Tuple[int, int]:
        """Soft-delete ``item`` and every active row referencing it.

        Returns the number of shopping list items and recipe ingredients deactivated.
        All rows are read before any is modified, and the changes are only flushed
        together, so the caller's transaction either keeps all of them or none.
        """

        shopping_items = (
            self._session.execute(
                select(ShoppingListItemORM).where(
                    ShoppingListItemORM.inventory_item_id == item.id,
                    ShoppingListItemORM.is_active.is_(True),
                )
            )
            .scalars()
            .all()
        )
        recipe_ingredients = (
            self._session.execute(
                select(RecipeIngredientORM).where(
                    RecipeIngredientORM.inventory_item_id == item.id,
                    RecipeIngredientORM.is_active.is_(True),
                )
            )
            .scalars()
            .all()
        )
        if cancel is not None:
            cancel.raise_if_cancelled()

        for shopping_item in shopping_items:
            shopping_item.mark_inactive()
        for ingredient in recipe_ingredients:
            ingredient.mark_inactive()
        item.mark_inactive()
        self._session.flush()

        logger.debug(
            "Deactivated inventory item %s with %s shopping item(s) and %s recipe ingredient(s)",
            item.id,
            len(shopping_items),
            len(recipe_ingredients),
        )
        return len(shopping_items), len(recipe_ingredients)


__all__ = ["InventoryRepository", "to_model"]
