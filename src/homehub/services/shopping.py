"""Shopping list use cases."""

from __future__ import annotations

import logging

from homehub import metrics
from homehub.cancellation import CancellationToken, ensure_token
from homehub.db.inventory import InventoryRepository
from homehub.db.models import ShoppingListItemORM, ShoppingListORM
from homehub.db.shopping_list import ShoppingListRepository, to_model
from homehub.errors import NotFoundError
from homehub.models.common import PaginationResult
from homehub.models.shopping import ShoppingList

logger = logging.getLogger(__name__)

SHOPPING_LIST = "Shopping list"
SHOPPING_LIST_ITEM = "Shopping list item"


class ShoppingListService:
    """Shopping list operations over a single unit of work."""

    def __init__(
        self,
        shopping_lists: ShoppingListRepository,
        inventory: InventoryRepository,
        *,
        cancel: CancellationToken | None = None,
    ) -> None:
        self._shopping_lists = shopping_lists
        self._inventory = inventory
        self._cancel = ensure_token(cancel)

    def generate(self) -> str:
        """Persist a new list covering every active item strictly below its minimum.

        Each entry buys the exact deficit. A list with no items is still created.
        Inventory quantities are left untouched.
        """

        self._cancel.raise_if_cancelled()
        low_stock = self._inventory.list_below_minimum()
        self._cancel.raise_if_cancelled()

        shopping_list = ShoppingListORM()
        for item in low_stock:
            shopping_list.add_item(ShoppingListItemORM(shopping_list.id, item.id, item.deficit))
        self._shopping_lists.add(shopping_list)

        metrics.SHOPPING_LISTS_GENERATED.inc()
        logger.info(
            "Generated shopping list %s with %d item(s)",
            shopping_list.id,
            len(shopping_list.items),
        )
        return shopping_list.id

    def _require_list(self, list_id: str) -> ShoppingListORM:
        shopping_list = self._shopping_lists.get_with_items(list_id)
        if shopping_list is None:
            raise NotFoundError(SHOPPING_LIST, list_id)
        return shopping_list

    def get_list(self, list_id: str) -> ShoppingList:
        self._cancel.raise_if_cancelled()
        return to_model(self._require_list(list_id))

    def list_lists(self, page_number: int, page_size: int) -> PaginationResult[ShoppingList]:
        self._cancel.raise_if_cancelled()
        return self._shopping_lists.page(page_number, page_size)

    def set_completed(self, list_id: str, completed: bool) -> ShoppingList:
        self._cancel.raise_if_cancelled()
        shopping_list = self._require_list(list_id)
        self._cancel.raise_if_cancelled()
        if completed:
            shopping_list.mark_completed()
        else:
            shopping_list.mark_incomplete()
        self._shopping_lists.save(shopping_list)
        logger.debug("Shopping list %s completed=%s", list_id, completed)
        return to_model(shopping_list)

    def set_item_purchased(self, list_id: str, item_id: str, purchased: bool) -> ShoppingList:
        """Tick or untick an active entry; inactive entries are treated as missing."""

        self._cancel.raise_if_cancelled()
        shopping_list = self._require_list(list_id)
        item = self._shopping_lists.get_item(list_id, item_id)
        if item is None or not item.is_active:
            raise NotFoundError(SHOPPING_LIST_ITEM, item_id)
        self._cancel.raise_if_cancelled()
        if purchased:
            item.mark_purchased()
        else:
            item.mark_not_purchased()
        self._shopping_lists.save(shopping_list)
        logger.debug("Shopping list %s item %s purchased=%s", list_id, item_id, purchased)
        return to_model(shopping_list)


__all__ = ["ShoppingListService", "SHOPPING_LIST", "SHOPPING_LIST_ITEM"]
