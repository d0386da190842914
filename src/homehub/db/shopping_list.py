"""Shopping list persistence helpers."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from homehub.models.common import PaginationResult
from homehub.models.shopping import ShoppingList

from .inventory import to_model as inventory_to_model
from .models import ShoppingListItemORM, ShoppingListORM
from .repository import paginate


def to_model(row: ShoppingListORM) -> ShoppingList:
    return ShoppingList.model_validate(
        {
            "id": row.id,
            "items": [
                {
                    "id": item.id,
                    "shopping_list_id": item.shopping_list_id,
                    "inventory_item_id": item.inventory_item_id,
                    "inventory_item": (
                        inventory_to_model(item.inventory_item)
                        if item.inventory_item is not None
                        else None
                    ),
                    "quantity_to_buy": item.quantity_to_buy,
                    "is_purchased": item.is_purchased,
                    "is_active": item.is_active,
                    "created_at": item.created_at,
                    "updated_at": item.updated_at,
                }
                for item in sorted(row.items, key=lambda entry: entry.created_at)
            ],
            "is_completed": row.is_completed,
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }
    )


class ShoppingListRepository:
    """Shopping list persistence bound to one session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, shopping_list: ShoppingListORM) -> ShoppingListORM:
        self._session.add(shopping_list)
        self._session.flush()
        return shopping_list

    def save(self, shopping_list: ShoppingListORM) -> ShoppingListORM:
        self._session.flush()
        return shopping_list

    def get_with_items(self, list_id: str) -> Optional[ShoppingListORM]:
        return self._session.get(ShoppingListORM, list_id)

    def get_item(self, list_id: str, item_id: str) -> Optional[ShoppingListItemORM]:
        return self._session.execute(
            select(ShoppingListItemORM).where(
                ShoppingListItemORM.id == item_id,
                ShoppingListItemORM.shopping_list_id == list_id,
            )
        ).scalar_one_or_none()

    def page(self, page_number: int, page_size: int) -> PaginationResult[ShoppingList]:
        statement = select(ShoppingListORM).order_by(ShoppingListORM.created_at.desc())
        return paginate(self._session, statement, page_number, page_size, to_model)


__all__ = ["ShoppingListRepository", "to_model"]
