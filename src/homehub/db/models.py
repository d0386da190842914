"""SQLAlchemy models representing HomeHub persistence tables.

The ORM classes double as the domain aggregates: constructors and mutators enforce the
entity invariants and raise :class:`~homehub.errors.DomainValidationError` on violation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, validates
from sqlalchemy.types import TypeDecorator

from homehub.errors import DomainValidationError


def new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_decimal(value: object, field: str = "quantity") -> Decimal:
    """Coerce ``value`` into an exact ``Decimal`` (floats go through their repr)."""

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise DomainValidationError(f"{field} must be a number.")
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as exc:
            raise DomainValidationError(f"{field} must be a number.") from exc
    else:
        raise DomainValidationError(f"{field} must be a number.")
    if not result.is_finite():
        raise DomainValidationError(f"{field} must be a finite number.")
    return result


def _require_text(value: Optional[str], message: str) -> str:
    if value is None or not str(value).strip():
        raise DomainValidationError(message)
    return str(value)


class ExactDecimal(TypeDecorator):
    """Store decimals as text so quantities round-trip without binary rounding."""

    impl = String(64)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(to_decimal(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


class Base(DeclarativeBase):
    """Declarative base class for HomeHub ORM models."""


class InventoryItemORM(Base):
    """Pantry inventory item; deletion is a soft delete via ``is_active``."""

    __tablename__ = "inventory_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity_available: Mapped[Decimal] = mapped_column(ExactDecimal, nullable=False)
    minimum_quantity: Mapped[Decimal] = mapped_column(ExactDecimal, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True, onupdate=_utcnow
    )

    def __init__(
        self,
        name: str,
        quantity_available: object,
        minimum_quantity: object,
        *,
        id: Optional[str] = None,
    ) -> None:
        self.id = id or new_id()
        self.name = name
        self.quantity_available = quantity_available  # type: ignore[assignment]
        self.minimum_quantity = minimum_quantity  # type: ignore[assignment]
        self.is_active = True
        self.created_at = _utcnow()

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        return _require_text(value, "Name cannot be null or empty.").strip()

    @validates("quantity_available", "minimum_quantity")
    def _validate_quantity(self, key: str, value: object) -> Decimal:
        quantity = to_decimal(value, key)
        if quantity < 0:
            raise DomainValidationError(f"{key} cannot be negative.")
        return quantity

    def apply_update(
        self,
        *,
        name: Optional[str] = None,
        quantity_available: object | None = None,
        minimum_quantity: object | None = None,
    ) -> None:
        """Replace the supplied fields; ``None`` leaves a field unchanged."""

        if name is not None:
            self.name = name
        if quantity_available is not None:
            self.quantity_available = quantity_available  # type: ignore[assignment]
        if minimum_quantity is not None:
            self.minimum_quantity = minimum_quantity  # type: ignore[assignment]

    def mark_inactive(self) -> None:
        self.is_active = False

    @property
    def is_below_minimum(self) -> bool:
        return self.quantity_available < self.minimum_quantity

    @property
    def deficit(self) -> Decimal:
        return self.minimum_quantity - self.quantity_available


class RecipeStepORM(Base):
    """Single ordered instruction belonging to a recipe."""

    __tablename__ = "recipe_steps"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    order: Mapped[int] = mapped_column("step_order", Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True, onupdate=_utcnow
    )

    recipe: Mapped["RecipeORM"] = relationship(back_populates="steps")

    __table_args__ = (UniqueConstraint("recipe_id", "step_order", name="uq_recipe_steps_order"),)

    def __init__(self, recipe_id: str, order: int, description: str) -> None:
        self.id = new_id()
        self.recipe_id = recipe_id
        self.order = int(order)
        self.description = description
        self.created_at = _utcnow()

    @validates("description")
    def _validate_description(self, key: str, value: str) -> str:
        return _require_text(value, "Step description cannot be null or empty.")


class RecipeIngredientORM(Base):
    """Quantity of an inventory item used by a recipe."""

    __tablename__ = "recipe_ingredients"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    inventory_item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("inventory_items.id"), nullable=False, index=True
    )
    quantity: Mapped[Decimal] = mapped_column(ExactDecimal, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True, onupdate=_utcnow
    )

    recipe: Mapped["RecipeORM"] = relationship(back_populates="ingredients")
    inventory_item: Mapped[InventoryItemORM] = relationship(lazy="joined")

    __table_args__ = (
        UniqueConstraint("recipe_id", "inventory_item_id", name="uq_recipe_ingredients_item"),
    )

    def __init__(self, recipe_id: str, inventory_item_id: str, quantity: object) -> None:
        self.id = new_id()
        self.recipe_id = recipe_id
        self.inventory_item_id = inventory_item_id
        self.quantity = quantity  # type: ignore[assignment]
        self.is_active = True
        self.created_at = _utcnow()

    @validates("quantity")
    def _validate_quantity(self, key: str, value: object) -> Decimal:
        quantity = to_decimal(value, key)
        if quantity <= 0:
            raise DomainValidationError("Quantity must be greater than zero.")
        return quantity

    def mark_inactive(self) -> None:
        self.is_active = False


class RecipeORM(Base):
    """Recipe aggregate: unique step orders and unique inventory references."""

    __tablename__ = "recipes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True, onupdate=_utcnow
    )

    steps: Mapped[List[RecipeStepORM]] = relationship(
        back_populates="recipe",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    ingredients: Mapped[List[RecipeIngredientORM]] = relationship(
        back_populates="recipe",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __init__(self, title: str, description: Optional[str] = None) -> None:
        self.id = new_id()
        self.title = title
        self.description = description or ""
        self.created_at = _utcnow()

    @validates("title")
    def _validate_title(self, key: str, value: str) -> str:
        return _require_text(value, "Title cannot be null or empty.")

    @property
    def ordered_steps(self) -> List[RecipeStepORM]:
        return sorted(self.steps, key=lambda step: step.order)

    def add_step(self, order: int, description: str) -> RecipeStepORM:
        _require_text(description, "Step description cannot be null or empty.")
        if any(step.order == order for step in self.steps):
            raise DomainValidationError(f"Step with order {order} already exists.")
        step = RecipeStepORM(self.id, order, description)
        self.steps.append(step)
        return step

    def add_ingredient(self, inventory_item_id: str, quantity: object) -> RecipeIngredientORM:
        if to_decimal(quantity) <= 0:
            raise DomainValidationError("Quantity must be greater than zero.")
        if any(ingredient.inventory_item_id == inventory_item_id for ingredient in self.ingredients):
            raise DomainValidationError(
                "Ingredient with this inventory item already exists in the recipe."
            )
        ingredient = RecipeIngredientORM(self.id, inventory_item_id, quantity)
        self.ingredients.append(ingredient)
        return ingredient


class ShoppingListItemORM(Base):
    """Quantity of an inventory item to buy on a shopping list."""

    __tablename__ = "shopping_list_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    shopping_list_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("shopping_lists.id", ondelete="CASCADE"), nullable=False
    )
    inventory_item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("inventory_items.id"), nullable=False, index=True
    )
    quantity_to_buy: Mapped[Decimal] = mapped_column(ExactDecimal, nullable=False)
    is_purchased: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True, onupdate=_utcnow
    )

    shopping_list: Mapped["ShoppingListORM"] = relationship(back_populates="items")
    inventory_item: Mapped[InventoryItemORM] = relationship(lazy="joined")

    def __init__(self, shopping_list_id: str, inventory_item_id: str, quantity_to_buy: object) -> None:
        self.id = new_id()
        self.shopping_list_id = shopping_list_id
        self.inventory_item_id = inventory_item_id
        self.quantity_to_buy = quantity_to_buy  # type: ignore[assignment]
        self.is_purchased = False
        self.is_active = True
        self.created_at = _utcnow()

    @validates("quantity_to_buy")
    def _validate_quantity(self, key: str, value: object) -> Decimal:
        quantity = to_decimal(value, key)
        if quantity <= 0:
            raise DomainValidationError("Quantity to buy must be greater than zero.")
        return quantity

    def mark_purchased(self) -> None:
        self.is_purchased = True

    def mark_not_purchased(self) -> None:
        self.is_purchased = False

    def mark_inactive(self) -> None:
        self.is_active = False


class ShoppingListORM(Base):
    """Shopping list generated from low-stock inventory."""

    __tablename__ = "shopping_lists"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True, onupdate=_utcnow
    )

    items: Mapped[List[ShoppingListItemORM]] = relationship(
        back_populates="shopping_list",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __init__(self, items: Iterable[ShoppingListItemORM] = ()) -> None:
        self.id = new_id()
        self.is_completed = False
        self.created_at = _utcnow()
        for item in items:
            self.add_item(item)

    def add_item(self, item: ShoppingListItemORM) -> None:
        item.shopping_list_id = self.id
        self.items.append(item)

    def mark_completed(self) -> None:
        self.is_completed = True

    def mark_incomplete(self) -> None:
        self.is_completed = False


__all__ = [
    "Base",
    "ExactDecimal",
    "InventoryItemORM",
    "RecipeORM",
    "RecipeStepORM",
    "RecipeIngredientORM",
    "ShoppingListORM",
    "ShoppingListItemORM",
    "new_id",
    "to_decimal",
]
