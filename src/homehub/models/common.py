"""Shared building blocks for the API data contracts."""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Exact decimals internally; plain JSON numbers on the wire.
Quantity = Annotated[
    Decimal,
    PlainSerializer(lambda value: float(value), return_type=float, when_used="json"),
]


class ApiModel(BaseModel):
    """Base model serialised in camelCase and accepting either casing on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class PaginationResult(ApiModel, Generic[T]):
    """One page of results plus paging metadata."""

    items: List[T]
    total_count: int
    page_number: int
    page_size: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


__all__ = ["ApiModel", "PaginationResult", "Quantity"]
