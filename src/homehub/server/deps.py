"""Dependency definitions for the HomeHub API server."""

from __future__ import annotations

from typing import Generator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from homehub.cancellation import CancellationToken
from homehub.config import Settings, get_settings
from homehub.db.inventory import InventoryRepository
from homehub.db.recipes import RecipeRepository
from homehub.db.repository import session_scope
from homehub.db.shopping_list import ShoppingListRepository
from homehub.llm import RecipeGenerator, build_recipe_generator
from homehub.services import InventoryService, RecipeService, ShoppingListService


def get_db_session() -> Generator[Session, None, None]:
    """Open one unit of work per request; it commits on success and rolls back on error."""

    with session_scope() as session:
        yield session


def get_cancellation_token(request: Request) -> CancellationToken:
    """Return a token the request (or middleware) can fire to stop work early."""

    token = getattr(request.state, "cancel_token", None)
    if token is None:
        token = CancellationToken()
        request.state.cancel_token = token
    return token


def get_recipe_generator(settings: Settings = Depends(get_settings)) -> RecipeGenerator:
    return build_recipe_generator(settings)


def get_inventory_service(
    session: Session = Depends(get_db_session),
    cancel: CancellationToken = Depends(get_cancellation_token),
) -> InventoryService:
    return InventoryService(InventoryRepository(session), cancel=cancel)


def get_recipe_service(
    session: Session = Depends(get_db_session),
    generator: RecipeGenerator = Depends(get_recipe_generator),
    cancel: CancellationToken = Depends(get_cancellation_token),
) -> RecipeService:
    return RecipeService(
        RecipeRepository(session),
        InventoryRepository(session),
        generator,
        cancel=cancel,
    )


def get_shopping_list_service(
    session: Session = Depends(get_db_session),
    cancel: CancellationToken = Depends(get_cancellation_token),
) -> ShoppingListService:
    return ShoppingListService(
        ShoppingListRepository(session),
        InventoryRepository(session),
        cancel=cancel,
    )


def require_api_token(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """Ensure requests carry the configured API token when required."""

    token = settings.api_token
    if not token:
        return

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.split("Bearer ")[-1].strip() == token:
        return

    if request.headers.get("X-API-Key") == token:
        return

    if request.query_params.get("api_token") == token:
        return

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


__all__ = [
    "get_db_session",
    "get_cancellation_token",
    "get_recipe_generator",
    "get_inventory_service",
    "get_recipe_service",
    "get_shopping_list_service",
    "require_api_token",
]
