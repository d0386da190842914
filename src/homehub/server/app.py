"""ASGI application for HomeHub."""

from __future__ import annotations

import asyncio
import logging
from time import perf_counter
from typing import Any, List, Optional
from uuid import uuid4

from fastapi import Body, Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from homehub import __version__, metrics
from homehub.cancellation import CancellationToken
from homehub.config import Settings, get_settings
from homehub.errors import (
    DomainValidationError,
    HomeHubError,
    NotFoundError,
    OperationCancelledError,
    UpstreamServiceError,
)
from homehub.logging_utils import (
    RequestContext,
    bind_request_context,
    configure_logging as configure_app_logging,
    reset_request_context,
)
from homehub.models.common import PaginationResult
from homehub.models.inventory import (
    InventoryItem,
    InventoryItemCreateRequest,
    InventoryItemUpdateRequest,
)
from homehub.models.recipe import (
    GeneratedRecipeResponse,
    GenerateRecipesRequest,
    Recipe,
    RecipeCreateRequest,
)
from homehub.models.shopping import (
    ShoppingList,
    ShoppingListItemUpdateRequest,
    ShoppingListUpdateRequest,
)
from homehub.server import deps
from homehub.services import InventoryService, RecipeService, ShoppingListService

logger = logging.getLogger(__name__)

HTTP_499_CLIENT_CLOSED_REQUEST = 499


def _json_safe(value: Any) -> Any:
    """Convert non-serializable values into JSON-safe representations."""

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return value.hex()
    if isinstance(value, (list, tuple)):
        return [_json_safe(entry) for entry in value]
    if isinstance(value, dict):
        return {key: _json_safe(sub_value) for key, sub_value in value.items()}
    if isinstance(value, Exception):
        return str(value)
    return repr(value)


def _normalize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Ensure validation error payloads can be serialized to JSON."""

    return [{key: _json_safe(value) for key, value in error.items()} for error in errors]


def _configure_logging(settings: Settings) -> None:
    secrets = [settings.api_token or "", settings.openai_api_key or ""]
    configure_app_logging(settings.log_level, settings.log_format, secrets)


def _log_extra(request: Request) -> dict[str, Any]:
    request_id = getattr(request.state, "request_id", None)
    return {"extra": {"request_id": request_id}} if request_id else {}


def _page_size(page_size: Optional[int], settings: Settings) -> int:
    return page_size if page_size is not None else settings.default_page_size


def create_app() -> FastAPI:
    """Create and configure a FastAPI application instance."""

    settings = get_settings()
    _configure_logging(settings)

    application = FastAPI(title="HomeHub", version=__version__)
    logger.debug("Application created with log level %s", settings.log_level)

    access_logger = logging.getLogger("homehub.access")

    @application.middleware("http")
    async def track_request(request: Request, call_next):
        """Assign a request id and cancellation token, then log and measure the request."""

        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        request.state.request_id = request_id
        cancel_token = CancellationToken()
        request.state.cancel_token = cancel_token
        start = perf_counter()
        method = request.method
        context_token = bind_request_context(
            RequestContext(
                request_id=request_id,
                method=method,
                scope=request.scope,
                cancel_token=cancel_token,
            )
        )
        try:
            try:
                response: Response = await call_next(request)
            except asyncio.CancelledError:
                cancel_token.cancel("Client disconnected.")
                raise
            except Exception:
                duration = perf_counter() - start
                path = getattr(request.scope.get("route"), "path", request.url.path)
                access_logger.exception(
                    "HTTP %s %s status=500 duration_ms=%.2f",
                    method,
                    request.url.path,
                    duration * 1000,
                )
                metrics.REQUEST_COUNT.labels(method=method, path=path, status="500").inc()
                metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration)
                raise

            duration = perf_counter() - start
            # Label by route template so ids do not explode metric cardinality.
            path = getattr(request.scope.get("route"), "path", request.url.path)
            response.headers.setdefault("X-Request-ID", request_id)
            if settings.log_requests:
                access_logger.info(
                    "HTTP %s %s status=%s duration_ms=%.2f",
                    method,
                    request.url.path,
                    response.status_code,
                    duration * 1000,
                )
            metrics.REQUEST_COUNT.labels(
                method=method,
                path=path,
                status=str(response.status_code),
            ).inc()
            metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration)
            return response
        finally:
            reset_request_context(context_token)

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        body_preview: str | None = None
        try:
            raw_body = await request.body()
            if raw_body:
                decoded = raw_body.decode("utf-8", errors="replace")
                if len(decoded) > 2048:
                    decoded = decoded[:2048] + "...(truncated)"
                body_preview = decoded
        except Exception:  # pragma: no cover - body preview is best effort
            body_preview = "<unable to read body>"

        logger.warning(
            "Validation error on %s %s: %s | body=%s",
            request.method,
            request.url.path,
            exc.errors(),
            body_preview,
            **_log_extra(request),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": _normalize_validation_errors(exc.errors())},
        )

    @application.exception_handler(DomainValidationError)
    async def domain_validation_handler(request: Request, exc: DomainValidationError):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc, **_log_extra(request))
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    @application.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @application.exception_handler(UpstreamServiceError)
    async def upstream_error_handler(request: Request, exc: UpstreamServiceError):
        logger.error(
            "Upstream failure on %s %s: %s", request.method, request.url.path, exc, **_log_extra(request)
        )
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)})

    @application.exception_handler(OperationCancelledError)
    async def cancelled_handler(request: Request, exc: OperationCancelledError):
        logger.info("Cancelled %s %s: %s", request.method, request.url.path, exc, **_log_extra(request))
        return JSONResponse(status_code=HTTP_499_CLIENT_CLOSED_REQUEST, content={"detail": str(exc)})

    @application.exception_handler(HomeHubError)
    async def homehub_error_handler(request: Request, exc: HomeHubError):
        logger.error(
            "Unhandled application error on %s %s: %s",
            request.method,
            request.url.path,
            exc,
            **_log_extra(request),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)}
        )

    @application.get("/health", include_in_schema=False)
    def health_endpoint() -> dict[str, str]:
        return {"status": "ok"}

    @application.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        payload = generate_latest()
        return Response(content=payload, media_type=CONTENT_TYPE_LATEST)

    # Inventory

    @application.get(
        "/api/Inventory",
        response_model=PaginationResult[InventoryItem],
        summary="List active inventory items",
    )
    def inventory_list(
        page_number: int = Query(default=1, alias="pageNumber", ge=1),
        page_size: Optional[int] = Query(default=None, alias="pageSize", ge=1),
        service: InventoryService = Depends(deps.get_inventory_service),
    ) -> PaginationResult[InventoryItem]:
        return service.list_items(page_number, _page_size(page_size, settings))

    @application.get(
        "/api/Inventory/{item_id}",
        response_model=InventoryItem,
        summary="Get inventory item",
    )
    def inventory_get(
        item_id: str,
        service: InventoryService = Depends(deps.get_inventory_service),
    ) -> InventoryItem:
        return service.get_item(item_id)

    @application.post(
        "/api/Inventory",
        response_model=str,
        status_code=status.HTTP_201_CREATED,
        summary="Create inventory item",
    )
    def inventory_create(
        payload: InventoryItemCreateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        service: InventoryService = Depends(deps.get_inventory_service),
    ) -> str:
        return service.create_item(
            payload.name,
            payload.quantity_available,
            payload.minimum_quantity,
        )

    @application.put(
        "/api/Inventory/{item_id}",
        response_model=InventoryItem,
        summary="Update inventory item",
    )
    def inventory_update(
        item_id: str,
        payload: InventoryItemUpdateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        service: InventoryService = Depends(deps.get_inventory_service),
    ) -> InventoryItem:
        logger.debug(
            "Updating inventory item %s with payload=%s",
            item_id,
            payload.model_dump(exclude_unset=True),
        )
        return service.update_item(
            item_id,
            name=payload.name,
            quantity_available=payload.quantity_available,
            minimum_quantity=payload.minimum_quantity,
        )

    @application.delete(
        "/api/Inventory/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete inventory item",
    )
    def inventory_delete(
        item_id: str,
        auth: None = Depends(deps.require_api_token),
        service: InventoryService = Depends(deps.get_inventory_service),
    ) -> None:
        service.delete_item(item_id)

    # Recipes

    @application.get(
        "/api/Recipe",
        response_model=PaginationResult[Recipe],
        summary="List recipes",
    )
    def recipe_list(
        page_number: int = Query(default=1, alias="pageNumber", ge=1),
        page_size: Optional[int] = Query(default=None, alias="pageSize", ge=1),
        service: RecipeService = Depends(deps.get_recipe_service),
    ) -> PaginationResult[Recipe]:
        return service.list_recipes(page_number, _page_size(page_size, settings))

    @application.post(
        "/api/Recipe/generate-from-inventory",
        response_model=List[GeneratedRecipeResponse],
        summary="Suggest recipes from inventory items",
    )
    def recipe_generate(
        payload: GenerateRecipesRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        service: RecipeService = Depends(deps.get_recipe_service),
    ) -> List[GeneratedRecipeResponse]:
        return service.generate_from_inventory(
            payload.inventory_item_ids,
            payload.user_description,
        )

    @application.get(
        "/api/Recipe/{recipe_id}",
        response_model=Recipe,
        summary="Get recipe",
    )
    def recipe_get(
        recipe_id: str,
        service: RecipeService = Depends(deps.get_recipe_service),
    ) -> Recipe:
        return service.get_recipe(recipe_id)

    @application.post(
        "/api/Recipe",
        response_model=str,
        status_code=status.HTTP_201_CREATED,
        summary="Create recipe",
    )
    def recipe_create(
        payload: RecipeCreateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        service: RecipeService = Depends(deps.get_recipe_service),
    ) -> str:
        return service.create_recipe(
            payload.title,
            payload.description,
            payload.steps,
            payload.ingredients,
        )

    # Shopping lists

    @application.get(
        "/api/ShoppingList",
        response_model=PaginationResult[ShoppingList],
        summary="List shopping lists",
    )
    def shopping_list_list(
        page_number: int = Query(default=1, alias="pageNumber", ge=1),
        page_size: Optional[int] = Query(default=None, alias="pageSize", ge=1),
        service: ShoppingListService = Depends(deps.get_shopping_list_service),
    ) -> PaginationResult[ShoppingList]:
        return service.list_lists(page_number, _page_size(page_size, settings))

    @application.post(
        "/api/ShoppingList/generate",
        response_model=str,
        status_code=status.HTTP_201_CREATED,
        summary="Generate a shopping list from low-stock inventory",
    )
    def shopping_list_generate(
        auth: None = Depends(deps.require_api_token),
        service: ShoppingListService = Depends(deps.get_shopping_list_service),
    ) -> str:
        return service.generate()

    @application.get(
        "/api/ShoppingList/{list_id}",
        response_model=ShoppingList,
        summary="Get shopping list",
    )
    def shopping_list_get(
        list_id: str,
        service: ShoppingListService = Depends(deps.get_shopping_list_service),
    ) -> ShoppingList:
        return service.get_list(list_id)

    @application.put(
        "/api/ShoppingList/{list_id}",
        response_model=ShoppingList,
        summary="Mark a shopping list completed or open",
    )
    def shopping_list_update(
        list_id: str,
        payload: ShoppingListUpdateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        service: ShoppingListService = Depends(deps.get_shopping_list_service),
    ) -> ShoppingList:
        return service.set_completed(list_id, payload.is_completed)

    @application.put(
        "/api/ShoppingList/{list_id}/items/{item_id}",
        response_model=ShoppingList,
        summary="Mark a shopping list item purchased or not",
    )
    def shopping_list_item_update(
        list_id: str,
        item_id: str,
        payload: ShoppingListItemUpdateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        service: ShoppingListService = Depends(deps.get_shopping_list_service),
    ) -> ShoppingList:
        return service.set_item_purchased(list_id, item_id, payload.is_purchased)

    return application


app = create_app()

__all__ = ["app", "create_app"]
