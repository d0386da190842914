"""Command-line interface for HomeHub."""

from __future__ import annotations

import json
from typing import List, Optional

import typer

from homehub.config import get_settings
from homehub.db.inventory import InventoryRepository
from homehub.db.recipes import RecipeRepository
from homehub.db.repository import session_scope
from homehub.db.shopping_list import ShoppingListRepository
from homehub.errors import HomeHubError
from homehub.llm import build_recipe_generator
from homehub.logging_utils import configure_logging
from homehub.services import RecipeService, ShoppingListService

app = typer.Typer(help="HomeHub household inventory, recipe and shopping list commands.")


def _echo_json(payload: object, pretty: bool) -> None:
    if pretty:
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
    else:
        typer.echo(json.dumps(payload))


def _fail(exc: HomeHubError) -> None:
    typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.callback()
def _setup() -> None:
    settings = get_settings()
    configure_logging(
        settings.log_level,
        settings.log_format,
        [settings.api_token or "", settings.openai_api_key or ""],
    )


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind."),
    port: int = typer.Option(8000, "--port", help="Port to listen on."),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes."),
) -> None:
    """Run the HTTP API with uvicorn."""

    from homehub.server.run import serve as run_server

    run_server(host=host, port=port, reload=reload)


@app.command("generate-shopping-list")
def generate_shopping_list(
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """Create a shopping list for every item below its minimum quantity and print it."""

    try:
        with session_scope() as session:
            service = ShoppingListService(
                ShoppingListRepository(session),
                InventoryRepository(session),
            )
            list_id = service.generate()
            shopping_list = service.get_list(list_id)
    except HomeHubError as exc:
        _fail(exc)
        return
    _echo_json(shopping_list.model_dump(mode="json", by_alias=True), pretty)


@app.command("generate-recipes")
def generate_recipes(
    inventory_item_ids: List[str] = typer.Argument(..., help="Inventory item IDs to cook with."),
    description: Optional[str] = typer.Option(
        None,
        "--description",
        help="Free-text preferences passed to the generator.",
    ),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """Suggest three recipes built from the given inventory items."""

    generator = build_recipe_generator(get_settings())
    try:
        with session_scope() as session:
            service = RecipeService(
                RecipeRepository(session),
                InventoryRepository(session),
                generator,
            )
            recipes = service.generate_from_inventory(inventory_item_ids, description)
    except HomeHubError as exc:
        _fail(exc)
        return
    _echo_json([recipe.model_dump(mode="json", by_alias=True) for recipe in recipes], pretty)


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the ``homehub`` console script."""
    app(prog_name="homehub", args=argv)


if __name__ == "__main__":
    main()
