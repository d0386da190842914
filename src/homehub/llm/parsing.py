"""Parsing of recipe generator output.

The generator returns semi-structured text: usually JSON, sometimes wrapped in markdown
fences or surrounded by chatter. Everything here is pure so it can be tested without a
live endpoint. Structural problems are collected across the whole payload and reported
together in a single :class:`~homehub.errors.RecipeParseError`.
"""

from __future__ import annotations

import json
import re
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

from homehub.errors import RecipeParseError
from homehub.models.recipe import GeneratedRecipe, GeneratedRecipeIngredient, GeneratedRecipeStep

_FENCED_BLOCK_RE = re.compile(r"```(?:json|JSON)?\s*(.*?)\s*```", re.DOTALL)


def extract_json_blob(text: str) -> str:
    """Strip markdown fences and surrounding prose, returning the JSON object text."""

    stripped = text.strip()
    match = _FENCED_BLOCK_RE.search(stripped)
    if match:
        stripped = match.group(1).strip()
    elif stripped.startswith("```"):
        # Unterminated fence (truncated response).
        stripped = re.sub(r"^```(?:json|JSON)?", "", stripped).strip()

    start = stripped.find("{")
    end = stripped.rfind("}")
    if start != -1 and end != -1 and end > start:
        return stripped[start : end + 1].strip()
    return stripped


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, Decimal)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _string(entry: dict, key: str, path: str, problems: List[str]) -> Optional[str]:
    if key not in entry:
        problems.append(f"{path}.{key}: missing")
        return None
    value = entry[key]
    if not isinstance(value, str):
        problems.append(f"{path}.{key}: expected string, got {_type_name(value)}")
        return None
    return value


def _order(value: Any, path: str, problems: List[str]) -> Optional[int]:
    if isinstance(value, bool):
        problems.append(f"{path}: expected integer, got boolean")
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, Decimal) and value == value.to_integral_value():
        return int(value)
    problems.append(f"{path}: expected integer, got {_type_name(value)}")
    return None


def _quantity(value: Any, path: str, problems: List[str]) -> Optional[Decimal]:
    parsed: Optional[Decimal] = None
    if isinstance(value, bool):
        problems.append(f"{path}: expected number, got boolean")
        return None
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, int):
        parsed = Decimal(value)
    elif isinstance(value, str):
        try:
            parsed = Decimal(value.strip())
        except InvalidOperation:
            problems.append(f"{path}: expected number, got non-numeric string {value!r}")
            return None

    if parsed is None or not parsed.is_finite():
        problems.append(f"{path}: expected number, got {_type_name(value)}")
        return None
    # Recipes only accept positive ingredient quantities.
    if parsed <= 0:
        problems.append(f"{path}: must be greater than zero")
        return None
    return parsed


def _parse_steps(raw: Any, path: str, problems: List[str]) -> List[GeneratedRecipeStep]:
    if not isinstance(raw, list):
        problems.append(f"{path}: expected array, got {_type_name(raw)}")
        return []
    steps: List[GeneratedRecipeStep] = []
    for index, entry in enumerate(raw):
        step_path = f"{path}[{index}]"
        if not isinstance(entry, dict):
            problems.append(f"{step_path}: expected object, got {_type_name(entry)}")
            continue
        order = None
        if "order" not in entry:
            problems.append(f"{step_path}.order: missing")
        else:
            order = _order(entry["order"], f"{step_path}.order", problems)
        description = _string(entry, "description", step_path, problems)
        if order is not None and description is not None:
            steps.append(GeneratedRecipeStep(order=order, description=description))
    return steps


def _parse_ingredients(
    raw: Any, path: str, problems: List[str]
) -> List[GeneratedRecipeIngredient]:
    if not isinstance(raw, list):
        problems.append(f"{path}: expected array, got {_type_name(raw)}")
        return []
    ingredients: List[GeneratedRecipeIngredient] = []
    for index, entry in enumerate(raw):
        ingredient_path = f"{path}[{index}]"
        if not isinstance(entry, dict):
            problems.append(f"{ingredient_path}: expected object, got {_type_name(entry)}")
            continue
        name = _string(entry, "inventoryItemName", ingredient_path, problems)
        quantity = None
        if "quantity" not in entry:
            problems.append(f"{ingredient_path}.quantity: missing")
        else:
            quantity = _quantity(entry["quantity"], f"{ingredient_path}.quantity", problems)
        if name is not None and quantity is not None:
            ingredients.append(
                GeneratedRecipeIngredient(inventory_item_name=name, quantity=quantity)
            )
    return ingredients


def parse_generated_recipes(content: str) -> List[GeneratedRecipe]:
    """Parse generator output into :class:`GeneratedRecipe` objects.

    Expected shape::

        {"recipes": [{"title": str, "description": str,
                      "steps": [{"order": int, "description": str}],
                      "ingredients": [{"inventoryItemName": str, "quantity": number}]}]}

    ``steps`` and ``ingredients`` may be omitted. Raises ``RecipeParseError`` listing
    every problem found when the content does not match.
    """

    if content is None or not content.strip():
        raise RecipeParseError(["response: empty content"])

    blob = extract_json_blob(content)
    try:
        document = json.loads(blob, parse_float=Decimal)
    except json.JSONDecodeError as exc:
        snippet = blob.replace("\n", " ")[:200]
        raise RecipeParseError(
            [f"response: invalid JSON ({exc.msg} at line {exc.lineno} column {exc.colno}): {snippet}"]
        ) from exc

    if not isinstance(document, dict):
        raise RecipeParseError([f"response: expected object, got {_type_name(document)}"])
    if "recipes" not in document:
        raise RecipeParseError(["recipes: missing"])
    raw_recipes = document["recipes"]
    if not isinstance(raw_recipes, list):
        raise RecipeParseError([f"recipes: expected array, got {_type_name(raw_recipes)}"])

    problems: List[str] = []
    recipes: List[GeneratedRecipe] = []
    for index, entry in enumerate(raw_recipes):
        path = f"recipes[{index}]"
        if not isinstance(entry, dict):
            problems.append(f"{path}: expected object, got {_type_name(entry)}")
            continue
        title = _string(entry, "title", path, problems)
        description = _string(entry, "description", path, problems)
        steps = _parse_steps(entry["steps"], f"{path}.steps", problems) if "steps" in entry else []
        ingredients = (
            _parse_ingredients(entry["ingredients"], f"{path}.ingredients", problems)
            if "ingredients" in entry
            else []
        )
        if title is None or description is None:
            continue
        recipes.append(
            GeneratedRecipe(
                title=title,
                description=description,
                steps=steps,
                ingredients=ingredients,
            )
        )

    if problems:
        raise RecipeParseError(problems)
    return recipes


__all__ = ["extract_json_blob", "parse_generated_recipes"]
