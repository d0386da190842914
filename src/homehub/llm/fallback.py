"""Deterministic recipe suggestions used when no generation provider is configured."""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from homehub.cancellation import CancellationToken
from homehub.errors import DomainValidationError
from homehub.models.recipe import GeneratedRecipe, GeneratedRecipeIngredient, GeneratedRecipeStep

_QUANTITIES = (Decimal("1"), Decimal("0.5"), Decimal("0.25"))

# (title, description, steps); "{items}" is the joined ingredient names.
_TEMPLATES = (
    (
        "Simple {items} Bowl",
        "A quick, comforting bowl built around {items}.",
        (
            "Rinse and prepare the {items}.",
            "Cook over medium heat until tender.",
            "Season to taste and serve warm.",
        ),
    ),
    (
        "{items} Skillet",
        "A one-pan skillet combining {items}.",
        (
            "Heat a large skillet with a little oil.",
            "Add the {items} and stir-fry for 8 to 10 minutes.",
            "Adjust seasoning and serve straight from the pan.",
        ),
    ),
    (
        "Baked {items} Medley",
        "An oven-baked medley of {items}.",
        (
            "Preheat the oven to 200°C.",
            "Toss the {items} together in a baking dish.",
            "Bake for 25 minutes, stirring halfway through.",
            "Rest for 5 minutes before serving.",
        ),
    ),
)


def _join_names(names: Sequence[str]) -> str:
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " and " + names[-1]


class TemplateRecipeGenerator:
    """Fabricate three illustrative recipes from the first one, two and three names.

    Output depends only on the ordered input so it can be asserted exactly.
    """

    source = "template"

    def generate(
        self,
        inventory_item_names: Sequence[str],
        user_description: Optional[str] = None,
        *,
        cancel: CancellationToken | None = None,
    ) -> List[GeneratedRecipe]:
        names = [name for name in inventory_item_names]
        if not names:
            raise DomainValidationError("At least one inventory item name must be provided.")
        if cancel is not None:
            cancel.raise_if_cancelled()

        preference = (user_description or "").strip()
        recipes: List[GeneratedRecipe] = []
        for position, (title, description, steps) in enumerate(_TEMPLATES, start=1):
            used = names[: min(position, len(names))]
            joined = _join_names(used)
            full_description = description.format(items=joined)
            if preference:
                full_description = f"{full_description} Tailored to: {preference}."
            recipes.append(
                GeneratedRecipe(
                    title=title.format(items=joined),
                    description=full_description,
                    steps=[
                        GeneratedRecipeStep(order=order, description=text.format(items=joined))
                        for order, text in enumerate(steps, start=1)
                    ],
                    ingredients=[
                        GeneratedRecipeIngredient(
                            inventory_item_name=name,
                            quantity=_QUANTITIES[index],
                        )
                        for index, name in enumerate(used)
                    ],
                )
            )
        return recipes


__all__ = ["TemplateRecipeGenerator"]
