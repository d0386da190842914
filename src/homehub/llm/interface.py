"""Recipe generation backend abstraction."""

from __future__ import annotations

from typing import List, Optional, Protocol, Sequence

from homehub.cancellation import CancellationToken
from homehub.models.recipe import GeneratedRecipe


class RecipeGenerator(Protocol):
    """Protocol for recipe suggestion backends.

    Implementations receive inventory item *names* and return suggestions whose
    ingredients are referenced by name; matching back to inventory ids is the caller's job.
    """

    source: str

    def generate(
        self,
        inventory_item_names: Sequence[str],
        user_description: Optional[str] = None,
        *,
        cancel: CancellationToken | None = None,
    ) -> List[GeneratedRecipe]:
        """Return generated recipe suggestions for the supplied ingredient names."""
