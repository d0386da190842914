"""Prompt template loading."""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path

logger = logging.getLogger(__name__)

GENERATE_RECIPES_PROMPT_ID = "generate-recipes-from-inventory"


def load_prompt(prompt_id: str, prompts_dir: Path | None = None) -> str:
    """Return the trimmed text of ``<prompt_id>.txt``.

    Templates are read from ``prompts_dir`` when given, otherwise from the packaged
    ``homehub.prompts`` resources.
    """

    if not prompt_id or not prompt_id.strip():
        raise ValueError("Prompt ID cannot be null or empty.")

    filename = f"{prompt_id.strip()}.txt"
    if prompts_dir is not None:
        path = Path(prompts_dir) / filename
        if not path.is_file():
            logger.error("Prompt file not found: %s", path)
            raise FileNotFoundError(f"Prompt file not found for ID: {prompt_id}")
        return path.read_text(encoding="utf-8").strip()

    resource = resources.files("homehub.prompts").joinpath(filename)
    if not resource.is_file():
        logger.error("Packaged prompt not found: %s", filename)
        raise FileNotFoundError(f"Prompt file not found for ID: {prompt_id}")
    return resource.read_text(encoding="utf-8").strip()


def build_prompt(template: str, inventory_item_names: list[str], user_description: str | None) -> str:
    """Fill the ``{inventory_items}`` and ``{user_description}`` placeholders."""

    items_list = ", ".join(inventory_item_names)
    description_text = ""
    if user_description and user_description.strip():
        description_text = f" Additional requirements or preferences: {user_description.strip()}"
    # str.format would trip over the JSON example braces in the templates.
    return template.replace("{inventory_items}", items_list).replace(
        "{user_description}", description_text
    )


__all__ = ["GENERATE_RECIPES_PROMPT_ID", "load_prompt", "build_prompt"]
