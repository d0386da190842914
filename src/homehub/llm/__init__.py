"""Recipe generation backends."""

from homehub.llm.client import OpenAIRecipeGenerator, build_recipe_generator
from homehub.llm.fallback import TemplateRecipeGenerator
from homehub.llm.interface import RecipeGenerator
from homehub.llm.parsing import extract_json_blob, parse_generated_recipes
from homehub.llm.prompts import GENERATE_RECIPES_PROMPT_ID, build_prompt, load_prompt

__all__ = [
    "RecipeGenerator",
    "OpenAIRecipeGenerator",
    "TemplateRecipeGenerator",
    "build_recipe_generator",
    "extract_json_blob",
    "parse_generated_recipes",
    "GENERATE_RECIPES_PROMPT_ID",
    "build_prompt",
    "load_prompt",
]
