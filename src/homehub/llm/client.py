"""OpenAI/Ollama-compatible chat client that suggests recipes from inventory names."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import httpx

from homehub.cancellation import CancellationToken
from homehub.config import Settings
from homehub.errors import DomainValidationError, UpstreamServiceError
from homehub.llm.fallback import TemplateRecipeGenerator
from homehub.llm.interface import RecipeGenerator
from homehub.llm.parsing import parse_generated_recipes
from homehub.llm.prompts import GENERATE_RECIPES_PROMPT_ID, build_prompt, load_prompt
from homehub.models.recipe import GeneratedRecipe

EXPECTED_RECIPE_COUNT = 3
_UNEXPECTED_SHAPE = "Recipe generation endpoint returned an unexpected response shape."

RECIPE_SYSTEM_PROMPT = (
    "You are a helpful cooking assistant that generates recipes in JSON format. "
    "Always return exactly 3 recipes."
)

logger = logging.getLogger(__name__)


class OpenAIRecipeGenerator:
    """Call an OpenAI/Ollama-compatible endpoint and parse three recipe suggestions."""

    source = "openai"

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        model: str,
        provider: str = "openai",
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 60.0,
        prompts_dir: Path | None = None,
        prompt_loader: Callable[[str], str] | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._provider = (provider or "openai").strip().lower()
        self._temperature = max(0.0, float(temperature))
        self._max_tokens = max(1, int(max_tokens))
        self._timeout = float(timeout)
        self._prompt_loader = prompt_loader or (
            lambda prompt_id: load_prompt(prompt_id, prompts_dir)
        )
        self._http_client = http_client

    def generate(
        self,
        inventory_item_names: Sequence[str],
        user_description: Optional[str] = None,
        *,
        cancel: CancellationToken | None = None,
    ) -> List[GeneratedRecipe]:
        names = list(inventory_item_names)
        if not names:
            raise DomainValidationError("At least one inventory item name must be provided.")
        if cancel is not None:
            cancel.raise_if_cancelled()

        try:
            template = self._prompt_loader(GENERATE_RECIPES_PROMPT_ID)
        except FileNotFoundError as exc:
            raise UpstreamServiceError(str(exc)) from exc
        user_prompt = build_prompt(template, names, user_description)
        logger.info(
            "Requesting recipe suggestions model=%s provider=%s items=%d",
            self._model,
            self._provider,
            len(names),
        )
        content = self._execute_chat(RECIPE_SYSTEM_PROMPT, user_prompt)

        if cancel is not None:
            cancel.raise_if_cancelled()

        recipes = parse_generated_recipes(content)
        if len(recipes) != EXPECTED_RECIPE_COUNT:
            logger.warning(
                "Recipe generator returned %d recipes (expected %d)",
                len(recipes),
                EXPECTED_RECIPE_COUNT,
            )
        return recipes

    def _post(self, endpoint: str, payload: dict[str, object]) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self._api_key}"}
        try:
            if self._http_client is not None:
                response = self._http_client.post(
                    endpoint, json=payload, headers=headers, timeout=self._timeout
                )
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    response = client.post(endpoint, json=payload, headers=headers)
        except httpx.TimeoutException as exc:
            logger.warning("Recipe generation request timed out after %.1fs", self._timeout)
            raise UpstreamServiceError("Recipe generation request timed out.") from exc
        except httpx.HTTPError as exc:
            logger.warning("Recipe generation request failed: %s", exc)
            raise UpstreamServiceError(f"Recipe generation request failed: {exc}") from exc

        if response.status_code >= 400:
            snippet = response.text.strip().replace("\n", " ")[:200]
            logger.warning(
                "Recipe generation endpoint returned HTTP %d: %s", response.status_code, snippet
            )
            raise UpstreamServiceError(
                f"Recipe generation endpoint returned HTTP {response.status_code}."
            )
        return response

    @staticmethod
    def _json_body(response: httpx.Response) -> dict:
        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamServiceError("Recipe generation endpoint returned non-JSON body.") from exc
        if not isinstance(body, dict):
            raise UpstreamServiceError("Recipe generation endpoint returned an unexpected body.")
        return body

    @staticmethod
    def _message_content(message: object) -> str:
        """Return the stripped text of a chat ``message`` object, or "" when it has none."""

        if message is None:
            return ""
        if not isinstance(message, dict):
            raise UpstreamServiceError(_UNEXPECTED_SHAPE)
        content = message.get("content")
        if content is None:
            return ""
        if not isinstance(content, str):
            raise UpstreamServiceError(_UNEXPECTED_SHAPE)
        return content.strip()

    def _execute_chat(self, system: str, user: str) -> str:
        messages = [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ]
        if self._provider == "ollama":
            endpoint = self._base_url
            if not endpoint.endswith("/api/chat"):
                endpoint = f"{endpoint}/api/chat"
            payload = {
                "model": self._model,
                "messages": messages,
                "stream": False,
                "options": {
                    "temperature": self._temperature,
                    "num_predict": self._max_tokens,
                },
            }
            body = self._json_body(self._post(endpoint, payload))
            content = self._message_content(body.get("message"))
            if not content:
                raise UpstreamServiceError("Ollama recipe response did not include content.")
            return content

        endpoint = self._base_url
        if not endpoint.endswith("/chat/completions"):
            endpoint = f"{endpoint}/chat/completions"
        payload = {
            "model": self._model,
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
            "messages": messages,
        }
        body = self._json_body(self._post(endpoint, payload))
        choices = body.get("choices") or []
        if not isinstance(choices, list):
            raise UpstreamServiceError(_UNEXPECTED_SHAPE)
        if not choices:
            raise UpstreamServiceError("Recipe generation endpoint returned no choices.")
        choice = choices[0]
        if not isinstance(choice, dict):
            raise UpstreamServiceError(_UNEXPECTED_SHAPE)
        content = self._message_content(choice.get("message"))
        if not content:
            raise UpstreamServiceError("Recipe generation endpoint returned an empty response.")
        return content


def build_recipe_generator(settings: Settings) -> RecipeGenerator:
    """Return the live client when an API key is configured, else the template fallback."""

    if not settings.ai_enabled:
        logger.debug("No recipe generation API key configured; using template recipes.")
        return TemplateRecipeGenerator()

    assert settings.openai_api_key is not None
    return OpenAIRecipeGenerator(
        api_key=settings.openai_api_key.strip(),
        base_url=settings.openai_base_url,
        model=settings.openai_model,
        provider=settings.openai_provider,
        temperature=settings.openai_temperature,
        max_tokens=settings.openai_max_tokens,
        timeout=settings.openai_timeout,
        prompts_dir=settings.prompts_dir,
    )


__all__ = ["OpenAIRecipeGenerator", "build_recipe_generator", "RECIPE_SYSTEM_PROMPT"]
