"""Exception types shared by the service, persistence and API layers."""

from __future__ import annotations

from typing import Sequence


class HomeHubError(Exception):
    """Base class for HomeHub application errors."""


class DomainValidationError(HomeHubError, ValueError):
    """Input or entity state violates a domain rule."""


class NotFoundError(HomeHubError, LookupError):
    """Referenced entity does not resolve to an active row."""

    def __init__(self, entity: str, entity_id: object) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID {entity_id} was not found.")


class UpstreamServiceError(HomeHubError):
    """The recipe generation provider failed, timed out or returned unusable content."""


class RecipeParseError(UpstreamServiceError):
    """Generated recipe content could not be parsed.

    ``problems`` lists every structural issue found, each prefixed with the path of the
    offending element (``recipes[1].ingredients[0].quantity``).
    """

    def __init__(self, problems: Sequence[str]) -> None:
        self.problems = list(problems)
        summary = "; ".join(self.problems) if self.problems else "unknown error"
        super().__init__(f"Failed to parse recipes from AI response: {summary}")


class OperationCancelledError(HomeHubError):
    """The request was cancelled before the operation completed."""


__all__ = [
    "HomeHubError",
    "DomainValidationError",
    "NotFoundError",
    "UpstreamServiceError",
    "RecipeParseError",
    "OperationCancelledError",
]
