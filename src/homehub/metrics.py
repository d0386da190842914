"""Prometheus metrics definitions for HomeHub."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "homehub_http_requests_total",
    "Total number of HTTP requests processed by the HomeHub API",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "homehub_http_request_duration_seconds",
    "Latency of HTTP requests processed by the HomeHub API",
    ["method", "path"],
)

RECIPE_GENERATIONS = Counter(
    "homehub_recipe_generations_total",
    "Recipe suggestion requests by generator source and outcome",
    ["source", "status"],
)

SHOPPING_LISTS_GENERATED = Counter(
    "homehub_shopping_lists_generated_total",
    "Number of shopping lists generated from low-stock inventory",
)

INVENTORY_DEACTIVATIONS = Counter(
    "homehub_inventory_deactivations_total",
    "Rows marked inactive by inventory item deletion",
    ["entity"],
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "RECIPE_GENERATIONS",
    "SHOPPING_LISTS_GENERATED",
    "INVENTORY_DEACTIVATIONS",
]
