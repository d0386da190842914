"""Logging setup for HomeHub.

Every record passing through the configured handler is stamped with the context of
the HTTP request that produced it (request id, method, route template, and whether
the request was cancelled), so service and AI client logs can be correlated with the
access log line. Provider keys and the API token are redacted before anything is
written.
"""

from __future__ import annotations

import json
import logging
import re
from contextvars import ContextVar, Token
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional

if TYPE_CHECKING:
    from homehub.cancellation import CancellationToken

REDACTED = "[redacted]"
NO_REQUEST = "-"

PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s"

# (pattern, replacement) pairs applied before the configured literal secrets.
_KNOWN_SECRET_PATTERNS = (
    (re.compile(r"(Bearer\s+)[A-Za-z0-9\-._~+/=]+", re.IGNORECASE), r"\1" + REDACTED),
    (re.compile(r"((?:api_token|X-API-Key)=)[^&\s]+", re.IGNORECASE), r"\1" + REDACTED),
    (re.compile(r"\bsk-[A-Za-z0-9\-_]{8,}"), REDACTED),
)

_THIRD_PARTY_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx")


@dataclass(frozen=True)
class RequestContext:
    """What the logging layer knows about the request currently being served."""

    request_id: str
    method: str
    scope: Mapping[str, Any]
    cancel_token: Optional["CancellationToken"] = None

    @property
    def route(self) -> str:
        # The router stores the matched route in the scope once dispatch happens.
        route = self.scope.get("route")
        return getattr(route, "path", None) or str(self.scope.get("path", ""))

    @property
    def cancelled(self) -> bool:
        return self.cancel_token is not None and self.cancel_token.cancelled


_request_context: ContextVar[Optional[RequestContext]] = ContextVar(
    "homehub_request_context", default=None
)


def bind_request_context(context: RequestContext) -> Token:
    return _request_context.set(context)


def reset_request_context(token: Token) -> None:
    _request_context.reset(token)


def current_request_context() -> Optional[RequestContext]:
    return _request_context.get()


class SecretRedactor:
    """Replace well-known credential shapes and configured secrets with ``REDACTED``."""

    def __init__(self, secrets: Iterable[str]):
        cleaned = {secret.strip() for secret in secrets if secret and secret.strip()}
        # Longest first so a secret containing another is masked whole.
        self._secrets = sorted(cleaned, key=len, reverse=True)

    def __call__(self, value: str) -> str:
        for pattern, replacement in _KNOWN_SECRET_PATTERNS:
            value = pattern.sub(replacement, value)
        for secret in self._secrets:
            value = value.replace(secret, REDACTED)
        return value


class SensitiveDataFilter(logging.Filter):
    """Redact secrets from the rendered message and from string ``extra`` fields."""

    def __init__(self, secrets: Iterable[str]):
        super().__init__()
        self._redact = SecretRedactor(secrets)

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401 - standard interface
        message = record.getMessage()
        redacted = self._redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = ()

        for key, value in list(vars(record).items()):
            if key not in {"msg", "args"} and isinstance(value, str):
                setattr(record, key, self._redact(value))
        return True


class RequestContextFilter(logging.Filter):
    """Stamp ``request_id``, ``http_method``, ``route`` and ``cancelled`` on each record.

    Values passed explicitly through ``extra`` win over the bound context.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401 - standard interface
        context = current_request_context()
        if not getattr(record, "request_id", None):
            record.request_id = context.request_id if context else NO_REQUEST
        if context is not None:
            record.__dict__.setdefault("http_method", context.method)
            record.__dict__.setdefault("route", context.route)
            record.__dict__.setdefault("cancelled", context.cancelled)
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line, including request context when there is one."""

    _CONTEXT_FIELDS = ("request_id", "http_method", "route", "cancelled")

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - override
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in self._CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None and value != NO_REQUEST:
                payload[field] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info

        return json.dumps(payload, ensure_ascii=True)


def configure_logging(level_name: str, fmt: str, secrets: Iterable[str]) -> None:
    """Install a single root handler (``plain`` or ``json``) with context and redaction filters."""

    numeric_level = getattr(logging, level_name.upper(), logging.INFO)

    handler = logging.StreamHandler()
    if (fmt or "plain").lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))

    redaction = SensitiveDataFilter(secrets)
    handler.addFilter(RequestContextFilter())
    handler.addFilter(redaction)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(numeric_level)
    logging.captureWarnings(True)

    for name in _THIRD_PARTY_LOGGERS:
        third_party = logging.getLogger(name)
        third_party.handlers = []
        third_party.setLevel(numeric_level)
        third_party.propagate = True
        third_party.addFilter(redaction)


__all__ = [
    "REDACTED",
    "RequestContext",
    "RequestContextFilter",
    "SensitiveDataFilter",
    "JsonFormatter",
    "bind_request_context",
    "reset_request_context",
    "current_request_context",
    "configure_logging",
]
