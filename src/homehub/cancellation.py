"""Cooperative cancellation passed from the API boundary down to persistence and AI calls."""

from __future__ import annotations

import threading
from typing import Optional

from homehub.errors import OperationCancelledError


class CancellationToken:
    """Thread-safe cancellation flag checked between sequential steps of an operation."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason: Optional[str] = None

    def cancel(self, reason: str | None = None) -> None:
        self._reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError(self._reason or "Operation was cancelled.")


def ensure_token(token: CancellationToken | None) -> CancellationToken:
    """Return the supplied token, or a fresh one that is never cancelled."""

    return token if token is not None else CancellationToken()


__all__ = ["CancellationToken", "ensure_token"]
