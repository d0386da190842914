"""Helpers for running the HomeHub ASGI application with uvicorn."""

from __future__ import annotations

import uvicorn

APP_IMPORT_PATH = "homehub.server.app:app"


def serve(host: str = "127.0.0.1", port: int = 8000, reload: bool = False) -> None:
    """Serve the API; ``reload`` restarts the worker on source changes."""

    uvicorn.run(APP_IMPORT_PATH, host=host, port=port, reload=reload)


__all__ = ["APP_IMPORT_PATH", "serve"]
