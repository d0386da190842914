"""ASGI application factory and dependencies for the HomeHub server."""

from homehub.server.app import app, create_app

__all__ = ["app", "create_app"]
