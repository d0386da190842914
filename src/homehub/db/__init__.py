"""Persistence layer: ORM models, engine/session handling and repositories."""
