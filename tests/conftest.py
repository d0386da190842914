"""Shared pytest fixtures for the HomeHub test suite."""

from __future__ import annotations

from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from homehub.config import get_settings
from homehub.db.repository import reset_repository_state, session_scope
from homehub.server import deps
from homehub.server.app import create_app
from tests.factories import FakeRecipeGenerator

_ISOLATED_ENV = (
    "HOMEHUB_DATABASE_URL",
    "HOMEHUB_OPENAI_API_KEY",
    "OPENAI_API_KEY",
    "HOMEHUB_API_TOKEN",
    "HOMEHUB_PROMPTS_DIR",
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Ensure each test uses an isolated SQLite database and no live AI key."""

    db_path = tmp_path / "test_homehub.db"
    monkeypatch.setenv("HOMEHUB_DATABASE_PATH", str(db_path))
    for key in _ISOLATED_ENV:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    reset_repository_state()
    yield
    reset_repository_state()
    monkeypatch.delenv("HOMEHUB_DATABASE_PATH", raising=False)
    get_settings.cache_clear()


@pytest.fixture()
def session() -> Generator[Session, None, None]:
    """One unit of work that commits when the test body finishes."""

    with session_scope() as db_session:
        yield db_session


@pytest.fixture()
def fake_generator() -> FakeRecipeGenerator:
    return FakeRecipeGenerator()


@pytest.fixture()
def app(fake_generator) -> Generator[FastAPI, None, None]:
    """Create a new FastAPI app with the recipe generator replaced by a fake."""

    application = create_app()
    application.dependency_overrides[deps.get_recipe_generator] = lambda: fake_generator
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    """Return a test client bound to the FastAPI app."""

    return TestClient(app)
