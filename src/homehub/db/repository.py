"""Database engine and session management."""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Generator, TypeVar

from sqlalchemy import Select, create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from homehub.config import get_settings
from homehub.db.models import Base
from homehub.models.common import PaginationResult

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None
logger = logging.getLogger(__name__)

RowT = TypeVar("RowT")
ModelT = TypeVar("ModelT")


def _database_url(database_path: Path | None) -> str:
    settings = get_settings()
    if database_path is None and settings.database_url:
        return settings.database_url
    db_path = database_path or settings.database_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_path}"


def get_engine(database_path: Path | None = None) -> Engine:
    """Return a shared SQLAlchemy engine (SQLite file unless a URL is configured)."""
    global _engine, _session_factory

    if _engine is not None:
        return _engine

    url = _database_url(database_path)
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    _engine = create_engine(url, future=True, echo=False, connect_args=connect_args)
    try:
        Base.metadata.create_all(_engine)
    except OperationalError as exc:
        if "already exists" in str(exc).lower():
            logger.debug("Database schema already initialized: %s", exc)
        else:
            raise
    _session_factory = sessionmaker(
        bind=_engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )
    return _engine


def get_session() -> Session:
    """Return a new SQLAlchemy session."""
    global _session_factory

    if _session_factory is None:
        get_engine()
    assert _session_factory is not None  # for mypy
    return _session_factory()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Context manager yielding one unit of work with automatic commit/rollback."""
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def paginate(
    session: Session,
    statement: Select,
    page_number: int,
    page_size: int,
    to_model: Callable[[RowT], ModelT],
) -> PaginationResult[ModelT]:
    """Run ``statement`` for one page and wrap the mapped rows with paging metadata."""

    page_number = max(1, int(page_number))
    page_size = max(1, int(page_size))
    total = session.execute(
        select(func.count()).select_from(statement.order_by(None).subquery())
    ).scalar_one()
    rows = (
        session.execute(statement.offset((page_number - 1) * page_size).limit(page_size))
        .scalars()
        .all()
    )
    total_pages = math.ceil(total / page_size)
    return PaginationResult(
        items=[to_model(row) for row in rows],
        total_count=total,
        page_number=page_number,
        page_size=page_size,
        total_pages=total_pages,
        has_next_page=page_number < total_pages,
        has_previous_page=page_number > 1,
    )


def reset_repository_state() -> None:
    """Reset cached engine/session state (intended for testing)."""

    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


__all__ = [
    "get_engine",
    "get_session",
    "session_scope",
    "paginate",
    "reset_repository_state",
]
