"""Database engine + session management.

One process-wide engine; request code asks for the thread-scoped session and
the app factory removes it on teardown.
"""

from __future__ import annotations

from contextlib import suppress

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, scoped_session, sessionmaker

from .models import Base

_engine: Engine | None = None
_SessionFactory: scoped_session[Session] | None = None


def _normalize_url(url: str) -> str:
    # Normalize postgres schemes to ensure SQLAlchemy uses psycopg v3
    if url.startswith("postgres://"):
        return "postgresql+psycopg://" + url[len("postgres://") :]
    if url.startswith("postgresql://") and "+" not in url.split("://", 1)[1].split("@", 1)[0]:
        return "postgresql+psycopg://" + url[len("postgresql://") :]
    return url


def _create(database_url: str, pool_size: int) -> Engine:
    url = _normalize_url(database_url)
    kwargs = {}
    if not url.startswith("sqlite"):
        kwargs["pool_size"] = pool_size
    return create_engine(url, future=True, echo=False, **kwargs)


def init_engine(database_url: str, force: bool = False, pool_size: int = 10) -> Engine:
    """Initialize global engine (idempotent) or reinitialize when force=True."""
    global _engine, _SessionFactory
    if _engine is not None and not force:
        return _engine
    if _engine is not None:
        _engine.dispose()
        if _SessionFactory is not None:
            with suppress(Exception):  # pragma: no cover
                _SessionFactory.remove()
    _engine = _create(database_url, pool_size)
    _SessionFactory = scoped_session(sessionmaker(bind=_engine, autoflush=False, autocommit=False, expire_on_commit=False))
    return _engine


def get_session() -> Session:
    if _SessionFactory is None:
        raise RuntimeError("DB not initialized; call init_engine first")
    return _SessionFactory()


def remove_session(_exc: BaseException | None = None) -> None:
    if _SessionFactory is not None:
        _SessionFactory.remove()


def create_all() -> None:  # dev helper ONLY for fresh ephemeral DBs (tests, scratch). Use Alembic in normal flows.
    if _engine is None:
        raise RuntimeError("Engine not initialized")
    Base.metadata.create_all(_engine)


def ping() -> bool:
    """Readiness probe: True when a trivial round-trip succeeds."""
    if _engine is None:
        return False
    with _engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return True


__all__ = ["init_engine", "get_session", "remove_session", "create_all", "ping"]
