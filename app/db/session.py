"""
Database session management.

Provides the shared, connection-pooled SQLModel engine and a per-request
session dependency.  Repositories built on one session share its pool.
"""

from typing import Generator

from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from app.core.config import settings


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """
    Build an engine for *url*.

    PostgreSQL gets a sized connection pool; SQLite (local runs and tests)
    gets a single shared connection so in-memory databases survive across
    sessions.
    """
    if make_url(url).get_backend_name() == "sqlite":
        return create_engine(url, echo=echo, connect_args={"check_same_thread": False}, poolclass=StaticPool)

    return create_engine(
        url,
        echo=echo,            # Log SQL queries in debug mode
        pool_pre_ping=True,   # Verify connections before using
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        # Bound pool checkout and connect by the same per-call budget
        pool_timeout=settings.DATABASE_QUERY_TIMEOUT_SECONDS,
        connect_args={"connect_timeout": max(1, int(settings.DATABASE_QUERY_TIMEOUT_SECONDS))},
    )


engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for FastAPI endpoints to get database session.

    Yields:
        SQLModel Session instance
    """
    with Session(engine) as session:
        yield session
