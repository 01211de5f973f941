"""
Database initialization.

Creates the ``users`` and ``tokens`` tables directly from the models.  Use
Alembic migrations for anything beyond local development.
"""

import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

logger = logging.getLogger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    """Create all tables that do not exist yet on *bind* (default: app engine)."""
    # Import all models so SQLModel.metadata has them
    import app.db.base  # noqa: F401

    if bind is None:
        from app.db.session import engine as bind

    logger.info("Creating database tables...")
    SQLModel.metadata.create_all(bind)
    logger.info("Tables created: %s", ", ".join(sorted(SQLModel.metadata.tables)))


if __name__ == "__main__":
    init_db()
