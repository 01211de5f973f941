"""
Base database configuration.

Import all models here so Alembic can detect them for migrations.
"""

# Import all models for Alembic autogenerate
from app.models.user import UserTable  # noqa: F401
from app.models.token import TokenTable  # noqa: F401
