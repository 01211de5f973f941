"""SQLModel database models and the user aggregate."""

from app.models.token import TokenTable
from app.models.user import ANONYMOUS_USER, User, UserTable

__all__ = [
    "ANONYMOUS_USER",
    "TokenTable",
    "User",
    "UserTable",
]
