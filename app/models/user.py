"""
User database model and domain aggregate.

``UserTable`` is the persisted row.  ``User`` is what the rest of the code
passes around: the same fields, with the password hash wrapped in a
:class:`~app.core.password.Password` that may also carry a transient
plaintext.  The repository maps between the two and only ever writes the
hash.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, Integer, LargeBinary, UniqueConstraint, func, text
from sqlmodel import Field, SQLModel

from app.core.password import Password

# Name PostgreSQL reports on a duplicate email, for both INSERT and UPDATE.
EMAIL_UNIQUE_CONSTRAINT = "users_email_key"


class UserTable(SQLModel, table=True):
    """Row in the ``users`` table."""
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name=EMAIL_UNIQUE_CONSTRAINT),)

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=False, server_default=func.now()),
    )
    name: str = Field(nullable=False)
    email: str = Field(nullable=False)
    password_hash: bytes = Field(sa_column=Column(LargeBinary, nullable=False))
    activated: bool = Field(default=False, nullable=False)

    # Optimistic-concurrency token, bumped once per successful update
    version: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, nullable=False, server_default=text("1")),
    )


@dataclass
class User:
    """
    User aggregate.

    ``password`` is left out of ``repr()`` and comparisons, and nothing
    serializes it: API schemas read the other fields only.
    """
    name: str = ""
    email: str = ""
    password: Password = field(default_factory=Password, repr=False, compare=False)
    activated: bool = False

    # Assigned by the store
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    version: Optional[int] = None

    def is_anonymous(self) -> bool:
        return self is ANONYMOUS_USER

    @classmethod
    def from_row(cls, row) -> "User":
        """Build from a ``users`` row, or anything with the same attributes."""
        return cls(
            id=row.id,
            created_at=row.created_at,
            name=row.name,
            email=row.email,
            password=Password(hash=row.password_hash),
            activated=row.activated,
            version=row.version,
        )


# Stand-in for requests that carry no credentials.
ANONYMOUS_USER = User()
