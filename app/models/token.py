"""
Token database model.

Tokens belong to the token store: this codebase only reads them, to find
the user a presented bearer token was issued to.  Only the SHA-256 digest of
a token's plaintext is stored.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, LargeBinary
from sqlmodel import Field, SQLModel

SCOPE_ACTIVATION = "activation"
SCOPE_AUTHENTICATION = "authentication"
SCOPE_PASSWORD_RESET = "password-reset"


class TokenTable(SQLModel, table=True):
    """Row in the ``tokens`` table."""
    __tablename__ = "tokens"

    hash: bytes = Field(sa_column=Column(LargeBinary, primary_key=True))
    user_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    )
    expiry: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    scope: str = Field(nullable=False)
