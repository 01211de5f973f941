"""
User repository.

Handles database operations for users and the token-to-user lookup.

Every method runs as one short transaction bounded by
``settings.DATABASE_QUERY_TIMEOUT_SECONDS``.  Expected outcomes are raised as
the errors in :mod:`app.core.errors`; any other database failure is
re-raised unchanged.
"""

import hashlib
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from sqlalchemy import func, insert, select, text, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.core.config import settings
from app.core.errors import DuplicateEmailError, EditConflictError, InvariantViolation, RecordNotFoundError
from app.db.filters import Filters, Metadata, calculate_metadata
from app.models.token import TokenTable
from app.models.user import EMAIL_UNIQUE_CONSTRAINT, User, UserTable

logger = logging.getLogger(__name__)

users_table = UserTable.__table__
tokens_table = TokenTable.__table__

USER_SORT_SAFELIST = ("id", "name", "email", "created_at", "-id", "-name", "-email", "-created_at")


def hash_token(plaintext: str) -> bytes:
    """SHA-256 digest of a token plaintext, as stored in ``tokens.hash``."""
    return hashlib.sha256(plaintext.encode("utf-8")).digest()


def is_duplicate_email(exc: IntegrityError) -> bool:
    """
    Whether *exc* is the unique-email violation.

    PostgreSQL drivers expose the violated constraint name, which is matched
    exactly.  SQLite only reports the column.
    """
    diag = getattr(exc.orig, "diag", None)
    if diag is not None:
        return diag.constraint_name == EMAIL_UNIQUE_CONSTRAINT
    return "UNIQUE constraint failed: users.email" in str(exc.orig)


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, session: Session, timeout: Optional[float] = None):
        """
        Initialize repository with database session.

        Args:
            session: SQLModel database session
            timeout: Per-call statement timeout in seconds, defaults to settings
        """
        self.session = session
        self.timeout = settings.DATABASE_QUERY_TIMEOUT_SECONDS if timeout is None else timeout

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Run the enclosed statements in one transaction under the statement timeout."""
        try:
            if self.session.get_bind().dialect.name == "postgresql":
                # SET does not take bind parameters; the value is always an int
                self.session.execute(text(f"SET LOCAL statement_timeout = {int(self.timeout * 1000)}"))
            yield
        except Exception:
            self.session.rollback()
            raise
        else:
            self.session.commit()

    def insert(self, user: User) -> None:
        """
        Insert a new user and fill in its id, created_at and version.

        Raises:
            DuplicateEmailError: If the email address is already taken
        """
        if user.password.hash is None:
            raise InvariantViolation("missing password hash for user")

        statement = (
            insert(users_table)
            .values(
                name=user.name,
                email=user.email,
                password_hash=user.password.hash,
                activated=user.activated,
            )
            .returning(users_table.c.id, users_table.c.created_at, users_table.c.version)
        )

        try:
            with self._transaction():
                row = self.session.execute(statement).one()
        except IntegrityError as exc:
            if is_duplicate_email(exc):
                logger.info("Rejected insert: email already registered")
                raise DuplicateEmailError() from exc
            raise

        user.id, user.created_at, user.version = row.id, row.created_at, row.version
        logger.info("Inserted user id=%s", user.id)

    def get_by_email(self, email: str) -> User:
        """
        Get user by email address.

        Raises:
            RecordNotFoundError: If no user has this email
        """
        statement = select(users_table).where(users_table.c.email == email)
        with self._transaction():
            row = self.session.execute(statement).first()
        if row is None:
            raise RecordNotFoundError()
        return User.from_row(row)

    def get_by_id(self, user_id: int) -> User:
        """
        Get user by ID.

        Raises:
            RecordNotFoundError: If no user has this id
        """
        statement = select(users_table).where(users_table.c.id == user_id)
        with self._transaction():
            row = self.session.execute(statement).first()
        if row is None:
            raise RecordNotFoundError()
        return User.from_row(row)

    def update(self, user: User) -> None:
        """
        Write *user* back if nobody changed it since it was read.

        The row is only touched when both ``id`` and ``version`` still match;
        on success ``user.version`` holds the incremented value.

        Raises:
            DuplicateEmailError: If the new email belongs to another user
            EditConflictError: If the version moved on (or the id is gone)
        """
        if user.password.hash is None:
            raise InvariantViolation("missing password hash for user")

        statement = (
            update(users_table)
            .where(users_table.c.id == user.id, users_table.c.version == user.version)
            .values(
                name=user.name,
                email=user.email,
                password_hash=user.password.hash,
                activated=user.activated,
                version=users_table.c.version + 1,
            )
            .returning(users_table.c.version)
        )

        try:
            with self._transaction():
                new_version = self.session.execute(statement).scalar_one_or_none()
        except IntegrityError as exc:
            if is_duplicate_email(exc):
                logger.info("Rejected update of user id=%s: email already registered", user.id)
                raise DuplicateEmailError() from exc
            raise

        if new_version is None:
            logger.info("Edit conflict on user id=%s at version %s", user.id, user.version)
            raise EditConflictError()
        user.version = new_version

    def get_for_token(self, scope: str, token_plaintext: str) -> User:
        """
        Get the user a live token of *scope* was issued to.

        Unknown, expired and wrong-scope tokens all raise the same error.

        Raises:
            RecordNotFoundError: If no matching, unexpired token exists
        """
        statement = (
            select(users_table)
            .join(tokens_table, users_table.c.id == tokens_table.c.user_id)
            .where(
                tokens_table.c.hash == hash_token(token_plaintext),
                tokens_table.c.scope == scope,
                tokens_table.c.expiry > datetime.now(timezone.utc),
            )
        )
        with self._transaction():
            row = self.session.execute(statement).first()
        if row is None:
            raise RecordNotFoundError()
        return User.from_row(row)

    def get_all(self, name: str = "", email: str = "",
                filters: Optional[Filters] = None) -> tuple[list[User], Metadata]:
        """
        List users matching optional name/email fragments, one page at a time.

        *filters* must already have passed
        :func:`~app.db.filters.validate_filters`.

        Returns:
            The page of users and its pagination metadata
        """
        if filters is None:
            filters = Filters(sort_safelist=USER_SORT_SAFELIST)

        column = users_table.c[filters.sort_column()]
        order = column.desc() if filters.sort_direction() == "DESC" else column.asc()

        statement = select(func.count().over().label("total_records"), users_table)
        if name:
            statement = statement.where(users_table.c.name.icontains(name, autoescape=True))
        if email:
            statement = statement.where(users_table.c.email.icontains(email, autoescape=True))
        statement = (
            statement
            .order_by(order, users_table.c.id.asc())
            .limit(filters.limit())
            .offset(filters.offset())
        )

        with self._transaction():
            rows = self.session.execute(statement).all()

        total_records = rows[0].total_records if rows else 0
        users = [User.from_row(row) for row in rows]
        return users, calculate_metadata(total_records, filters.page, filters.page_size)
