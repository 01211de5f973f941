"""
User service.

Business logic for registration, profile updates, activation and
token-based user lookup.
"""

import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.errors import EditConflictError, FailedValidationError, RecordNotFoundError
from app.core.rules import validate_email, validate_name, validate_password_plaintext, validate_user
from app.core.validator import Validator
from app.db.filters import Filters, Metadata, validate_filters
from app.db.repositories.user import USER_SORT_SAFELIST, UserRepository
from app.models.token import SCOPE_ACTIVATION, SCOPE_AUTHENTICATION
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

# Same response for every wrong-password case
_INVALID_CREDENTIALS = "invalid authentication credentials"


class UserService:
    """Service for user-related business logic."""

    def __init__(self, session: Session):
        """
        Initialize service with database session.

        Args:
            session: SQLModel database session
        """
        self.repository = UserRepository(session)

    def register(self, user_data: UserCreate) -> User:
        """
        Register a new, not yet activated user.

        Raises:
            FailedValidationError: If any field breaks the input rules
            DuplicateEmailError: If the email is already registered
        """
        # Password rules run before hashing so oversized input never reaches bcrypt
        v = Validator()
        validate_name(v, user_data.name)
        validate_email(v, user_data.email)
        validate_password_plaintext(v, user_data.password)
        if not v.valid():
            raise FailedValidationError(v.errors)

        user = User(name=user_data.name, email=user_data.email, activated=False)
        user.password.set(user_data.password)
        self._check(user)

        self.repository.insert(user)
        return user

    def update(self, user: User, user_data: UserUpdate, expected_version: Optional[int] = None) -> User:
        """
        Apply a partial update to *user*.

        Args:
            user: The user as loaded for this request
            user_data: Fields to change
            expected_version: Version the client last saw, if it sent one

        Raises:
            HTTPException 401: If a password change has the wrong current password
            FailedValidationError: If any field breaks the input rules
            EditConflictError: If the record changed since it was read
            DuplicateEmailError: If the new email belongs to someone else
        """
        if expected_version is not None and expected_version != user.version:
            raise EditConflictError()

        if user_data.name is not None:
            user.name = user_data.name
        if user_data.email is not None:
            user.email = user_data.email

        if user_data.password is not None:
            self._verify_current_password(user, user_data.current_password)
            v = Validator()
            validate_password_plaintext(v, user_data.password)
            if not v.valid():
                raise FailedValidationError(v.errors)
            user.password.set(user_data.password)

        self._check(user)
        self.repository.update(user)
        return user

    def activate(self, token_plaintext: str) -> User:
        """
        Activate the account an activation token was issued for.

        Raises:
            FailedValidationError: If the token is unknown or expired
            EditConflictError: If the user changed concurrently
        """
        v = Validator()
        v.check(token_plaintext != "", "token", "must be provided")
        if not v.valid():
            raise FailedValidationError(v.errors)

        try:
            user = self.repository.get_for_token(SCOPE_ACTIVATION, token_plaintext)
        except RecordNotFoundError:
            raise FailedValidationError({"token": "invalid or expired activation token"}) from None

        user.activated = True
        self.repository.update(user)
        return user

    def authenticate_token(self, token_plaintext: str) -> User:
        """
        Resolve a bearer token to its user.

        Raises:
            RecordNotFoundError: If the token is unknown, expired or of another scope
        """
        return self.repository.get_for_token(SCOPE_AUTHENTICATION, token_plaintext)

    def list_users(self, name: str, email: str, page: int, page_size: int,
                   sort: str) -> tuple[list[User], Metadata]:
        """
        One page of users, filtered and sorted.

        Raises:
            FailedValidationError: If page, page_size or sort are out of range
        """
        filters = Filters(page=page, page_size=page_size, sort=sort, sort_safelist=USER_SORT_SAFELIST)
        v = Validator()
        validate_filters(v, filters)
        if not v.valid():
            raise FailedValidationError(v.errors)

        return self.repository.get_all(name, email, filters)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check(user: User) -> None:
        v = Validator()
        validate_user(v, user)
        if not v.valid():
            raise FailedValidationError(v.errors)

    @staticmethod
    def _verify_current_password(user: User, current_password: Optional[str]) -> None:
        if not current_password:
            raise FailedValidationError({"current_password": "must be provided"})

        try:
            matched = user.password.matches(current_password)
        except ValueError:
            logger.exception("Password verification failed for user id=%s", user.id)
            raise

        if not matched:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=_INVALID_CREDENTIALS)
