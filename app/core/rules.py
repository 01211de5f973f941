"""
Validation rules for user input.

Each rule records failures on a shared :class:`~app.core.validator.Validator`
so a request is checked in full before anything is reported.
"""

from app.core.errors import InvariantViolation
from app.core.password import COMMON_PASSWORDS, MAX_PASSWORD_BYTES
from app.core.validator import EMAIL_RX, Validator, matches, not_in
from app.models.user import User

MAX_NAME_BYTES = 500
MIN_PASSWORD_BYTES = 8


def validate_email(v: Validator, email: str) -> None:
    v.check(email != "", "email", "must be provided")
    v.check(matches(email, EMAIL_RX), "email", "must be a valid email address")


def validate_password_plaintext(v: Validator, password: str) -> None:
    # Lengths are in bytes, which is what bcrypt limits
    size = len(password.encode("utf-8"))
    v.check(password != "", "password", "must be provided")
    v.check(size >= MIN_PASSWORD_BYTES, "password", f"must be at least {MIN_PASSWORD_BYTES} bytes long")
    v.check(size <= MAX_PASSWORD_BYTES, "password", f"must not be more than {MAX_PASSWORD_BYTES} bytes long")
    v.check(not_in(password.lower(), *COMMON_PASSWORDS), "password", "is too common")


def validate_name(v: Validator, name: str) -> None:
    v.check(name != "", "name", "must be provided")
    v.check(len(name.encode("utf-8")) <= MAX_NAME_BYTES, "name", f"must not be more than {MAX_NAME_BYTES} bytes long")


def validate_user(v: Validator, user: User) -> None:
    """
    Validate a user about to be persisted.

    Password content is only checked when a new plaintext was set on this
    request.  A missing hash is not an input error: it means the caller never
    set a password, so it raises :class:`InvariantViolation`.
    """
    validate_name(v, user.name)
    validate_email(v, user.email)

    if user.password.plaintext is not None:
        validate_password_plaintext(v, user.password.plaintext)

    if user.password.hash is None:
        raise InvariantViolation("missing password hash for user")
