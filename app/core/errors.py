"""
Error taxonomy for the user accounts layer.

Repository errors are ordinary exceptions the boundary maps to transport
responses.  Anything else coming out of the store (connectivity, timeouts,
schema problems) is a SQLAlchemy exception and is passed through unwrapped.

:class:`InvariantViolation` is different: it signals a programming defect
upstream of validation and derives from ``BaseException`` so that generic
``except Exception`` handlers do not swallow it.
"""


class RepositoryError(Exception):
    """Base class for expected repository outcomes."""


class DuplicateEmailError(RepositoryError):
    """A user with this email address already exists."""

    def __init__(self, message: str = "duplicate email"):
        super().__init__(message)


class RecordNotFoundError(RepositoryError):
    """No row matched the requested key, token, scope or expiry."""

    def __init__(self, message: str = "record not found"):
        super().__init__(message)


class EditConflictError(RepositoryError):
    """The optimistic-concurrency check matched zero rows."""

    def __init__(self, message: str = "edit conflict"):
        super().__init__(message)


class FailedValidationError(Exception):
    """Input failed one or more validation rules.

    Args:
        errors: Mapping of field name to the first failure message
    """

    def __init__(self, errors: dict[str, str]):
        super().__init__(f"validation failed: {', '.join(sorted(errors))}")
        self.errors = dict(errors)


class InvariantViolation(BaseException):
    """An internal invariant that validation should have guaranteed is broken.

    Not meant to be caught.  Reaching it means a caller skipped validation.
    """
