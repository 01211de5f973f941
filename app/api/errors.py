"""
Exception handlers.

Map repository and validation errors, including malformed request input,
onto HTTP responses in one `{"error": ...}` shape.  Database
failures become a generic 500 and are logged with their traceback.
:class:`~app.core.errors.InvariantViolation` is deliberately not handled.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import DuplicateEmailError, EditConflictError, FailedValidationError, RecordNotFoundError

logger = logging.getLogger(__name__)


def _error(status_code: int, error) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error})


async def failed_validation_handler(request: Request, exc: FailedValidationError) -> JSONResponse:
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, exc.errors)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request input in the same field-to-message shape as the validator."""
    errors = {}
    for err in exc.errors():
        # Drop the leading "body"/"query" part of the location
        field = ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0])
        errors.setdefault(field, err["msg"])
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, errors)


async def duplicate_email_handler(request: Request, exc: DuplicateEmailError) -> JSONResponse:
    return _error(status.HTTP_409_CONFLICT, {"email": "a user with this email address already exists"})


async def record_not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    return _error(status.HTTP_404_NOT_FOUND, "the requested resource could not be found")


async def edit_conflict_handler(request: Request, exc: EditConflictError) -> JSONResponse:
    return _error(status.HTTP_409_CONFLICT, "unable to update the record due to an edit conflict, please try again")


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR,
                  "the server encountered a problem and could not process your request")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FailedValidationError, failed_validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(DuplicateEmailError, duplicate_email_handler)
    app.add_exception_handler(RecordNotFoundError, record_not_found_handler)
    app.add_exception_handler(EditConflictError, edit_conflict_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
