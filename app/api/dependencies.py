"""
Shared API dependencies.

Reusable FastAPI dependencies for authentication and database access.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from app.core.errors import RecordNotFoundError
from app.db.session import get_db
from app.models.user import ANONYMOUS_USER, User
from app.services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail,
                         headers={ "WWW-Authenticate": "Bearer" }, )


def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
                     db: Session = Depends(get_db), ) -> User:
    """Resolve the bearer token to a user, or the anonymous user if none was sent."""
    if credentials is None:
        return ANONYMOUS_USER
    try:
        return UserService(db).authenticate_token(credentials.credentials)
    except RecordNotFoundError:
        raise _unauthorized("invalid or missing authentication token")


def require_authenticated_user(user: User = Depends(get_current_user)) -> User:
    """Reject anonymous requests."""
    if user.is_anonymous():
        raise _unauthorized("you must be authenticated to access this resource")
    return user
