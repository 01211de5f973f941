"""
User endpoints.

Registration, activation, listing and self-service profile updates.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, status
from sqlmodel import Session

from app.api.dependencies import require_authenticated_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.user import ActivateRequest, UserCreate, UserListResponse, UserResponse, UserUpdate
from app.services.user_service import UserService

router = APIRouter()


@router.post("",
             summary="User registration endpoint.",
             response_model=UserResponse,
             status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, db: Session = Depends(get_db)):
    """
    Register a new user.

    Returns:
        Created user data (without password)

    Raises:
        422: If a field fails validation
        409: If email already registered
    """
    service = UserService(db)
    return UserResponse.model_validate(service.register(user_data))


@router.put("/activated", summary="Activate an account with an activation token.", response_model=UserResponse)
def activate(body: ActivateRequest, db: Session = Depends(get_db)):
    service = UserService(db)
    return UserResponse.model_validate(service.activate(body.token))


@router.get("", summary="List users with filters, sorting and pagination.", response_model=UserListResponse)
def list_users(name: str = Query("", description="Case-insensitive name fragment"),
               email: str = Query("", description="Case-insensitive email fragment"),
               page: int = Query(1, description="Page number, starting at 1"),
               page_size: int = Query(20, description="Records per page, at most 100"),
               sort: str = Query("id", description="Sort column, prefix with '-' for descending"),
               db: Session = Depends(get_db), user: User = Depends(require_authenticated_user), ):
    service = UserService(db)
    users, metadata = service.list_users(name, email, page, page_size, sort)
    return UserListResponse(users=[UserResponse.model_validate(u) for u in users], metadata=metadata)


@router.get("/me", summary="Current user info.", response_model=UserResponse)
def me(user: User = Depends(require_authenticated_user)):
    return UserResponse.model_validate(user)


@router.patch("/me", summary="Update the current user.", response_model=UserResponse)
def update_me(user_data: UserUpdate,
              x_expected_version: Optional[int] = Header(None, description="Version the client last read"),
              db: Session = Depends(get_db), user: User = Depends(require_authenticated_user), ):
    """
    Partially update the current user.

    Changing the password requires ``current_password``.  Concurrent edits
    are rejected with 409 and should be retried after a reload.
    """
    service = UserService(db)
    return UserResponse.model_validate(service.update(user, user_data, expected_version=x_expected_version))
