"""Pydantic schemas for request/response validation."""

from app.schemas.user import ActivateRequest, UserCreate, UserListResponse, UserResponse, UserUpdate

__all__ = [
    "ActivateRequest",
    "UserCreate",
    "UserListResponse",
    "UserResponse",
    "UserUpdate",
]
