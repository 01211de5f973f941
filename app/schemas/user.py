"""
User API schemas.

Pydantic models for user-related request/response validation.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr

from app.db.filters import Metadata


# Request schemas
class UserCreate(BaseModel):
    """Schema for user registration."""
    name: str
    email: EmailStr
    password: str


class UserUpdate(BaseModel):
    """Schema for a partial update of the current user.

    Setting ``password`` requires ``current_password``.
    """
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    current_password: Optional[str] = None


class ActivateRequest(BaseModel):
    """Schema for account activation."""
    token: str


# Response schemas
class UserResponse(BaseModel):
    """Schema for user data in API responses (no credential data)."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    name: str
    email: str
    activated: bool


class UserListResponse(BaseModel):
    """One page of users plus pagination metadata."""
    users: list[UserResponse]
    metadata: Metadata
