"""
Authentication request and response schemas.

UserRead/UserCreate extend the fastapi-users base schemas so the same models
serve both the custom /auth endpoints and the mounted fastapi-users routers.
"""

import uuid

from fastapi_users import schemas
from pydantic import BaseModel, EmailStr, Field, field_validator


def _require_password(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("Password cannot be empty")
    return v


class UserRead(schemas.BaseUser[uuid.UUID]):
    """Schema for user read operations."""

    name: str


class UserCreate(schemas.BaseUserCreate):
    """Schema for user creation."""

    name: str = Field(..., min_length=1, max_length=255)

    @field_validator("password")
    @classmethod
    def validate_password_not_empty(cls, v: str) -> str:
        """Validate that password is not empty."""
        return _require_password(v)


class RegisterRequest(BaseModel):
    """Body of POST /auth/register."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def validate_password_not_empty(cls, v: str) -> str:
        """Validate that password is not empty."""
        return _require_password(v)


class LoginRequest(BaseModel):
    """Body of POST /auth/login."""

    email: EmailStr
    password: str


class CurrentUser(BaseModel):
    """Who-am-i view of a user."""

    id: str
    name: str
    email: str


class AuthResponse(BaseModel):
    """Access token plus the authenticated user."""

    access_token: str
    token_type: str = "bearer"
    user: CurrentUser


class MessageResponse(BaseModel):
    """Plain message response."""

    message: str
