"""Schemas for the safe user projection, profile updates and paginated listings."""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.models.user import Role

USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 30
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9]+$")


def check_username(value: str) -> str:
    """Shared username rule for registration and profile updates."""
    if not USERNAME_PATTERN.match(value):
        raise ValueError("Username must only contain alphanumeric characters")
    if len(value) < USERNAME_MIN_LEN:
        raise ValueError(f"Username must be at least {USERNAME_MIN_LEN} characters long")
    if len(value) > USERNAME_MAX_LEN:
        raise ValueError(f"Username must not exceed {USERNAME_MAX_LEN} characters")
    return value


class UserPublic(BaseModel):
    """User without the password hash. The only user shape that leaves the repository."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: Role
    avatar_url: str | None = None
    created_at: datetime
    updated_at: datetime


class UserUpdateRequest(BaseModel):
    """Partial profile update; omitted fields keep their stored values."""

    username: str | None = Field(default=None, description="3-30 alphanumeric characters")
    email: EmailStr | None = Field(default=None, description="New login email")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str | None) -> str | None:
        return None if v is None else check_username(v)


class AvatarUpdate(BaseModel):
    """Result of storing a new avatar URL."""

    model_config = ConfigDict(from_attributes=True)

    avatar_url: str
    updated_at: datetime


class Pagination(BaseModel):
    """Pagination block of a listing response."""

    current_page: int
    per_page: int
    total: int
    total_pages: int
    first_page: int = 1
    last_page: int


class UserPage(BaseModel):
    """One page of users plus its pagination block."""

    items: list[UserPublic]
    pagination: Pagination
