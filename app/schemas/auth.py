"""Request/response schemas for auth endpoints."""

import re

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.models.user import Role
from app.schemas.user import UserPublic, check_username

PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# At least one letter and one digit; letters, digits and @$!%*?& only.
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-zA-Z])(?=.*\d)[a-zA-Z\d@$!%*?&]{8,}$")


class RegisterRequest(BaseModel):
    """Payload for user and admin registration."""

    username: str = Field(..., description="3-30 alphanumeric characters")
    email: EmailStr = Field(..., description="Login email")
    password: str = Field(
        ...,
        max_length=PASSWORD_MAX_LEN,
        description="At least 8 characters with one letter and one number",
    )

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return check_username(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < PASSWORD_MIN_LEN:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LEN} characters long")
        if not PASSWORD_PATTERN.match(v):
            raise ValueError("Password must contain at least one letter and one number")
        return v


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class PasswordChangeRequest(BaseModel):
    """Body of PUT /users/password. Field names follow the public camelCase API."""

    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., alias="currentPassword", min_length=1, max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(..., alias="newPassword", max_length=PASSWORD_MAX_LEN)


class TokenClaims(BaseModel):
    """Identity claims carried by an access token and attached to the request."""

    id: int
    email: str
    role: Role


class LoginResult(UserPublic):
    """Safe user projection plus the issued bearer token."""

    token: str = Field(..., description="JWT access token; send as Authorization: Bearer <token>")
