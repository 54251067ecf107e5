"""Pydantic request/response schemas."""

from app.schemas.auth import (
    LoginRequest,
    LoginResult,
    PasswordChangeRequest,
    RegisterRequest,
    TokenClaims,
)
from app.schemas.envelope import (
    Envelope,
    ErrorEnvelope,
    PaginatedEnvelope,
    error_response,
    paginated_response,
    success_response,
)
from app.schemas.health import HealthResponse
from app.schemas.user import (
    AvatarUpdate,
    Pagination,
    UserPage,
    UserPublic,
    UserUpdateRequest,
)

__all__ = [
    "AvatarUpdate",
    "Envelope",
    "ErrorEnvelope",
    "HealthResponse",
    "LoginRequest",
    "LoginResult",
    "PaginatedEnvelope",
    "Pagination",
    "PasswordChangeRequest",
    "RegisterRequest",
    "TokenClaims",
    "UserPage",
    "UserPublic",
    "UserUpdateRequest",
    "error_response",
    "paginated_response",
    "success_response",
]
