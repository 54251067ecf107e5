"""Register/login endpoints and the auth dependencies (authenticate, require_admin)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.api.deps import Hasher, Tokens, UserRepo
from app.core.errors import (
    ForbiddenError,
    InvalidCredentialError,
    MissingCredentialError,
    UnauthenticatedError,
)
from app.core.security import InvalidToken
from app.models.user import Role
from app.schemas.auth import LoginRequest, LoginResult, RegisterRequest, TokenClaims
from app.schemas.envelope import Envelope, success_response
from app.schemas.user import UserPublic
from app.services import accounts

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _token_from_header(authorization: str | None) -> str | None:
    """Whatever follows the scheme, Bearer or not; None when there is nothing after it."""
    parts = (authorization or "").split(None, 1)
    return parts[1] if len(parts) == 2 else None


def authenticate(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Tokens,
) -> TokenClaims:
    """
    Dependency: require a valid Bearer JWT and return its claims.
    403 when no token is sent, 401 when it is malformed, expired or badly signed.
    A non-Bearer header with a value ("Basic abc") counts as a bad token, not a missing one.
    """
    if credentials is not None:
        token = credentials.credentials
    else:
        token = _token_from_header(request.headers.get("Authorization"))
    result = tokens.verify(token)
    if isinstance(result, InvalidToken):
        if result.is_missing:
            raise MissingCredentialError("Token missing")
        logger.warning("Rejected bearer token: %s", result.reason)
        raise InvalidCredentialError("Invalid token", result.reason)
    request.state.user = result
    return result


def require_admin(
    claims: Annotated[TokenClaims | None, Depends(authenticate)],
) -> TokenClaims:
    """Dependency: require authenticated claims with role 'admin'. 403 for non-admin."""
    if claims is None:
        raise UnauthenticatedError("Access denied. Token required.")
    if claims.role != Role.ADMIN:
        raise ForbiddenError("Access denied. Admins only.")
    return claims


CurrentUser = Annotated[TokenClaims, Depends(authenticate)]
CurrentAdmin = Annotated[TokenClaims, Depends(require_admin)]


@router.post("/register", response_model=Envelope[UserPublic], status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, repo: UserRepo, hasher: Hasher) -> Envelope:
    """Create a user account with role 'user'."""
    user = accounts.register_user(repo, hasher, body)
    return success_response(user, "User registered successfully", status.HTTP_201_CREATED)


@router.post("/login", response_model=Envelope[LoginResult])
def login(body: LoginRequest, repo: UserRepo, hasher: Hasher, tokens: Tokens) -> Envelope:
    """
    Authenticate with email and password; returns the user plus a JWT.
    Include the token in the Authorization header as: Bearer <token>
    """
    result = accounts.login(repo, hasher, tokens, body)
    return success_response(result, "Login successful")
