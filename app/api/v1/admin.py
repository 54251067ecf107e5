"""Admin endpoints: admin sign-up/login and management of admin accounts."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from app.api.deps import AppSettings, Hasher, Tokens, UserRepo
from app.api.v1.auth import CurrentAdmin
from app.models.user import Role
from app.schemas.auth import LoginRequest, LoginResult, RegisterRequest
from app.schemas.envelope import Envelope, PaginatedEnvelope, paginated_response, success_response
from app.schemas.user import UserPublic, UserUpdateRequest
from app.services import accounts

router = APIRouter()


@router.post("/register", response_model=Envelope[UserPublic], status_code=status.HTTP_201_CREATED)
def register_admin(
    body: RegisterRequest,
    repo: UserRepo,
    hasher: Hasher,
    settings: AppSettings,
) -> Envelope:
    """Create an admin account. Answers 403 when ADMIN_REGISTRATION_ENABLED is false."""
    admin = accounts.create_admin(repo, hasher, body, enabled=settings.ADMIN_REGISTRATION_ENABLED)
    return success_response(admin, "Admin user created successfully", status.HTTP_201_CREATED)


@router.post("/login", response_model=Envelope[LoginResult])
def login_admin(body: LoginRequest, repo: UserRepo, hasher: Hasher, tokens: Tokens) -> Envelope:
    """Admin-only login: the email lookup ignores non-admin accounts."""
    result = accounts.login(repo, hasher, tokens, body, role=Role.ADMIN)
    return success_response(result, "Admin login successful")


@router.get("", response_model=PaginatedEnvelope[UserPublic])
def list_admins(
    _admin: CurrentAdmin,
    repo: UserRepo,
    page: Annotated[int, Query(description="1-based page number")] = accounts.DEFAULT_PAGE,
    limit: Annotated[int, Query(description="Page size, 1-100")] = accounts.DEFAULT_LIMIT,
) -> PaginatedEnvelope:
    result = accounts.list_users(repo, page, limit, role=Role.ADMIN)
    return paginated_response(result.items, result.pagination, "Admins retrieved successfully")


@router.get("/{admin_id}", response_model=Envelope[UserPublic])
def get_admin(admin_id: int, _admin: CurrentAdmin, repo: UserRepo) -> Envelope:
    admin = accounts.get_user(repo, admin_id, role=Role.ADMIN)
    return success_response(admin, "Admin retrieved successfully")


@router.put("/{admin_id}", response_model=Envelope[UserPublic])
def update_admin(
    admin_id: int,
    body: UserUpdateRequest,
    _admin: CurrentAdmin,
    repo: UserRepo,
) -> Envelope:
    admin = accounts.update_user(repo, admin_id, body, role=Role.ADMIN)
    return success_response(admin, "Admin updated successfully")


@router.delete("/{admin_id}", response_model=Envelope[None])
def delete_admin(admin_id: int, _admin: CurrentAdmin, repo: UserRepo) -> Envelope:
    accounts.delete_user(repo, admin_id, role=Role.ADMIN)
    return success_response(None, "Admin deleted successfully")
