"""User endpoints: profile self-service, password change, avatar upload, admin list/delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, UploadFile

from app.api.deps import AppSettings, Hasher, UserRepo, get_avatar_store
from app.api.v1.auth import CurrentAdmin, CurrentUser
from app.schemas.auth import PasswordChangeRequest
from app.schemas.envelope import Envelope, PaginatedEnvelope, paginated_response, success_response
from app.schemas.user import AvatarUpdate, UserPublic, UserUpdateRequest
from app.services import accounts
from app.services.avatar_store import AvatarStore

router = APIRouter()


@router.get("", response_model=PaginatedEnvelope[UserPublic])
def list_users(
    _admin: CurrentAdmin,
    repo: UserRepo,
    page: Annotated[int, Query(description="1-based page number")] = accounts.DEFAULT_PAGE,
    limit: Annotated[int, Query(description="Page size, 1-100")] = accounts.DEFAULT_LIMIT,
) -> PaginatedEnvelope:
    """List all users, newest first (admin only)."""
    result = accounts.list_users(repo, page, limit)
    return paginated_response(result.items, result.pagination, "Users retrieved successfully")


@router.get("/profile", response_model=Envelope[UserPublic])
def get_profile(current: CurrentUser, repo: UserRepo) -> Envelope:
    """Return the caller's own profile."""
    user = accounts.get_profile(repo, current.id)
    return success_response(user, "User profile retrieved successfully")


@router.put("/profile", response_model=Envelope[UserPublic])
def update_profile(body: UserUpdateRequest, current: CurrentUser, repo: UserRepo) -> Envelope:
    """Update the caller's username and/or email; omitted fields are left unchanged."""
    user = accounts.update_profile(repo, current.id, body)
    return success_response(user, "Profile updated successfully")


@router.put("/password", response_model=Envelope[None])
def update_password(
    body: PasswordChangeRequest,
    current: CurrentUser,
    repo: UserRepo,
    hasher: Hasher,
) -> Envelope:
    """Change the caller's password after re-checking the current one."""
    accounts.change_password(repo, hasher, current.id, body)
    return success_response(None, "Password updated successfully")


@router.post("/avatar", response_model=Envelope[AvatarUpdate])
async def upload_avatar(
    current: CurrentUser,
    repo: UserRepo,
    settings: AppSettings,
    store: Annotated[AvatarStore, Depends(get_avatar_store)],
    file: Annotated[UploadFile | None, File(description="JPEG or PNG image")] = None,
) -> Envelope:
    """
    Upload the caller's avatar as multipart/form-data with a field named `file`.

    Only image/jpeg and image/png are accepted. The image goes to the object
    store; only the returned URL is saved on the user.
    """
    content = None
    content_type = None
    filename = None
    if file is not None:
        # Read one byte past the limit so oversize files are detected without buffering them whole.
        content = await file.read(settings.AVATAR_MAX_BYTES + 1)
        content_type = file.content_type
        filename = file.filename
    result = await accounts.upload_avatar(
        repo,
        store,
        current.id,
        content,
        content_type,
        filename=filename,
        max_bytes=settings.AVATAR_MAX_BYTES,
    )
    return success_response(result, "Avatar uploaded successfully")


@router.delete("/{user_id}", response_model=Envelope[None])
def delete_user(user_id: int, _admin: CurrentAdmin, repo: UserRepo) -> Envelope:
    """Delete any user by id (admin only)."""
    accounts.delete_user(repo, user_id)
    return success_response(None, "User deleted successfully")
