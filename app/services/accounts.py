"""
Account handlers: registration, login, profile self-service and admin user management.

Plain functions over the repository, hasher and token service. They raise
app.core.errors exceptions; the routers wrap results in the response envelope.
"""

import logging

from app.core.errors import ConflictError, ForbiddenError, NotFoundError, UnauthenticatedError, ValidationError
from app.core.security import PasswordHasher, TokenService
from app.models.user import Role
from app.repositories.user_repository import UserRepository
from app.schemas.auth import LoginRequest, LoginResult, PasswordChangeRequest, RegisterRequest, TokenClaims
from app.schemas.user import AvatarUpdate, UserPage, UserPublic, UserUpdateRequest
from app.services.avatar_store import AvatarMetadata, AvatarStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
NEW_PASSWORD_MIN_LEN = 6
ALLOWED_AVATAR_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png"})


def _noun(role: Role | None) -> str:
    return "Admin" if role == Role.ADMIN else "User"


def validate_pagination(page: int, limit: int) -> None:
    """Reject out-of-range paging before anything touches the store."""
    if page < 1:
        raise ValidationError("Page number must be greater than 0")
    if limit < 1 or limit > MAX_LIMIT:
        raise ValidationError(f"Limit must be between 1 and {MAX_LIMIT}")


def _register(
    repo: UserRepository,
    hasher: PasswordHasher,
    body: RegisterRequest,
    role: Role,
) -> UserPublic:
    # Admin creation only checks admin rows, so an admin may reuse a user's email.
    scope = Role.ADMIN if role == Role.ADMIN else None
    if repo.find_by_email(body.email, role=scope) is not None:
        logger.info("%s registration rejected: email already registered", _noun(role))
        raise ConflictError(
            f"{_noun(role)} with this email already exists",
            "Registration failed" if role == Role.USER else "Admin creation failed",
        )
    user = repo.create(
        username=body.username,
        email=body.email,
        hashed_password=hasher.hash(body.password),
        role=role,
    )
    logger.info("Created %s id=%s", role.value, user.id)
    return user


def register_user(repo: UserRepository, hasher: PasswordHasher, body: RegisterRequest) -> UserPublic:
    """Create a plain user. 409 if any account already uses the email."""
    return _register(repo, hasher, body, Role.USER)


def create_admin(
    repo: UserRepository,
    hasher: PasswordHasher,
    body: RegisterRequest,
    enabled: bool = True,
) -> UserPublic:
    """Create an admin. 409 if an admin already uses the email; 403 when admin sign-up is off."""
    if not enabled:
        raise ForbiddenError("Admin registration is disabled")
    return _register(repo, hasher, body, Role.ADMIN)


def login(
    repo: UserRepository,
    hasher: PasswordHasher,
    tokens: TokenService,
    body: LoginRequest,
    role: Role | None = None,
) -> LoginResult:
    """
    Verify credentials and issue a token embedding {id, email, role}.

    404 when no account matches the email (within the role scope), 401 on a wrong password.
    """
    row = repo.find_by_email(body.email, role=role)
    login_failed = f"{'Admin login' if role == Role.ADMIN else 'Login'} failed"
    if row is None:
        raise NotFoundError(f"{_noun(role)} not found", login_failed)
    if not hasher.verify(body.password, row.password):
        logger.warning("Failed login for user id=%s: wrong password", row.id)
        raise UnauthenticatedError("Invalid credentials", login_failed)
    user = UserPublic.model_validate(row)
    token = tokens.issue(TokenClaims(id=user.id, email=user.email, role=user.role))
    return LoginResult(**user.model_dump(), token=token)


def get_profile(repo: UserRepository, user_id: int) -> UserPublic:
    user = repo.find_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_profile(repo: UserRepository, user_id: int, body: UserUpdateRequest) -> UserPublic:
    user = repo.update(user_id, username=body.username, email=body.email)
    if user is None:
        raise NotFoundError("User not found")
    return user


def change_password(
    repo: UserRepository,
    hasher: PasswordHasher,
    user_id: int,
    body: PasswordChangeRequest,
) -> None:
    """Re-verify the current password, then store a hash of the new one."""
    row = repo.find_credentials_by_id(user_id)
    if row is None:
        raise NotFoundError("User not found")
    if not hasher.verify(body.current_password, row.password):
        raise ValidationError("Current password is incorrect")
    if len(body.new_password) < NEW_PASSWORD_MIN_LEN:
        raise ValidationError(f"New password must be at least {NEW_PASSWORD_MIN_LEN} characters")
    repo.update_password(user_id, hasher.hash(body.new_password))
    logger.info("Password changed for user id=%s", user_id)


async def upload_avatar(
    repo: UserRepository,
    store: AvatarStore,
    user_id: int,
    content: bytes | None,
    content_type: str | None,
    filename: str | None = None,
    max_bytes: int | None = None,
) -> AvatarUpdate:
    """Validate the image, hand it to the store and persist only the returned URL."""
    if content is None:
        raise ValidationError("No file uploaded")
    mime = (content_type or "").split(";")[0].strip().lower()
    if mime not in ALLOWED_AVATAR_TYPES:
        raise ValidationError("Invalid file type. Only images allowed.")
    if max_bytes is not None and len(content) > max_bytes:
        raise ValidationError("File too large")
    url = await store.store(
        content,
        AvatarMetadata(user_id=user_id, content_type=mime, filename=filename),
    )
    result = repo.update_avatar(user_id, url)
    if result is None:
        raise NotFoundError("User not found")
    return result


def list_users(repo: UserRepository, page: int, limit: int, role: Role | None = None) -> UserPage:
    validate_pagination(page, limit)
    return repo.list(page, limit, role=role)


def get_user(repo: UserRepository, user_id: int, role: Role | None = None) -> UserPublic:
    user = repo.find_by_id(user_id, role=role)
    if user is None:
        raise NotFoundError(f"{_noun(role)} not found")
    return user


def update_user(
    repo: UserRepository,
    user_id: int,
    body: UserUpdateRequest,
    role: Role | None = None,
) -> UserPublic:
    user = repo.update(user_id, username=body.username, email=body.email, role=role)
    if user is None:
        raise NotFoundError(f"{_noun(role)} not found")
    return user


def delete_user(repo: UserRepository, user_id: int, role: Role | None = None) -> None:
    if not repo.delete(user_id, role=role):
        raise NotFoundError(f"{_noun(role)} not found")
    logger.info("Deleted %s id=%s", _noun(role).lower(), user_id)
