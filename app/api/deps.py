"""FastAPI dependencies that build the repository and the configured collaborators."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.security import (
    PasswordHasher,
    TokenService,
    password_hasher_from_settings,
    token_service_from_settings,
)
from app.repositories.user_repository import UserRepository
from app.services.avatar_store import AvatarStore, avatar_store_from_settings


def get_app_settings(request: Request) -> Settings:
    """Settings the app was built with (see create_app); falls back to the cached env settings."""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_user_repository(db: Annotated[Session, Depends(get_db)]) -> UserRepository:
    return UserRepository(db)


def get_password_hasher(settings: Annotated[Settings, Depends(get_app_settings)]) -> PasswordHasher:
    return password_hasher_from_settings(settings)


def get_token_service(settings: Annotated[Settings, Depends(get_app_settings)]) -> TokenService:
    return token_service_from_settings(settings)


def get_avatar_store(settings: Annotated[Settings, Depends(get_app_settings)]) -> AvatarStore:
    """The settings-built store; missing credentials only fail an actual upload."""
    return avatar_store_from_settings(settings)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
Hasher = Annotated[PasswordHasher, Depends(get_password_hasher)]
Tokens = Annotated[TokenService, Depends(get_token_service)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
