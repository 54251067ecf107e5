"""
User repository: all reads and writes against the users table.

Every query-taking method accepts an optional typed ``role`` filter; the admin
routes pass ``Role.ADMIN`` so they only ever see admin rows. Methods return the
safe projection (``UserPublic``) except the two credential lookups, which return
the ORM row with its password hash for login and password re-verification.
"""

import logging
import math
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from app.core.errors import StorageError
from app.models.user import Role, User
from app.schemas.user import AvatarUpdate, Pagination, UserPage, UserPublic

logger = logging.getLogger(__name__)

R = TypeVar("R")


class UserRepository:
    """Repository for user data access over an injected SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _run(self, action: str, fn: Callable[[], R]) -> R:
        """Run fn; on any database error roll back and raise StorageError."""
        try:
            return fn()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("User repository %s failed: %s", action, e)
            raise StorageError(f"Could not {action} user", str(e)) from e

    @staticmethod
    def _scoped(stmt: Select, role: Role | None) -> Select:
        if role is not None:
            stmt = stmt.where(User.role == role)
        return stmt

    def _get_row(self, user_id: int, role: Role | None = None) -> User | None:
        stmt = self._scoped(select(User).where(User.id == user_id), role)
        return self.db.scalars(stmt).first()

    def _commit_and_refresh(self, row: User) -> None:
        self.db.commit()
        self.db.refresh(row)

    def create(
        self,
        username: str,
        email: str,
        hashed_password: str,
        role: Role = Role.USER,
    ) -> UserPublic:
        """Insert a user and return its safe projection."""

        def _create() -> UserPublic:
            row = User(username=username, email=email, password=hashed_password, role=role)
            self.db.add(row)
            self._commit_and_refresh(row)
            return UserPublic.model_validate(row)

        return self._run("create", _create)

    def find_by_email(self, email: str, role: Role | None = None) -> User | None:
        """Full row including the password hash. Never hand this to a response."""

        def _find() -> User | None:
            stmt = self._scoped(select(User).where(User.email == email), role)
            return self.db.scalars(stmt.order_by(User.id)).first()

        return self._run("find", _find)

    def find_credentials_by_id(self, user_id: int) -> User | None:
        """Full row by id, for re-verifying the current password."""
        return self._run("find", lambda: self._get_row(user_id))

    def find_by_id(self, user_id: int, role: Role | None = None) -> UserPublic | None:
        def _find() -> UserPublic | None:
            row = self._get_row(user_id, role)
            return UserPublic.model_validate(row) if row is not None else None

        return self._run("find", _find)

    def update(
        self,
        user_id: int,
        username: str | None = None,
        email: str | None = None,
        role: Role | None = None,
    ) -> UserPublic | None:
        """
        Coalesce update of username/email. Omitted (None) fields keep their value.
        With nothing to change, returns the row untouched (updated_at not bumped).
        Returns None when no row matches the id and role filter.
        """

        def _update() -> UserPublic | None:
            row = self._get_row(user_id, role)
            if row is None:
                return None
            changes = {"username": username, "email": email}
            changes = {k: v for k, v in changes.items() if v is not None}
            if not changes:
                return UserPublic.model_validate(row)
            for field, value in changes.items():
                setattr(row, field, value)
            self._commit_and_refresh(row)
            return UserPublic.model_validate(row)

        return self._run("update", _update)

    def update_avatar(self, user_id: int, avatar_url: str) -> AvatarUpdate | None:
        def _update() -> AvatarUpdate | None:
            row = self._get_row(user_id)
            if row is None:
                return None
            row.avatar_url = avatar_url
            self._commit_and_refresh(row)
            return AvatarUpdate.model_validate(row)

        return self._run("update", _update)

    def update_password(self, user_id: int, hashed_password: str) -> UserPublic | None:
        def _update() -> UserPublic | None:
            row = self._get_row(user_id)
            if row is None:
                return None
            row.password = hashed_password
            self._commit_and_refresh(row)
            return UserPublic.model_validate(row)

        return self._run("update", _update)

    def delete(self, user_id: int, role: Role | None = None) -> bool:
        """Hard delete. True if a row was removed."""

        def _delete() -> bool:
            row = self._get_row(user_id, role)
            if row is None:
                return False
            self.db.delete(row)
            self.db.commit()
            return True

        return self._run("delete", _delete)

    def list(self, page: int, limit: int, role: Role | None = None) -> UserPage:
        """
        One page of users, newest first. Bounds on page/limit are the caller's job.

        The page query and the count query run sequentially on this session, not
        concurrently, and with no transaction around them. Under concurrent writes
        total can briefly disagree with the page.
        """

        def _list() -> UserPage:
            offset = (page - 1) * limit
            rows_stmt = (
                self._scoped(select(User), role)
                .order_by(User.created_at.desc(), User.id.desc())
                .limit(limit)
                .offset(offset)
            )
            count_stmt = self._scoped(select(func.count()).select_from(User), role)
            rows = self.db.scalars(rows_stmt).all()
            total = self.db.scalar(count_stmt) or 0
            total_pages = math.ceil(total / limit)
            return UserPage(
                items=[UserPublic.model_validate(r) for r in rows],
                pagination=Pagination(
                    current_page=page,
                    per_page=limit,
                    total=total,
                    total_pages=total_pages,
                    first_page=1,
                    last_page=total_pages,
                ),
            )

        return self._run("list", _list)
