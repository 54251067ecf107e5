"""Tests for app.repositories.user_repository against an in-memory SQLite database."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from db_support import make_session_factory

from app.core.errors import StorageError
from app.models.user import Role, User
from app.repositories.user_repository import UserRepository
from app.schemas.user import UserPublic


class RepositoryTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.repo = UserRepository(self.db)

    def tearDown(self) -> None:
        self.db.close()

    def _create(self, n: int = 1, role: Role = Role.USER, prefix: str = "user") -> list[UserPublic]:
        return [
            self.repo.create(f"{prefix}{i}", f"{prefix}{i}@example.com", f"hash-{i}", role=role)
            for i in range(n)
        ]


class TestCreateAndFind(RepositoryTestCase):
    def test_create_returns_safe_projection_with_default_role(self) -> None:
        user = self.repo.create("ana", "ana@example.com", "hashed")
        self.assertIsInstance(user, UserPublic)
        self.assertNotIn("password", user.model_dump())
        self.assertEqual(user.role, Role.USER)
        self.assertIsNone(user.avatar_url)
        self.assertIsNotNone(user.created_at)
        self.assertIsNotNone(user.updated_at)

    def test_create_admin(self) -> None:
        admin = self.repo.create("boss", "boss@example.com", "hashed", role=Role.ADMIN)
        self.assertEqual(admin.role, Role.ADMIN)

    def test_find_by_email_returns_full_row(self) -> None:
        self.repo.create("ana", "ana@example.com", "hashed")
        row = self.repo.find_by_email("ana@example.com")
        self.assertIsInstance(row, User)
        self.assertEqual(row.password, "hashed")

    def test_find_by_email_unknown(self) -> None:
        self.assertIsNone(self.repo.find_by_email("nobody@example.com"))

    def test_find_by_email_role_filter(self) -> None:
        self.repo.create("ana", "ana@example.com", "hashed")
        self.assertIsNone(self.repo.find_by_email("ana@example.com", role=Role.ADMIN))
        self.assertIsNotNone(self.repo.find_by_email("ana@example.com", role=Role.USER))

    def test_find_by_id(self) -> None:
        created = self.repo.create("ana", "ana@example.com", "hashed")
        found = self.repo.find_by_id(created.id)
        self.assertEqual(found, created)
        self.assertIsNone(self.repo.find_by_id(created.id, role=Role.ADMIN))
        self.assertIsNone(self.repo.find_by_id(created.id + 1000))

    def test_find_credentials_by_id(self) -> None:
        created = self.repo.create("ana", "ana@example.com", "hashed")
        self.assertEqual(self.repo.find_credentials_by_id(created.id).password, "hashed")
        self.assertIsNone(self.repo.find_credentials_by_id(created.id + 1000))


class TestUpdate(RepositoryTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = self.repo.create("ana", "ana@example.com", "hashed")

    def test_partial_update_keeps_other_fields(self) -> None:
        updated = self.repo.update(self.user.id, username="anna")
        self.assertEqual(updated.username, "anna")
        self.assertEqual(updated.email, "ana@example.com")
        self.assertEqual(updated.id, self.user.id)
        self.assertEqual(updated.role, Role.USER)

    def test_update_email(self) -> None:
        updated = self.repo.update(self.user.id, email="new@example.com")
        self.assertEqual(updated.email, "new@example.com")
        self.assertEqual(updated.username, "ana")

    def test_empty_update_is_noop(self) -> None:
        self.assertEqual(self.repo.update(self.user.id), self.user)

    def test_update_unknown_id_returns_none(self) -> None:
        self.assertIsNone(self.repo.update(self.user.id + 1000, username="ghost"))

    def test_update_respects_role_filter(self) -> None:
        self.assertIsNone(self.repo.update(self.user.id, username="hijack", role=Role.ADMIN))
        self.assertEqual(self.repo.find_by_id(self.user.id).username, "ana")

    def test_update_avatar(self) -> None:
        result = self.repo.update_avatar(self.user.id, "https://cdn.example.com/a.png")
        self.assertEqual(result.avatar_url, "https://cdn.example.com/a.png")
        self.assertEqual(self.repo.find_by_id(self.user.id).avatar_url, "https://cdn.example.com/a.png")
        self.assertGreaterEqual(result.updated_at, self.user.updated_at)

    def test_update_avatar_unknown_id(self) -> None:
        self.assertIsNone(self.repo.update_avatar(self.user.id + 1000, "https://x"))

    def test_update_password(self) -> None:
        result = self.repo.update_password(self.user.id, "new-hash")
        self.assertEqual(result.id, self.user.id)
        self.assertEqual(self.repo.find_credentials_by_id(self.user.id).password, "new-hash")


class TestDelete(RepositoryTestCase):
    def test_delete_existing(self) -> None:
        (user,) = self._create()
        self.assertTrue(self.repo.delete(user.id))
        self.assertIsNone(self.repo.find_by_id(user.id))

    def test_delete_unknown_returns_false(self) -> None:
        self.assertFalse(self.repo.delete(12345))

    def test_delete_respects_role_filter(self) -> None:
        (user,) = self._create()
        self.assertFalse(self.repo.delete(user.id, role=Role.ADMIN))
        self.assertIsNotNone(self.repo.find_by_id(user.id))


class TestList(RepositoryTestCase):
    """25 seeded rows, 10 per page -> pages of 10, 10, 5."""

    def setUp(self) -> None:
        super().setUp()
        self.users = self._create(25)

    def test_first_page(self) -> None:
        page = self.repo.list(1, 10)
        self.assertEqual(len(page.items), 10)
        self.assertEqual(page.pagination.total, 25)
        self.assertEqual(page.pagination.total_pages, 3)
        self.assertEqual(page.pagination.current_page, 1)
        self.assertEqual(page.pagination.per_page, 10)
        self.assertEqual(page.pagination.first_page, 1)
        self.assertEqual(page.pagination.last_page, 3)

    def test_last_page_is_partial(self) -> None:
        self.assertEqual(len(self.repo.list(3, 10).items), 5)

    def test_page_past_end_is_empty(self) -> None:
        page = self.repo.list(4, 10)
        self.assertEqual(page.items, [])
        self.assertEqual(page.pagination.total, 25)

    def test_newest_first(self) -> None:
        ids = [u.id for u in self.repo.list(1, 100).items]
        self.assertEqual(ids, sorted((u.id for u in self.users), reverse=True))

    def test_pages_do_not_overlap(self) -> None:
        seen = [u.id for p in (1, 2, 3) for u in self.repo.list(p, 10).items]
        self.assertEqual(len(seen), 25)
        self.assertEqual(len(set(seen)), 25)

    def test_role_filter(self) -> None:
        self._create(3, role=Role.ADMIN, prefix="admin")
        page = self.repo.list(1, 10, role=Role.ADMIN)
        self.assertEqual(page.pagination.total, 3)
        self.assertEqual(page.pagination.total_pages, 1)
        self.assertTrue(all(u.role == Role.ADMIN for u in page.items))
        self.assertEqual(self.repo.list(1, 10).pagination.total, 28)

    def test_empty_table(self) -> None:
        repo = UserRepository(make_session_factory()())
        page = repo.list(1, 10)
        self.assertEqual(page.items, [])
        self.assertEqual(page.pagination.total, 0)
        self.assertEqual(page.pagination.total_pages, 0)


class TestStorageErrors(unittest.TestCase):
    """Database failures surface as StorageError and the session is rolled back."""

    def test_database_error_becomes_storage_error(self) -> None:
        session = MagicMock()
        session.scalars.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
        repo = UserRepository(session)
        with self.assertRaises(StorageError):
            repo.find_by_id(1)
        session.rollback.assert_called_once()


if __name__ == "__main__":
    unittest.main()
