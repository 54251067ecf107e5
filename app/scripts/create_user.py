"""
Create an account from the command line (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user root admin@example.com s3cretpass1 admin
"""
import argparse
import logging
import sys

from pydantic import ValidationError as PydanticValidationError

from app.core.config import get_settings
from app.core.database import create_db_engine, create_session_factory
from app.core.errors import AppError
from app.core.logging_config import configure_logging
from app.core.security import password_hasher_from_settings
from app.models.user import Role
from app.repositories.user_repository import UserRepository
from app.schemas.auth import RegisterRequest
from app.services import accounts

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user or admin account.")
    parser.add_argument("username", help="Username (3-30 alphanumeric chars)")
    parser.add_argument("email", help="Login email")
    parser.add_argument("password", help="Password (8+ chars, at least one letter and one digit)")
    parser.add_argument("role", nargs="?", default=Role.USER.value, choices=[r.value for r in Role])
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)

    try:
        body = RegisterRequest(username=args.username.strip(), email=args.email.strip(), password=args.password)
    except PydanticValidationError as e:
        print(f"Invalid input: {e.errors()[0]['msg']}", file=sys.stderr)
        return 1

    engine = create_db_engine(settings)
    db = create_session_factory(engine)()
    try:
        repo = UserRepository(db)
        hasher = password_hasher_from_settings(settings)
        if args.role == Role.ADMIN.value:
            user = accounts.create_admin(repo, hasher, body)
        else:
            user = accounts.register_user(repo, hasher, body)
        print(f"Created {user.role.value} '{user.username}' <{user.email}> with id {user.id}.")
        return 0
    except AppError as e:
        print(f"{e.message}{f' ({e.detail})' if e.detail else ''}", file=sys.stderr)
        return 1
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
