"""Shared test fixtures: in-memory SQLite database and test settings."""

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.models import Base

TEST_JWT_SECRET = "test-secret-not-for-production"
# Lowest cost bcrypt accepts; keeps the suite fast.
TEST_BCRYPT_ROUNDS = 4


def make_session_factory() -> sessionmaker[Session]:
    """Fresh in-memory database with the users table; one shared connection across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


def make_settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "APP_ENV": "dev",
        "JWT_SECRET": TEST_JWT_SECRET,
        "BCRYPT_SALT_ROUNDS": TEST_BCRYPT_ROUNDS,
        "CORS_ORIGIN": "http://localhost:3000",
    }
    values.update(overrides)
    return Settings(**values)
