"""PostgreSQL engine lifecycle and per-request session management."""

import logging
from collections.abc import Generator

from fastapi import Request
from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import Settings
from app.core.errors import ConfigError

logger = logging.getLogger(__name__)


def create_db_engine(settings: Settings) -> Engine:
    """Build the process-wide connection pool. Call once at startup; dispose on shutdown."""
    return create_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        echo=settings.DEBUG,
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_engine(app_state: object, settings: Settings) -> Engine:
    """Acquire the pool and expose its session factory on the application state."""
    engine = create_db_engine(settings)
    app_state.engine = engine
    app_state.session_factory = create_session_factory(engine)
    logger.info("Database pool initialised (pool_size=%s)", settings.DB_POOL_SIZE)
    return engine


def dispose_engine(app_state: object) -> None:
    """Drain the pool acquired by init_engine. Safe to call when it was never initialised."""
    engine = getattr(app_state, "engine", None)
    if engine is None:
        return
    engine.dispose()
    app_state.engine = None
    app_state.session_factory = None
    logger.info("Database pool drained")


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session from the app's pool and closes it when done."""
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise ConfigError("Database is not initialised", "No session factory on app.state.")
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.warning("Database connectivity check failed", exc_info=True)
        return False
