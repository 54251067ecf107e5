"""FastAPI application entrypoint. No business logic; only wiring, middleware and lifecycle."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import router as api_router
from app.core.config import API_VERSION, Settings, get_settings
from app.core.database import dispose_engine, init_engine
from app.core.handlers import register_exception_handlers
from app.core.logging_config import configure_logging
from app.core.middleware import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Startup: acquire the pool. Shutdown (SIGTERM/SIGINT via the server): drain it.
    init_engine(app.state, app.state.settings)
    try:
        yield
    finally:
        dispose_engine(app.state)
        logger.info("Shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application; tests pass their own settings and override dependencies."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="User Management API",
        version=API_VERSION,
        docs_url="/api-docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept"],
    )
    app.add_middleware(
        SecurityHeadersMiddleware,
        csp_exempt_paths=(app.docs_url, app.redoc_url, app.swagger_ui_oauth2_redirect_url),
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/", include_in_schema=False)
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "User Management API", "docs": "/api-docs"}

    return app


app = create_app()
