"""Exception handlers: every error leaves the API as the uniform error envelope."""

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.core.errors import AppError
from app.schemas.envelope import error_response

logger = logging.getLogger(__name__)


def _expose_detail(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None) or get_settings()
    return settings.is_development


def _envelope(request: Request, status_code: int, message: str, detail: str | None = None) -> JSONResponse:
    body = error_response(message, detail, status_code, expose_detail=_expose_detail(request))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))


def _validation_message(exc: RequestValidationError) -> str:
    """First validation problem as a readable sentence; custom validator messages are kept as-is."""
    errors = exc.errors()
    if not errors:
        return "Validation error"
    first = errors[0]
    msg = str(first.get("msg", "Invalid value"))
    if first.get("type") == "value_error":
        return f"Validation error: {msg.removeprefix('Value error, ')}"
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    return f"Validation error: {field}: {msg}" if field else f"Validation error: {msg}"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.detail)
    return _envelope(request, exc.status_code, exc.message, exc.detail)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _envelope(request, status.HTTP_400_BAD_REQUEST, _validation_message(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = f"Route not found: {request.url.path}"
    else:
        message = str(exc.detail)
    return _envelope(request, exc.status_code, message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    detail = "".join(traceback.format_exception(exc))
    return _envelope(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", detail)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
