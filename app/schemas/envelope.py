"""Uniform response envelope: {success, message, data, [pagination], [error], statusCode}."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.user import Pagination

T = TypeVar("T")

# Shown instead of internal error detail outside development.
GENERIC_ERROR_DETAIL = "Internal server error"


class Envelope(BaseModel, Generic[T]):
    """Successful response carrying a single payload (or null)."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "Success"
    data: T | None = None
    status_code: int = Field(default=200, alias="statusCode")


class PaginatedEnvelope(Envelope[list[T]], Generic[T]):
    """Successful listing response with its pagination block."""

    pagination: Pagination


class ErrorEnvelope(BaseModel):
    """Failure response produced by the exception handlers."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = False
    message: str
    data: Any = None
    error: str | None = None
    status_code: int = Field(default=500, alias="statusCode")


def success_response(data: Any, message: str = "Success", status_code: int = 200) -> Envelope:
    return Envelope(data=data, message=message, status_code=status_code)


def paginated_response(data: list, pagination: Pagination, message: str = "Success") -> PaginatedEnvelope:
    return PaginatedEnvelope(data=data, pagination=pagination, message=message, status_code=200)


def error_response(
    message: str,
    detail: str | None = None,
    status_code: int = 500,
    expose_detail: bool = False,
) -> ErrorEnvelope:
    """Build an error envelope; internal detail is only exposed when expose_detail is set."""
    if detail is None:
        error = None
    else:
        error = detail if expose_detail else GENERIC_ERROR_DETAIL
    return ErrorEnvelope(message=message, error=error, status_code=status_code)
