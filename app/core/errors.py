"""Application error taxonomy. Each error carries the HTTP status it maps to."""


class AppError(Exception):
    """Base for errors translated into the response envelope by app.core.handlers."""

    status_code: int = 500

    def __init__(self, message: str, detail: str | None = None) -> None:
        self.message = message
        self.detail = detail
        super().__init__(message)


class ValidationError(AppError):
    """Malformed input (bad pagination, wrong MIME type, wrong current password)."""

    status_code = 400


class UnauthenticatedError(AppError):
    """No authenticated identity where one is required."""

    status_code = 401


class InvalidCredentialError(UnauthenticatedError):
    """Bearer token present but malformed, expired or badly signed."""


class MissingCredentialError(AppError):
    """No bearer token on a route that requires one."""

    status_code = 403


class ForbiddenError(AppError):
    """Authenticated, but the role does not allow the operation."""

    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    """Duplicate email on registration."""

    status_code = 409


class StorageError(AppError):
    """Database constraint violation or connectivity failure."""

    status_code = 500


class AvatarStoreError(AppError):
    """Object store rejected or failed the avatar upload."""

    status_code = 500


class ConfigError(AppError):
    """Required configuration (signing secret, hash cost, store credentials) is missing or invalid."""

    status_code = 500
