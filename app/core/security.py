"""Password hashing and JWT creation/verification for authentication."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Literal

import bcrypt
import jwt
from pydantic import ValidationError as PydanticValidationError

from app.core.config import Settings
from app.core.errors import ConfigError
from app.schemas.auth import TokenClaims

# bcrypt accepts cost factors 4..31.
BCRYPT_MIN_ROUNDS = 4
BCRYPT_MAX_ROUNDS = 31

# bcrypt only looks at the first 72 bytes; truncate on both sides so hash and verify agree.
BCRYPT_MAX_BYTES = 72

InvalidReason = Literal["missing", "malformed", "expired", "bad_signature"]


def _password_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """Salted bcrypt hashing with a configurable cost factor."""

    def __init__(self, rounds: int | None) -> None:
        self.rounds = rounds

    def _checked_rounds(self) -> int:
        if self.rounds is None:
            raise ConfigError("Password hashing is not configured", "BCRYPT_SALT_ROUNDS is not set.")
        if not (BCRYPT_MIN_ROUNDS <= self.rounds <= BCRYPT_MAX_ROUNDS):
            raise ConfigError(
                "Password hashing is not configured",
                f"BCRYPT_SALT_ROUNDS must be between {BCRYPT_MIN_ROUNDS} and {BCRYPT_MAX_ROUNDS}.",
            )
        return self.rounds

    def hash(self, plain_password: str) -> str:
        """Hash a plain-text password for storage. Do not store plain passwords."""
        salt = bcrypt.gensalt(rounds=self._checked_rounds())
        return bcrypt.hashpw(_password_bytes(plain_password), salt).decode("utf-8")

    def verify(self, plain_password: str, hashed: str) -> bool:
        """Verify a plain password against a stored hash."""
        try:
            return bcrypt.checkpw(_password_bytes(plain_password), hashed.encode("utf-8"))
        except (ValueError, TypeError, AttributeError):
            return False


@dataclass(frozen=True)
class InvalidToken:
    """Outcome of a failed verification; reason separates a missing token from a bad one."""

    reason: InvalidReason

    @property
    def is_missing(self) -> bool:
        return self.reason == "missing"


class TokenService:
    """Issues and verifies signed, expiring JWTs carrying {id, email, role}."""

    def __init__(
        self,
        secret: str | None,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
    ) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def _checked_secret(self) -> str:
        if not self.secret:
            raise ConfigError("Token signing is not configured", "JWT_SECRET is not set.")
        return self.secret

    def issue(self, claims: TokenClaims) -> str:
        """Create a JWT access token with id, email, role, iat and exp."""
        secret = self._checked_secret()
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "id": claims.id,
            "email": claims.email,
            "role": claims.role.value,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def verify(self, token: str | None) -> TokenClaims | InvalidToken:
        """
        Decode and validate a JWT; return its claims or an InvalidToken.
        Never raises on bad input; raises ConfigError only if no secret is configured.
        """
        if token is None or not token.strip():
            return InvalidToken("missing")
        secret = self._checked_secret()
        try:
            payload = jwt.decode(
                token.strip(),
                secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            return InvalidToken("expired")
        except jwt.InvalidSignatureError:
            return InvalidToken("bad_signature")
        except jwt.PyJWTError:
            return InvalidToken("malformed")
        try:
            return TokenClaims.model_validate(payload)
        except PydanticValidationError:
            return InvalidToken("malformed")


def password_hasher_from_settings(settings: Settings) -> PasswordHasher:
    return PasswordHasher(settings.BCRYPT_SALT_ROUNDS)


def token_service_from_settings(settings: Settings) -> TokenService:
    secret = settings.JWT_SECRET.get_secret_value() if settings.JWT_SECRET else None
    return TokenService(
        secret,
        algorithm=settings.JWT_ALGORITHM,
        expire_minutes=settings.JWT_EXPIRE_MINUTES,
    )
