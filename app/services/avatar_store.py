"""Avatar object storage: a small store capability plus its Cloudinary implementation."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from starlette.concurrency import run_in_threadpool

from app.core.errors import AvatarStoreError, ConfigError

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvatarMetadata:
    """What the store needs to know about an avatar besides its bytes."""

    user_id: int
    content_type: str
    filename: str | None = None

    @property
    def public_id(self) -> str:
        return f"avatar_{self.user_id}"


class AvatarStore(Protocol):
    """Stores avatar bytes somewhere public and returns the URL."""

    async def store(self, data: bytes, metadata: AvatarMetadata) -> str: ...


class CloudinaryAvatarStore:
    """
    Upload avatars through the Cloudinary SDK. One image per user, overwritten on re-upload.

    Credentials are checked when an upload is attempted, not at construction, so
    callers can validate the file before learning that storage is unconfigured.
    """

    def __init__(
        self,
        cloud_name: str | None,
        api_key: str | None,
        api_secret: str | None,
        folder: str = "avatars",
        timeout: float = 30.0,
    ) -> None:
        self.cloud_name = (cloud_name or "").strip()
        self.api_key = (api_key or "").strip()
        self.api_secret = (api_secret or "").strip()
        self.folder = folder
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _upload_options(self, metadata: AvatarMetadata) -> dict[str, Any]:
        return {
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
            "folder": self.folder,
            "public_id": metadata.public_id,
            "overwrite": True,
            "resource_type": "image",
            "timeout": self.timeout,
        }

    async def store(self, data: bytes, metadata: AvatarMetadata) -> str:
        if not self.is_configured:
            raise ConfigError(
                "Avatar storage is not configured",
                "Set CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET.",
            )
        try:
            # The SDK is blocking; keep it off the event loop.
            result = await run_in_threadpool(
                cloudinary.uploader.upload,
                io.BytesIO(data),
                **self._upload_options(metadata),
            )
        except CloudinaryError as e:
            logger.error("Avatar upload for user %s failed: %s", metadata.user_id, e)
            raise AvatarStoreError("Upload failed", str(e)) from e
        url = (result or {}).get("secure_url")
        if not url:
            raise AvatarStoreError("Upload failed", "Cloudinary response missing secure_url.")
        return url


def avatar_store_from_settings(settings: Settings) -> CloudinaryAvatarStore:
    """Build the Cloudinary store from settings; missing credentials surface on upload."""
    secret = settings.CLOUDINARY_API_SECRET
    return CloudinaryAvatarStore(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=secret.get_secret_value() if secret is not None else None,
        folder=settings.AVATAR_FOLDER,
        timeout=settings.AVATAR_UPLOAD_TIMEOUT_SEC,
    )
