"""Image uploads to a Supabase-storage compatible object store.

Objects are written to `{bucket}/{organization_id}/{uuid}{ext}` and
served from the public URL with a `?t=<epoch ms>` cache-busting suffix.

Accepted: JPEG, PNG, WebP, GIF up to MAX_IMAGE_UPLOAD_BYTES (5 MB).
Validation and configuration problems are raised before any request.
Uploads are not retried.
"""

import logging
import time
import uuid
from pathlib import PurePosixPath

import httpx

from app.config import settings
from app.middleware.exceptions import BusinessLogicError, ConfigurationError, ExternalServiceError
from app.schemas.geo import UploadOut

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}
_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}


def validate_image(content_type: str | None, size: int, max_bytes: int | None = None) -> None:
    """Reject unsupported types, empty files and files over the limit."""
    max_bytes = settings.max_image_upload_bytes if max_bytes is None else max_bytes
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise BusinessLogicError(
            "Invalid file type. Please upload a JPEG, PNG, WebP or GIF image.",
            error_code="INVALID_FILE_TYPE",
        )
    if size <= 0:
        raise BusinessLogicError("File is empty", error_code="EMPTY_FILE")
    if size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise BusinessLogicError(
            f"File size too large. Maximum size is {limit_mb:g}MB.",
            error_code="FILE_TOO_LARGE",
        )


def build_object_path(organization_id: str, filename: str | None, content_type: str) -> str:
    """`{organization_id}/{uuid}{ext}`; the extension follows the filename when sane."""
    suffix = PurePosixPath(filename or "").suffix.lower()
    ext = suffix if suffix in _EXTENSIONS else ALLOWED_IMAGE_TYPES[content_type]
    return f"{organization_id}/{uuid.uuid4()}{ext}"


def public_url(base_url: str, bucket: str, path: str, now_ms: int | None = None) -> str:
    stamp = int(time.time() * 1000) if now_ms is None else now_ms
    return f"{base_url.rstrip('/')}/storage/v1/object/public/{bucket}/{path}?t={stamp}"


class StorageClient:
    """Thin HTTP client for the object store's upload endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        service_key: str | None = None,
        bucket: str | None = None,
        max_bytes: int | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = (settings.storage_url if base_url is None else base_url).rstrip("/")
        self.service_key = settings.storage_service_key if service_key is None else service_key
        self.bucket = bucket or settings.storage_bucket
        self.max_bytes = settings.max_image_upload_bytes if max_bytes is None else max_bytes
        self.client = client or httpx.AsyncClient(timeout=timeout or settings.http_timeout_seconds)

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.service_key)

    async def close(self):
        await self.client.aclose()

    async def upload_image(
        self,
        organization_id: str,
        filename: str | None,
        content_type: str | None,
        data: bytes,
    ) -> UploadOut:
        validate_image(content_type, len(data), self.max_bytes)
        if not self.configured:
            raise ConfigurationError("Object storage is not configured")

        path = build_object_path(organization_id, filename, content_type)
        try:
            response = await self.client.post(
                f"{self.base_url}/storage/v1/object/{self.bucket}/{path}",
                content=data,
                headers={
                    "Authorization": f"Bearer {self.service_key}",
                    "apikey": self.service_key,
                    "Content-Type": content_type,
                    "x-upsert": "false",
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Image upload failed for {path}: {e}")
            raise ExternalServiceError("Storage", f"upload failed: {e}") from e

        logger.info("Uploaded %s (%d bytes)", path, len(data))
        return UploadOut(
            url=public_url(self.base_url, self.bucket, path),
            path=path,
            content_type=content_type,
            size=len(data),
        )
