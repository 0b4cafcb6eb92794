"""Image upload service (Cloudinary unsigned uploads)."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import httpx
from fastapi import UploadFile

from roomcheck.core.config import get_settings
from roomcheck.core.exceptions import ConfigError, InvalidInput, UploadFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageFile:
    """An uploaded file held in memory until it is pushed to the image host."""

    filename: str
    content: bytes
    content_type: str

    @property
    def is_image(self) -> bool:
        return (self.content_type or "").lower().startswith("image/")

    @classmethod
    async def from_upload(cls, upload: UploadFile, max_size_mb: Optional[int] = None) -> "ImageFile":
        """Read an upload, refusing it before buffering more than the size limit."""
        filename = upload.filename or "upload"
        if max_size_mb:
            limit = max_size_mb * 1024 * 1024
            if upload.size is not None and upload.size > limit:
                raise _too_large(filename, max_size_mb)
            content = await upload.read(limit + 1)
            if len(content) > limit:
                raise _too_large(filename, max_size_mb)
        else:
            content = await upload.read()
        return cls(filename=filename, content=content, content_type=upload.content_type or "")


def _too_large(filename: str, max_size_mb: int) -> InvalidInput:
    return InvalidInput(f"'{filename}' exceeds maximum of {max_size_mb}MB")


def validate_image_files(files: Sequence[ImageFile], max_size_mb: Optional[int] = None) -> None:
    """Reject empty batches, non-image content types and oversized files."""
    if not files:
        raise InvalidInput("Please select at least one image.")

    for f in files:
        if not f.is_image:
            raise InvalidInput(f"'{f.filename}' is not an image ({f.content_type or 'unknown type'})")
        if max_size_mb and len(f.content) > max_size_mb * 1024 * 1024:
            raise _too_large(f.filename, max_size_mb)


class CloudinaryUploader:
    """Uploads images to Cloudinary with a fixed unsigned upload preset."""

    def __init__(
        self,
        cloud_name: Optional[str],
        upload_preset: Optional[str],
        api_url: str = "https://api.cloudinary.com/v1_1",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cloud_name = cloud_name
        self.upload_preset = upload_preset
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def upload_url(self) -> str:
        return f"{self.api_url}/{self.cloud_name}/upload"

    def _check_config(self) -> None:
        if not self.cloud_name or not self.upload_preset:
            raise ConfigError("Cloudinary configuration is missing.")

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def upload(self, file: ImageFile, client: Optional[httpx.AsyncClient] = None) -> str:
        """Upload one file and return its public ``secure_url``."""
        self._check_config()
        if client is None:
            async with self._client() as own_client:
                return await self._post(own_client, file)
        return await self._post(client, file)

    async def _post(self, client: httpx.AsyncClient, file: ImageFile) -> str:
        try:
            response = await client.post(
                self.upload_url,
                data={"upload_preset": self.upload_preset},
                files={"file": (file.filename, file.content, file.content_type)},
            )
        except httpx.HTTPError as e:
            logger.error(f"[UPLOAD] {file.filename} failed: {e}")
            raise UploadFailed(f"Upload of '{file.filename}' failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        secure_url = data.get("secure_url") if isinstance(data, dict) else None
        if response.is_success and secure_url:
            logger.info(f"[UPLOAD] {file.filename} -> {secure_url}")
            return secure_url

        error = data.get("error") if isinstance(data, dict) else None
        message = error.get("message") if isinstance(error, dict) else None
        logger.warning(f"[UPLOAD] {file.filename} rejected: {response.status_code} {message or data}")
        raise UploadFailed(message or "Upload failed")

    async def upload_many(self, files: Sequence[ImageFile]) -> list[str]:
        """Upload files concurrently; URLs come back in input order.

        The first failure cancels the uploads still in flight and is re-raised.
        """
        self._check_config()
        async with self._client() as client:
            tasks = [asyncio.ensure_future(self.upload(f, client)) for f in files]
            try:
                return list(await asyncio.gather(*tasks))
            except BaseException:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise


def get_uploader() -> CloudinaryUploader:
    """Factory function to get the uploader from config."""
    settings = get_settings()
    return CloudinaryUploader(
        cloud_name=settings.cloudinary_cloud_name,
        upload_preset=settings.cloudinary_upload_preset,
        api_url=settings.cloudinary_api_url,
        timeout=settings.http_timeout_seconds,
    )
