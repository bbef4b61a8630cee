"""Media store client.

Stores catalog images in an S3 compatible bucket (MinIO). Objects are
grouped under folder-like key prefixes that mirror the catalog tree, so a
whole subtree of assets can be removed with one prefix delete.
"""

import asyncio
import io
import mimetypes
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import partial
from pathlib import PurePosixPath
from typing import Any, Callable
from uuid import uuid4

import structlog
import urllib3
from minio import Minio
from minio.deleteobjects import DeleteObject
from minio.error import MinioException

from catalog_api.domain.exceptions import AssetDeleteFailed, AssetUploadFailed
from catalog_api.infrastructure.config import settings

logger = structlog.get_logger()


@dataclass(frozen=True)
class StoredAsset:
    """Handle returned for an uploaded asset.

    Attributes:
        asset_id: Object key; the source of truth for the binary.
        url: Public URL derived from the key.
    """

    asset_id: str
    url: str

    def to_dict(self) -> dict[str, str]:
        return {"url": self.url, "asset_id": self.asset_id}


@dataclass(frozen=True)
class AssetFile:
    """A file received from the client, already read into memory."""

    content: bytes
    filename: str | None = None
    content_type: str | None = None

    @property
    def extension(self) -> str:
        if not self.filename:
            return ""
        return PurePosixPath(self.filename).suffix.lower()


class MediaStore(ABC):
    """Interface of the asset host used by the catalog service."""

    @abstractmethod
    async def upload(
        self,
        file: AssetFile,
        folder: str,
        asset_id: str | None = None,
    ) -> StoredAsset:
        """Store a file under a folder.

        When ``asset_id`` is given the existing object is overwritten in
        place instead of allocating a new identifier.
        """

    @abstractmethod
    async def delete_prefix(self, folder: str) -> int:
        """Delete every asset under a folder. Returns the number removed."""

    @abstractmethod
    async def delete_folder(self, folder: str) -> None:
        """Remove the (now empty) folder itself."""

    @abstractmethod
    def url_for(self, asset_id: str) -> str:
        """Build the retrievable URL for an asset id."""


def _host(endpoint: str) -> str:
    return endpoint.replace("http://", "").replace("https://", "").rstrip("/")


class MinioMediaStore(MediaStore):
    """MinIO backed media store.

    The MinIO SDK is blocking, so each call runs in the loop's default
    executor.
    """

    def __init__(
        self,
        client: Minio | None = None,
        bucket: str | None = None,
        public_url: str | None = None,
    ) -> None:
        """Initialize media store.

        Args:
            client: Preconfigured MinIO client. Built from settings if omitted.
            bucket: Bucket name.
            public_url: Base URL used for asset links.
        """
        self.client = client or Minio(
            _host(settings.media_endpoint),
            access_key=settings.media_access_key,
            secret_key=settings.media_secret_key,
            secure=settings.media_secure,
        )
        self.bucket = bucket or settings.media_bucket
        if public_url is None:
            public_url = settings.media_public_url
        if not public_url:
            scheme = "https" if settings.media_secure else "http"
            public_url = f"{scheme}://{_host(settings.media_endpoint)}/{self.bucket}"
        self.public_url = public_url.rstrip("/")
        self._bucket_checked = False

    async def _run(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    async def _ensure_bucket(self) -> None:
        if self._bucket_checked:
            return
        if not await self._run(self.client.bucket_exists, self.bucket):
            await self._run(self.client.make_bucket, self.bucket)
            logger.info("Created media bucket", bucket=self.bucket)
        self._bucket_checked = True

    def url_for(self, asset_id: str) -> str:
        return f"{self.public_url}/{asset_id}"

    async def upload(
        self,
        file: AssetFile,
        folder: str,
        asset_id: str | None = None,
    ) -> StoredAsset:
        key = asset_id or f"{folder.rstrip('/')}/{uuid4().hex}{file.extension}"
        content_type = (
            file.content_type
            or mimetypes.guess_type(file.filename or "")[0]
            or "application/octet-stream"
        )

        try:
            await self._ensure_bucket()
            await self._run(
                self.client.put_object,
                self.bucket,
                key,
                io.BytesIO(file.content),
                length=len(file.content),
                content_type=content_type,
            )
        except (MinioException, urllib3.exceptions.HTTPError) as e:
            logger.warning("Asset upload failed", folder=folder, key=key, error=str(e))
            raise AssetUploadFailed(folder, str(e)) from e

        logger.debug("Asset uploaded", key=key, size=len(file.content))
        return StoredAsset(asset_id=key, url=self.url_for(key))

    async def delete_prefix(self, folder: str) -> int:
        prefix = f"{folder.rstrip('/')}/"

        def _delete() -> int:
            objects = self.client.list_objects(self.bucket, prefix=prefix, recursive=True)
            keys = [DeleteObject(obj.object_name) for obj in objects]
            if not keys:
                return 0
            # remove_objects is lazy; iterating drives the request
            errors = list(self.client.remove_objects(self.bucket, keys))
            if errors:
                raise AssetDeleteFailed(folder, "; ".join(str(err) for err in errors))
            return len(keys)

        try:
            removed = await self._run(_delete)
        except (MinioException, urllib3.exceptions.HTTPError) as e:
            raise AssetDeleteFailed(folder, str(e)) from e

        logger.debug("Assets deleted", folder=folder, count=removed)
        return removed

    async def delete_folder(self, folder: str) -> None:
        # S3 has no real folders; drop the placeholder object some tools create
        try:
            await self._run(self.client.remove_object, self.bucket, f"{folder.rstrip('/')}/")
        except (MinioException, urllib3.exceptions.HTTPError) as e:
            raise AssetDeleteFailed(folder, str(e)) from e


_media_store: MediaStore | None = None


def get_media_store() -> MediaStore:
    """Get media store singleton."""
    global _media_store
    if _media_store is None:
        _media_store = MinioMediaStore()
    return _media_store
