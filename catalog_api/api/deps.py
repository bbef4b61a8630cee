"""Shared API dependencies."""

import mimetypes
from pathlib import PurePosixPath
from typing import Annotated

from fastapi import Depends, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.catalog.service import CatalogService
from catalog_api.domain.exceptions import InvalidAsset
from catalog_api.infrastructure.config import settings
from catalog_api.infrastructure.database import get_session
from catalog_api.infrastructure.media_store import AssetFile, MediaStore, get_media_store


def get_catalog_service(
    session: Annotated[AsyncSession, Depends(get_session)],
    media_store: Annotated[MediaStore, Depends(get_media_store)],
) -> CatalogService:
    """Get catalog service bound to the request's session."""
    return CatalogService(session, media_store)


def get_created_by(request: Request) -> str | None:
    """Id of the calling user, when the gateway forwards one."""
    return request.headers.get("X-User-ID")


def validate_image(filename: str, content_type: str | None) -> None:
    """Reject uploads that are not an accepted image type.

    Both the extension and the declared (or guessed) MIME type must say
    image.

    Raises:
        InvalidAsset: If the file is not an accepted image.
    """
    allowed = settings.allowed_image_extensions
    extension = PurePosixPath(filename).suffix.lower()
    mime_type = content_type or mimetypes.guess_type(filename)[0] or ""
    if extension not in allowed or not mime_type.startswith("image/"):
        raise InvalidAsset(filename, allowed)


async def read_upload(upload: UploadFile | None) -> AssetFile | None:
    """Read an uploaded image into memory.

    Browsers submit an empty part for an untouched file input; that is
    treated as no file at all.

    Raises:
        InvalidAsset: If the file is not an accepted image.
    """
    if upload is None or not upload.filename:
        return None
    validate_image(upload.filename, upload.content_type)
    content = await upload.read()
    if not content:
        return None
    return AssetFile(
        content=content,
        filename=upload.filename,
        content_type=upload.content_type,
    )


async def read_uploads(uploads: list[UploadFile] | None) -> list[AssetFile]:
    """Read several uploaded images, keeping their order."""
    files = []
    for upload in uploads or []:
        file = await read_upload(upload)
        if file is not None:
            files.append(file)
    return files
