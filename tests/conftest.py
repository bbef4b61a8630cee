"""Shared test fixtures.

Tests run against a throwaway SQLite database and an in-memory media
store; the environment is set before the application is imported so the
module-level engine picks it up.
"""

import os
import tempfile
from collections.abc import AsyncGenerator

_TEST_DIR = tempfile.mkdtemp(prefix="catalog-api-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/catalog.db"
os.environ["CATALOG_API_KEY"] = ""
os.environ["LOG_JSON"] = "false"
os.environ["UPLOADS_ROOT"] = "Uploads"

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from catalog_api.catalog.models import Brand, Category, Product, SubCategory  # noqa: E402, F401
from catalog_api.catalog.service import CatalogService  # noqa: E402
from catalog_api.domain.exceptions import AssetDeleteFailed, AssetUploadFailed  # noqa: E402
from catalog_api.infrastructure.database import (  # noqa: E402
    Base,
    async_session_factory,
    engine,
)
from catalog_api.infrastructure.media_store import (  # noqa: E402
    AssetFile,
    MediaStore,
    StoredAsset,
    get_media_store,
)
from catalog_api.main import app  # noqa: E402


class InMemoryMediaStore(MediaStore):
    """Media store keeping objects in a dict.

    Failures can be injected per test:
        fail_upload_at: Zero-based index of the upload call that fails.
        fail_delete_under: Folders whose prefix delete fails.
    """

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.upload_calls = 0
        self.deleted_folders: list[str] = []
        self.fail_upload_at: int | None = None
        self.fail_delete_under: set[str] = set()

    def url_for(self, asset_id: str) -> str:
        return f"http://media.test/{asset_id}"

    async def upload(
        self,
        file: AssetFile,
        folder: str,
        asset_id: str | None = None,
    ) -> StoredAsset:
        call = self.upload_calls
        self.upload_calls += 1
        if self.fail_upload_at is not None and call == self.fail_upload_at:
            raise AssetUploadFailed(folder, "injected failure")

        key = asset_id or f"{folder}/asset-{call}{file.extension}"
        self.objects[key] = file.content
        return StoredAsset(asset_id=key, url=self.url_for(key))

    async def delete_prefix(self, folder: str) -> int:
        if folder in self.fail_delete_under:
            raise AssetDeleteFailed(folder, "injected failure")
        prefix = f"{folder}/"
        keys = [key for key in self.objects if key.startswith(prefix)]
        for key in keys:
            del self.objects[key]
        return len(keys)

    async def delete_folder(self, folder: str) -> None:
        self.deleted_folders.append(folder)

    def keys_under(self, folder: str) -> list[str]:
        return sorted(key for key in self.objects if key.startswith(f"{folder}/"))


def image(name: str = "cover.png", content: bytes = b"\x89PNG-data") -> AssetFile:
    """Build an in-memory image upload."""
    return AssetFile(content=content, filename=name, content_type="image/png")


@pytest.fixture
async def database() -> AsyncGenerator[None, None]:
    """Create all tables before the test and drop them afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    # Pooled connections are bound to this test's event loop
    await engine.dispose()


@pytest.fixture
async def session(database: None) -> AsyncGenerator[AsyncSession, None]:
    """Database session for service-level tests."""
    async with async_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def media_store() -> InMemoryMediaStore:
    """Fresh in-memory media store."""
    return InMemoryMediaStore()


@pytest.fixture
def service(session: AsyncSession, media_store: InMemoryMediaStore) -> CatalogService:
    """Catalog service wired to the test session and media store."""
    return CatalogService(session, media_store, uploads_root="Uploads")


@pytest.fixture
def image_file():
    """Factory for in-memory image uploads."""
    return image


@pytest.fixture
async def client(
    database: None,
    media_store: InMemoryMediaStore,
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client talking to the app in-process."""
    app.dependency_overrides[get_media_store] = lambda: media_store
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
