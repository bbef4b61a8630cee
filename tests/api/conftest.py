"""Fixtures for API tests."""

import httpx
import pytest
from http_helpers import create_brand, create_category, create_sub_category


@pytest.fixture
def branch(client: httpx.AsyncClient):
    """Factory creating a category, sub-category and brand over HTTP."""

    async def _branch() -> dict[str, dict]:
        category = await create_category(client)
        sub_category = await create_sub_category(client, category["id"])
        brand = await create_brand(client, category["id"], sub_category["id"])
        return {"category": category, "sub_category": sub_category, "brand": brand}

    return _branch
