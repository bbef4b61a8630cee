"""Fixtures building a small catalog tree through the service."""

from dataclasses import dataclass
from typing import Any

import pytest

from catalog_api.catalog.kinds import BRAND, CATEGORY, PRODUCT, SUB_CATEGORY
from catalog_api.catalog.service import CatalogService


@dataclass
class Tree:
    """One branch of the catalog: category, sub-category, brand, product."""

    category: Any
    sub_category: Any
    brand: Any
    product: Any

    @property
    def parent_ids(self) -> dict[str, str]:
        """Parent ids for creating another product under the brand."""
        return {
            "category_id": self.category.id,
            "sub_category_id": self.sub_category.id,
            "brand_id": self.brand.id,
        }


PRODUCT_FIELDS = {
    "title": "Galaxy S24",
    "price": 200.0,
    "stock": 25,
    "overview": "Flagship phone",
    "specifications": '{"ram": "8GB", "colors": ["black", "violet"]}',
    "badge": "New",
    "discount_kind": "Percentage",
    "discount_amount": 10,
    "rating": 4.5,
}


@pytest.fixture
def product_fields() -> dict[str, Any]:
    """Valid product creation fields."""
    return dict(PRODUCT_FIELDS)


@pytest.fixture
async def tree(service: CatalogService, image_file) -> Tree:
    """Create Electronics > Phones > Samsung > Galaxy S24."""
    category = await service.create(CATEGORY, {"name": "Electronics"}, files=[image_file()])
    sub_category = await service.create(
        SUB_CATEGORY,
        {"name": "Phones"},
        files=[image_file()],
        parent_ids={"category_id": category.id},
    )
    brand = await service.create(
        BRAND,
        {"name": "Samsung"},
        files=[image_file()],
        parent_ids={"category_id": category.id, "sub_category_id": sub_category.id},
    )
    product = await service.create(
        PRODUCT,
        dict(PRODUCT_FIELDS),
        files=[image_file("front.png"), image_file("back.png")],
        parent_ids={
            "category_id": category.id,
            "sub_category_id": sub_category.id,
            "brand_id": brand.id,
        },
        created_by="user-42",
    )
    return Tree(category, sub_category, brand, product)
