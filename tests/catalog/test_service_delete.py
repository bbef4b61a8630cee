"""Tests for deleting catalog entities and their descendants."""

from uuid import uuid4

import pytest

from catalog_api.catalog.kinds import BRAND, CATEGORY, PRODUCT, SUB_CATEGORY
from catalog_api.catalog.service import CatalogService
from catalog_api.domain.exceptions import AssetDeleteFailed, EntityNotFound


def category_folder(tree) -> str:
    return f"Uploads/Categories/{tree.category.short_id}"


def brand_folder(tree) -> str:
    return (
        f"{category_folder(tree)}/SubCategories/{tree.sub_category.short_id}"
        f"/Brands/{tree.brand.short_id}"
    )


class TestDelete:
    """Tests for deleting a single entity."""

    @pytest.mark.asyncio
    async def test_delete_product(self, service: CatalogService, tree, media_store) -> None:
        """Deleting a product removes its gallery and nothing else."""
        product_folder = f"{brand_folder(tree)}/Products/{tree.product.short_id}"

        result = await service.delete(PRODUCT, tree.product.id)

        assert result.entity.id == tree.product.id
        assert result.entity.title == "Galaxy S24"
        assert media_store.keys_under(product_folder) == []
        assert product_folder in media_store.deleted_folders
        assert await service.find_many(PRODUCT) == []
        assert await service.find_by_id(BRAND, tree.brand.id) is not None

    @pytest.mark.asyncio
    async def test_delete_missing(self, service: CatalogService) -> None:
        """Deleting an unknown id raises not found."""
        with pytest.raises(EntityNotFound):
            await service.delete(CATEGORY, str(uuid4()))

    @pytest.mark.asyncio
    async def test_delete_twice(self, service: CatalogService, tree) -> None:
        """A second delete of the same id raises not found."""
        await service.delete(BRAND, tree.brand.id)
        with pytest.raises(EntityNotFound):
            await service.delete(BRAND, tree.brand.id)

    @pytest.mark.asyncio
    async def test_own_asset_failure_propagates(
        self, service: CatalogService, tree, media_store
    ) -> None:
        """Failing to remove the entity's own assets fails the delete."""
        media_store.fail_delete_under.add(category_folder(tree))
        with pytest.raises(AssetDeleteFailed):
            await service.delete(CATEGORY, tree.category.id)


class TestCascade:
    """Tests for descendant cleanup."""

    @pytest.mark.asyncio
    async def test_category_delete_removes_whole_branch(
        self, service: CatalogService, tree, media_store
    ) -> None:
        """Deleting a category removes every descendant and asset."""
        result = await service.delete(CATEGORY, tree.category.id)

        assert result.cascade.deleted == {"sub_category": 1, "brand": 1, "product": 1}
        assert result.cascade.failures == []
        for kind in (CATEGORY, SUB_CATEGORY, BRAND, PRODUCT):
            assert await service.find_many(kind) == []
        assert media_store.objects == {}

    @pytest.mark.asyncio
    async def test_cascade_spares_other_branches(
        self, service: CatalogService, tree, image_file
    ) -> None:
        """Siblings of the deleted entity survive."""
        tablets = await service.create(
            SUB_CATEGORY,
            {"name": "Tablets"},
            files=[image_file()],
            parent_ids={"category_id": tree.category.id},
        )

        result = await service.delete(SUB_CATEGORY, tree.sub_category.id)

        assert result.cascade.deleted == {"brand": 1, "product": 1}
        remaining = await service.find_many(SUB_CATEGORY)
        assert [sub.id for sub in remaining] == [tablets.id]
        assert await service.find_by_id(CATEGORY, tree.category.id) is not None

    @pytest.mark.asyncio
    async def test_brand_delete_removes_products(
        self, service: CatalogService, tree, image_file
    ) -> None:
        """Every product of a brand goes with it."""
        await service.create(
            PRODUCT,
            {"title": "Galaxy A55", "price": 400.0, "stock": 20},
            files=[image_file()],
            parent_ids=tree.parent_ids,
        )

        result = await service.delete(BRAND, tree.brand.id)

        assert result.cascade.deleted == {"product": 2}
        assert await service.find_many(PRODUCT) == []

    @pytest.mark.asyncio
    async def test_descendant_asset_failure_is_reported(
        self, service: CatalogService, tree, media_store
    ) -> None:
        """A failed descendant cleanup is recorded and the cascade continues."""
        media_store.fail_delete_under.add(brand_folder(tree))

        result = await service.delete(CATEGORY, tree.category.id)

        assert result.cascade.deleted == {"sub_category": 1, "brand": 1, "product": 1}
        assert len(result.cascade.failures) == 1
        failure = result.cascade.failures[0]
        assert failure["kind"] == "brand"
        assert failure["id"] == tree.brand.id
        assert await service.find_many(PRODUCT) == []

    @pytest.mark.asyncio
    async def test_two_sub_categories_each_with_a_brand(
        self, service: CatalogService, image_file
    ) -> None:
        """Every sub-category and brand below the category is removed."""
        category = await service.create(CATEGORY, {"name": "Sports"}, files=[image_file()])
        for sub_name, brand_name in (("Running", "Asics"), ("Cycling", "Shimano")):
            sub_category = await service.create(
                SUB_CATEGORY,
                {"name": sub_name},
                files=[image_file()],
                parent_ids={"category_id": category.id},
            )
            await service.create(
                BRAND,
                {"name": brand_name},
                files=[image_file()],
                parent_ids={"category_id": category.id, "sub_category_id": sub_category.id},
            )

        result = await service.delete(CATEGORY, category.id)

        assert result.cascade.deleted == {"sub_category": 2, "brand": 2}
        assert await service.find_many(SUB_CATEGORY) == []
        assert await service.find_many(BRAND) == []
