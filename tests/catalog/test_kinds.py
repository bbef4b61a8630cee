"""Tests for entity-kind metadata."""

from catalog_api.catalog.kinds import (
    BRAND,
    CATEGORY,
    KINDS,
    PRODUCT,
    SUB_CATEGORY,
    folder_path,
)


class TestEntityKinds:
    """Tests for the kind registry."""

    def test_registry_keys(self) -> None:
        """Every kind is registered under its key."""
        assert KINDS == {
            "category": CATEGORY,
            "sub_category": SUB_CATEGORY,
            "brand": BRAND,
            "product": PRODUCT,
        }

    def test_parents_root_first(self) -> None:
        """Parent links are listed from the root down."""
        assert [link.field for link in PRODUCT.parents] == [
            "category_id",
            "sub_category_id",
            "brand_id",
        ]

    def test_direct_parent(self) -> None:
        """The direct parent is the last link."""
        assert CATEGORY.direct_parent is None
        assert SUB_CATEGORY.direct_parent.kind_key == "category"
        assert BRAND.direct_parent.field == "sub_category_id"
        assert PRODUCT.direct_parent.field == "brand_id"

    def test_children_chain(self) -> None:
        """Each level owns the next one; products are leaves."""
        assert CATEGORY.children == ("sub_category",)
        assert SUB_CATEGORY.children == ("brand",)
        assert BRAND.children == ("product",)
        assert PRODUCT.children == ()

    def test_products_use_title_and_gallery(self) -> None:
        """Products are named by title and keep several images."""
        assert PRODUCT.name_field == "title"
        assert PRODUCT.multiple_assets is True
        assert CATEGORY.multiple_assets is False


class TestFolderPath:
    """Tests for folder_path."""

    def test_category_folder(self) -> None:
        """A category sits directly under the uploads root."""
        assert folder_path("Uploads", [(CATEGORY, "ab12")]) == "Uploads/Categories/ab12"

    def test_product_folder(self) -> None:
        """A product folder nests under its whole ancestry."""
        path = folder_path(
            "Uploads",
            [(CATEGORY, "c1"), (SUB_CATEGORY, "s1"), (BRAND, "b1"), (PRODUCT, "p1")],
        )
        assert path == "Uploads/Categories/c1/SubCategories/s1/Brands/b1/Products/p1"

    def test_empty_root(self) -> None:
        """An empty root yields a relative path."""
        assert folder_path("", [(CATEGORY, "ab12")]) == "Categories/ab12"
