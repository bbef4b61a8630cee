"""Entity-kind metadata for the catalog tree.

One generic service handles all four entity kinds; what differs between
them (parents, the name field, asset cardinality, folder naming) lives here.
"""

from dataclasses import dataclass, field

from catalog_api.catalog.models import Brand, Category, Product, SubCategory
from catalog_api.infrastructure.database import Base


@dataclass(frozen=True)
class ParentLink:
    """A reference from an entity to one of its ancestors.

    Attributes:
        kind_key: Key of the ancestor kind in ``KINDS``.
        field: Attribute on the child holding the ancestor id.
    """

    kind_key: str
    field: str


@dataclass(frozen=True)
class EntityKind:
    """Describes how one entity kind fits in the tree.

    Attributes:
        key: Registry key.
        label: Human readable name used in messages.
        model: SQLAlchemy model class.
        folder: Asset folder segment for this level.
        name_field: Attribute holding the display name (slug source).
        parents: Ancestor links, root first.
        multiple_assets: Whether the kind keeps an image gallery.
        children: Keys of kinds removed when this one is deleted.
    """

    key: str
    label: str
    model: type[Base]
    folder: str
    name_field: str = "name"
    parents: tuple[ParentLink, ...] = ()
    multiple_assets: bool = False
    children: tuple[str, ...] = field(default_factory=tuple)

    @property
    def direct_parent(self) -> ParentLink | None:
        return self.parents[-1] if self.parents else None


CATEGORY = EntityKind(
    key="category",
    label="Category",
    model=Category,
    folder="Categories",
    children=("sub_category",),
)

SUB_CATEGORY = EntityKind(
    key="sub_category",
    label="SubCategory",
    model=SubCategory,
    folder="SubCategories",
    parents=(ParentLink("category", "category_id"),),
    children=("brand",),
)

BRAND = EntityKind(
    key="brand",
    label="Brand",
    model=Brand,
    folder="Brands",
    parents=(
        ParentLink("category", "category_id"),
        ParentLink("sub_category", "sub_category_id"),
    ),
    children=("product",),
)

PRODUCT = EntityKind(
    key="product",
    label="Product",
    model=Product,
    folder="Products",
    name_field="title",
    parents=(
        ParentLink("category", "category_id"),
        ParentLink("sub_category", "sub_category_id"),
        ParentLink("brand", "brand_id"),
    ),
    multiple_assets=True,
)

KINDS: dict[str, EntityKind] = {
    kind.key: kind for kind in (CATEGORY, SUB_CATEGORY, BRAND, PRODUCT)
}


def folder_path(root: str, segments: list[tuple[EntityKind, str]]) -> str:
    """Build an asset folder path from (kind, short_id) pairs, root first.

    Example:
        >>> folder_path("Uploads", [(CATEGORY, "ab12"), (SUB_CATEGORY, "cd34")])
        'Uploads/Categories/ab12/SubCategories/cd34'
    """
    parts = [root.strip("/")] if root.strip("/") else []
    for kind, short_id in segments:
        parts.extend([kind.folder, short_id])
    return "/".join(parts)
