"""Catalog service.

High-level service that combines repository operations with the rules of
the catalog tree: parent validation, slugs, duplicate names, asset upload
and cleanup, product pricing and cascading deletes.
"""

import json
from collections import Counter
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.catalog.identifiers import make_short_id, make_slug
from catalog_api.catalog.kinds import KINDS, PRODUCT, EntityKind, folder_path
from catalog_api.catalog.pricing import DiscountKind, price_after_discount
from catalog_api.catalog.repository import CatalogRepository
from catalog_api.domain.exceptions import (
    CatalogError,
    DuplicateName,
    EntityNotFound,
    InconsistentHierarchy,
    InvalidIdentifier,
    InvalidSpecifications,
    MissingAsset,
    ParentNotFound,
    UpstreamFailure,
    ValidationFailed,
)
from catalog_api.infrastructure.config import settings
from catalog_api.infrastructure.media_store import AssetFile, MediaStore

logger = structlog.get_logger()

PRICING_FIELDS = ("price", "discount_kind", "discount_amount")
PRODUCT_PLAIN_FIELDS = ("overview", "badge", "stock", "rating")


@dataclass
class CascadeReport:
    """Outcome of the descendant cleanup after a delete.

    Attributes:
        deleted: Number of descendants removed, per kind key.
        failures: Descendants whose cleanup failed, with the reason.
    """

    deleted: Counter = field(default_factory=Counter)
    failures: list[dict[str, str]] = field(default_factory=list)


@dataclass
class DeleteResult:
    """Result of deleting an entity."""

    entity: Any
    cascade: CascadeReport


def _is_uuid(value: str) -> bool:
    try:
        UUID(value)
    except (ValueError, TypeError, AttributeError):
        return False
    return True


def _require_text(field_name: str, value: Any) -> str:
    if value is None or not str(value).strip():
        raise ValidationFailed(
            f"{field_name} is required",
            details={"field": field_name},
        )
    return str(value).strip()


def _slug_for(field_name: str, name: str) -> str:
    slug = make_slug(name)
    if not slug:
        raise ValidationFailed(
            f"{field_name} must contain letters or digits",
            details={"field": field_name, "value": name},
        )
    return slug


def parse_specifications(raw: Any) -> dict[str, Any]:
    """Parse a free-form specifications payload into a mapping.

    Accepts a mapping as-is or a JSON object encoded as a string.

    Raises:
        InvalidSpecifications: If the payload is not a JSON object.
    """
    if raw is None or raw == "":
        return {}
    if isinstance(raw, dict):
        return raw
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise InvalidSpecifications(str(e)) from e
    if not isinstance(parsed, dict):
        raise InvalidSpecifications("expected a JSON object")
    return parsed


def _validate_discount(price: float, kind: str, amount: float) -> None:
    if amount < 0:
        raise ValidationFailed(
            "Discount amount cannot be negative",
            details={"discount_amount": amount},
        )
    if kind == DiscountKind.PERCENTAGE.value and amount > 100:
        raise ValidationFailed(
            "Percentage discount cannot exceed 100",
            details={"discount_amount": amount},
        )
    if kind == DiscountKind.FIXED.value and amount > price:
        raise ValidationFailed(
            "Fixed discount cannot exceed the price",
            details={"price": price, "discount_amount": amount},
        )


def child_folder(parent_folder: str, kind: EntityKind, short_id: str) -> str:
    """Folder of an entity whose parent's folder is already known."""
    return f"{parent_folder}/{kind.folder}/{short_id}"


class CatalogService:
    """Service for catalog operations.

    One instance handles every entity kind; callers pass the
    ``EntityKind`` they work with.

    Example usage:
        async with async_session_factory() as session:
            service = CatalogService(session, get_media_store())
            category = await service.create(
                CATEGORY,
                {"name": "Electronics"},
                files=[AssetFile(content=b"...", filename="cover.png")],
            )
            await session.commit()
    """

    def __init__(
        self,
        session: AsyncSession,
        media_store: MediaStore,
        repository: CatalogRepository | None = None,
        uploads_root: str | None = None,
    ) -> None:
        """Initialize service.

        Args:
            session: Async SQLAlchemy session.
            media_store: Asset host client.
            repository: Catalog repository. Built from the session if omitted.
            uploads_root: Top-level asset folder.
        """
        self.session = session
        self.media_store = media_store
        self.repository = repository or CatalogRepository(session)
        self.uploads_root = settings.uploads_root if uploads_root is None else uploads_root

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def find_many(
        self,
        kind: EntityKind,
        entity_id: str | None = None,
        name: str | None = None,
        slug: str | None = None,
    ) -> list[Any]:
        """Find entities matching every supplied filter.

        Args:
            kind: Entity kind.
            entity_id: Exact id.
            name: Exact name (title for products).
            slug: Exact slug.

        Returns:
            Matching entities; empty when nothing matches.

        Raises:
            InvalidIdentifier: If ``entity_id`` is not a UUID.
        """
        if entity_id is not None and not _is_uuid(entity_id):
            raise InvalidIdentifier(entity_id)

        filters = {"id": entity_id, kind.name_field: name, "slug": slug}
        return list(await self.repository.find_all(kind, filters))

    async def find_by_id(self, kind: EntityKind, entity_id: str) -> Any:
        """Get one entity.

        Raises:
            EntityNotFound: If the id does not resolve.
        """
        entity = None
        if _is_uuid(entity_id):
            entity = await self.repository.get_by_id(kind, entity_id)
        if entity is None:
            raise EntityNotFound(kind.label, entity_id)
        return entity

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create(
        self,
        kind: EntityKind,
        fields: dict[str, Any],
        files: list[AssetFile],
        parent_ids: dict[str, str | None] | None = None,
        created_by: str | None = None,
    ) -> Any:
        """Create an entity under its parents.

        Args:
            kind: Entity kind.
            fields: Submitted attributes (name or title, product fields).
            files: Uploaded images, in gallery order.
            parent_ids: Parent id per reference field (``category_id`` ...).
            created_by: Optional id of the creating user (products only).

        Returns:
            The persisted entity.

        Raises:
            ValidationFailed: Missing name, asset or malformed product data.
            ParentNotFound: A parent id does not resolve.
            InconsistentHierarchy: Parent ids belong to different branches.
            DuplicateName: The name is already taken within the kind.
            AssetUploadFailed: The media store rejected an upload.
        """
        parent_ids = parent_ids or {}
        parents = await self._resolve_parents(kind, parent_ids)

        name = _require_text(kind.name_field, fields.get(kind.name_field))
        slug = _slug_for(kind.name_field, name)
        await self._ensure_unique_name(kind, name)

        if not files:
            raise MissingAsset(kind.label)

        attributes: dict[str, Any] = {
            kind.name_field: name,
            "slug": slug,
        }
        for link in kind.parents:
            attributes[link.field] = parents[link.kind_key].id
        if kind is PRODUCT:
            attributes.update(self._product_attributes(fields))
            attributes["created_by"] = created_by

        short_id = make_short_id()
        folder = folder_path(
            self.uploads_root,
            [(KINDS[link.kind_key], parents[link.kind_key].short_id) for link in kind.parents]
            + [(kind, short_id)],
        )

        uploaded = []
        try:
            for file in files if kind.multiple_assets else files[:1]:
                stored = await self.media_store.upload(file, folder)
                uploaded.append(stored.to_dict())

            if kind.multiple_assets:
                attributes["images"] = uploaded
            else:
                attributes["image"] = uploaded[0]

            entity = await self.repository.add(kind.model(short_id=short_id, **attributes))
        except Exception:
            if uploaded:
                await self._discard_folder(folder)
            raise

        logger.info(
            "Catalog entity created",
            kind=kind.key,
            id=entity.id,
            short_id=short_id,
            assets=len(uploaded),
        )
        return entity

    async def _resolve_parents(
        self,
        kind: EntityKind,
        parent_ids: dict[str, str | None],
    ) -> dict[str, Any]:
        parents: dict[str, Any] = {}
        for link in kind.parents:
            parent_kind = KINDS[link.kind_key]
            parent_id = _require_text(link.field, parent_ids.get(link.field))

            parent = None
            if _is_uuid(parent_id):
                parent = await self.repository.get_by_id(parent_kind, parent_id)
            if parent is None:
                raise ParentNotFound(parent_kind.label, parent_id)
            parents[link.kind_key] = parent

        # Each resolved parent must point at the ancestors supplied with it
        for link in kind.parents:
            parent_kind = KINDS[link.kind_key]
            parent = parents[link.kind_key]
            for ancestor_link in parent_kind.parents:
                expected = parents[ancestor_link.kind_key].id
                actual = getattr(parent, ancestor_link.field)
                if actual != expected:
                    raise InconsistentHierarchy(
                        child_kind=parent_kind.label,
                        child_id=parent.id,
                        parent_kind=KINDS[ancestor_link.kind_key].label,
                        expected_parent_id=expected,
                        actual_parent_id=actual,
                    )
        return parents

    async def _ensure_unique_name(
        self,
        kind: EntityKind,
        name: str,
        exclude_id: str | None = None,
    ) -> None:
        existing = await self.repository.find_by_name(kind, name, exclude_id=exclude_id)
        if existing is not None:
            raise DuplicateName(kind.label, name)

    def _product_attributes(self, fields: dict[str, Any]) -> dict[str, Any]:
        price = fields.get("price")
        if price is None:
            raise ValidationFailed("price is required", details={"field": "price"})
        if fields.get("stock") is None:
            raise ValidationFailed("stock is required", details={"field": "stock"})

        kind = fields.get("discount_kind") or DiscountKind.PERCENTAGE.value
        amount = fields.get("discount_amount") or 0.0
        _validate_discount(price, kind, amount)

        return {
            "overview": fields.get("overview"),
            "specifications": parse_specifications(fields.get("specifications")),
            "badge": fields.get("badge"),
            "price": price,
            "discount_kind": kind,
            "discount_amount": amount,
            "price_after_discount": price_after_discount(price, kind, amount),
            "stock": fields["stock"],
            "rating": fields.get("rating") or 0.0,
        }

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    async def update(
        self,
        kind: EntityKind,
        entity_id: str,
        fields: dict[str, Any],
        file: AssetFile | None = None,
        asset_id: str | None = None,
    ) -> Any:
        """Apply a partial update.

        Only keys present in ``fields`` change. A new name regenerates the
        slug; any pricing field recomputes the discounted price from the
        merged values; a file overwrites an existing asset in place.

        Args:
            kind: Entity kind.
            entity_id: Target id.
            fields: Attributes to change.
            file: Replacement image.
            asset_id: Gallery image to replace (products); defaults to the first.

        Returns:
            The updated entity.
        """
        entity = await self.find_by_id(kind, entity_id)

        if kind.name_field in fields:
            name = _require_text(kind.name_field, fields[kind.name_field])
            slug = _slug_for(kind.name_field, name)
            await self._ensure_unique_name(kind, name, exclude_id=entity.id)
            setattr(entity, kind.name_field, name)
            entity.slug = slug

        if kind is PRODUCT:
            self._apply_product_changes(entity, fields)

        if file is not None:
            await self._replace_asset(kind, entity, file, asset_id)

        entity = await self.repository.save(entity)
        logger.info(
            "Catalog entity updated",
            kind=kind.key,
            id=entity.id,
            fields=sorted(fields),
            asset_replaced=file is not None,
        )
        return entity

    def _apply_product_changes(self, product: Any, fields: dict[str, Any]) -> None:
        for name in PRODUCT_PLAIN_FIELDS:
            if name in fields:
                setattr(product, name, fields[name])

        if "specifications" in fields:
            product.specifications = parse_specifications(fields["specifications"])

        if any(name in fields for name in PRICING_FIELDS):
            price = fields.get("price", product.price)
            kind = fields.get("discount_kind", product.discount_kind)
            amount = fields.get("discount_amount", product.discount_amount)
            _validate_discount(price, kind, amount)

            product.price = price
            product.discount_kind = kind
            product.discount_amount = amount
            product.price_after_discount = price_after_discount(price, kind, amount)

    async def _replace_asset(
        self,
        kind: EntityKind,
        entity: Any,
        file: AssetFile,
        asset_id: str | None,
    ) -> None:
        if kind.multiple_assets:
            images = [dict(image) for image in entity.images]
            if not images:
                raise ValidationFailed("Product has no image to replace")
            if asset_id is None:
                index = 0
            else:
                matches = [i for i, image in enumerate(images) if image["asset_id"] == asset_id]
                if not matches:
                    raise ValidationFailed(
                        "Unknown asset_id",
                        details={"asset_id": asset_id},
                    )
                index = matches[0]
            target = images[index]["asset_id"]
        else:
            target = entity.image["asset_id"]

        folder = target.rsplit("/", 1)[0]
        stored = await self.media_store.upload(file, folder, asset_id=target)

        # JSON columns only track reassignment, not in-place mutation
        if kind.multiple_assets:
            images[index] = stored.to_dict()
            entity.images = images
        else:
            entity.image = stored.to_dict()

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete(self, kind: EntityKind, entity_id: str) -> DeleteResult:
        """Delete an entity, its assets and all of its descendants.

        The entity itself is removed strictly: a failure to delete its own
        assets propagates. Descendant cleanup is best-effort; failures are
        logged and reported in the result.

        Returns:
            The entity as it was before deletion plus the cascade report.

        Raises:
            EntityNotFound: If the id does not resolve.
        """
        entity = await self.find_by_id(kind, entity_id)
        folder = await self._folder_of(kind, entity)

        deleted = await self.repository.delete_by_id(kind, entity.id)
        if not deleted:
            raise EntityNotFound(kind.label, entity_id)
        await self._delete_assets(folder)

        report = CascadeReport()
        await self._cascade(kind, entity, folder, report)

        logger.info(
            "Catalog entity deleted",
            kind=kind.key,
            id=entity.id,
            cascaded=dict(report.deleted),
            cascade_failures=len(report.failures),
        )
        return DeleteResult(entity=entity, cascade=report)

    async def _cascade(
        self,
        kind: EntityKind,
        entity: Any,
        folder: str,
        report: CascadeReport,
    ) -> None:
        for child_key in kind.children:
            child_kind = KINDS[child_key]
            filters = {child_kind.direct_parent.field: entity.id}
            for link in kind.parents:
                filters[link.field] = getattr(entity, link.field)

            for child in await self.repository.find_all(child_kind, filters):
                child_path = child_folder(folder, child_kind, child.short_id)
                if await self.repository.delete_by_id(child_kind, child.id):
                    report.deleted[child_kind.key] += 1
                try:
                    await self._delete_assets(child_path)
                except UpstreamFailure as e:
                    logger.warning(
                        "Cascade asset cleanup failed",
                        kind=child_kind.key,
                        id=child.id,
                        folder=child_path,
                        error=e.message,
                    )
                    report.failures.append(
                        {"kind": child_kind.key, "id": child.id, "reason": e.message}
                    )
                await self._cascade(child_kind, child, child_path, report)

    async def _folder_of(self, kind: EntityKind, entity: Any) -> str:
        segments = []
        for link in kind.parents:
            parent_kind = KINDS[link.kind_key]
            parent = await self.repository.get_by_id(parent_kind, getattr(entity, link.field))
            if parent is None:
                # Orphaned record; fall back to where its assets actually live
                return self._asset_folder(kind, entity)
            segments.append((parent_kind, parent.short_id))
        segments.append((kind, entity.short_id))
        return folder_path(self.uploads_root, segments)

    def _asset_folder(self, kind: EntityKind, entity: Any) -> str:
        assets = entity.images if kind.multiple_assets else [entity.image]
        if not assets:
            return folder_path(self.uploads_root, [(kind, entity.short_id)])
        return assets[0]["asset_id"].rsplit("/", 1)[0]

    async def _delete_assets(self, folder: str) -> None:
        await self.media_store.delete_prefix(folder)
        await self.media_store.delete_folder(folder)

    async def _discard_folder(self, folder: str) -> None:
        try:
            await self._delete_assets(folder)
        except CatalogError as e:
            logger.error(
                "Failed to discard uploaded assets",
                folder=folder,
                error=e.message,
            )
        else:
            logger.info("Discarded uploaded assets", folder=folder)
