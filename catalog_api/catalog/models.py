"""SQLAlchemy models for the catalog tree.

Defines Category, SubCategory, Brand and Product tables. Parent links are
plain indexed id columns without foreign-key cascades: records behave like
documents and descendant cleanup is done explicitly by the catalog service.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from catalog_api.infrastructure.database import Base


def _uuid() -> str:
    return str(uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Creation and modification timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_now,
        onupdate=_now,
    )


class Category(TimestampMixin, Base):
    """Root of the catalog tree.

    Attributes:
        id: Primary key (UUID string).
        name: Display name.
        slug: URL-safe token derived from the name.
        image: Stored asset descriptor ``{"url", "asset_id"}``.
        short_id: Random token naming the asset folder.
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(250), nullable=False, index=True)
    image: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    short_id: Mapped[str] = mapped_column(String(32), nullable=False)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"


class SubCategory(TimestampMixin, Base):
    """Second level of the catalog tree."""

    __tablename__ = "sub_categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(250), nullable=False, index=True)
    image: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    short_id: Mapped[str] = mapped_column(String(32), nullable=False)
    category_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<SubCategory(id={self.id}, name={self.name})>"


class Brand(TimestampMixin, Base):
    """Third level of the catalog tree."""

    __tablename__ = "brands"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(250), nullable=False, index=True)
    image: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    short_id: Mapped[str] = mapped_column(String(32), nullable=False)
    category_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    sub_category_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Brand(id={self.id}, name={self.name})>"


class Product(TimestampMixin, Base):
    """Leaf of the catalog tree.

    Attributes:
        id: Primary key (UUID string).
        title: Product title.
        slug: URL-safe token derived from the title.
        overview: Free-text description.
        specifications: Structured key/value specifications.
        badge: Optional merchandising badge.
        price: List price.
        discount_kind: "Percentage" or "Fixed".
        discount_amount: Discount amount in the unit implied by the kind.
        price_after_discount: Derived from price and discount, never set directly.
        stock: Units available.
        rating: Average rating (0-5).
        images: Ordered gallery of ``{"url", "asset_id"}`` descriptors.
        short_id: Random token naming the asset folder.
        created_by: Optional id of the user who created the product.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(550), nullable=False, index=True)
    overview: Mapped[str | None] = mapped_column(Text, nullable=True)
    specifications: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    badge: Mapped[str | None] = mapped_column(String(32), nullable=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    discount_kind: Mapped[str] = mapped_column(String(32), nullable=False, default="Percentage")
    discount_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    price_after_discount: Mapped[float] = mapped_column(Float, nullable=False)
    stock: Mapped[int] = mapped_column(Integer, nullable=False)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    images: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    short_id: Mapped[str] = mapped_column(String(32), nullable=False)
    category_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    sub_category_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    brand_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, title={self.title[:30]})>"
