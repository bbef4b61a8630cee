"""API schemas for the Catalog API.

Pydantic models for response serialization and the uniform envelope.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


# ============================================================================
# Envelope
# ============================================================================


class EnvelopeStatus(str, Enum):
    """Outcome reported in every response."""

    SUCCESS = "success"
    FAIL = "fail"
    ERROR = "error"


class DataResponse(BaseModel, Generic[T]):
    """Envelope for a single entity."""

    status: EnvelopeStatus = EnvelopeStatus.SUCCESS
    message: str
    data: T


class ListResponse(BaseModel, Generic[T]):
    """Envelope for a list of entities."""

    status: EnvelopeStatus = EnvelopeStatus.SUCCESS
    message: str
    results: int = Field(..., description="Number of items in data")
    data: list[T]


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    status: EnvelopeStatus = Field(..., description="fail for 4xx, error for 5xx")
    message: str = Field(..., description="Human-readable error message")
    error_code: str = Field(..., description="Machine-readable error code")
    details: Any = Field(default_factory=dict, description="Additional error context")
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


def envelope_status(status_code: int) -> EnvelopeStatus:
    """Map an HTTP status code to the envelope status."""
    if status_code >= 500:
        return EnvelopeStatus.ERROR
    if status_code >= 400:
        return EnvelopeStatus.FAIL
    return EnvelopeStatus.SUCCESS


# ============================================================================
# Entity Schemas
# ============================================================================


class AssetSchema(BaseModel):
    """A stored image."""

    url: str
    asset_id: str


class EntityBase(BaseModel):
    """Fields shared by every catalog entity."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    short_id: str
    created_at: datetime
    updated_at: datetime


class CategoryResponse(EntityBase):
    """Category representation."""

    name: str
    image: AssetSchema


class SubCategoryResponse(EntityBase):
    """SubCategory representation."""

    name: str
    image: AssetSchema
    category_id: str


class BrandResponse(EntityBase):
    """Brand representation."""

    name: str
    image: AssetSchema
    category_id: str
    sub_category_id: str


class DiscountSchema(BaseModel):
    """Discount applied to a product."""

    kind: str
    amount: float


class ProductImagesSchema(BaseModel):
    """Product gallery and its folder token."""

    urls: list[AssetSchema]
    short_id: str


class ProductResponse(BaseModel):
    """Product representation."""

    id: str
    title: str
    slug: str
    overview: str | None = None
    specifications: dict[str, Any] = Field(default_factory=dict)
    badge: str | None = None
    price: float
    discount: DiscountSchema
    price_after_discount: float
    stock: int
    rating: float
    images: ProductImagesSchema
    category_id: str
    sub_category_id: str
    brand_id: str
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime


# ============================================================================
# Converters
# ============================================================================


def product_to_response(product: Any) -> ProductResponse:
    """Convert a Product model to its response schema."""
    return ProductResponse(
        id=product.id,
        title=product.title,
        slug=product.slug,
        overview=product.overview,
        specifications=product.specifications or {},
        badge=product.badge,
        price=product.price,
        discount=DiscountSchema(kind=product.discount_kind, amount=product.discount_amount),
        price_after_discount=product.price_after_discount,
        stock=product.stock,
        rating=product.rating,
        images=ProductImagesSchema(
            urls=[AssetSchema(**image) for image in product.images],
            short_id=product.short_id,
        ),
        category_id=product.category_id,
        sub_category_id=product.sub_category_id,
        brand_id=product.brand_id,
        created_by=product.created_by,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )
