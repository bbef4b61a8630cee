"""Product API endpoints.

Products differ from the named resources: they carry a title, pricing,
structured specifications and an image gallery, and hang below all three
upper levels of the catalog tree.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status

from catalog_api.api.deps import get_catalog_service, get_created_by, read_upload, read_uploads
from catalog_api.api.resources import ERROR_RESPONSES
from catalog_api.api.schemas import (
    DataResponse,
    ListResponse,
    ProductResponse,
    product_to_response,
)
from catalog_api.catalog.kinds import PRODUCT
from catalog_api.catalog.pricing import Badge, DiscountKind
from catalog_api.catalog.service import CatalogService

router = APIRouter(prefix="/api/products", tags=["Products"])

MIN_PRICE = 50
MIN_STOCK = 10


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ListResponse[ProductResponse],
    responses=ERROR_RESPONSES,
    summary="List products",
    description="Filter by any combination of id, title and slug.",
)
async def list_products(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    id: Annotated[str | None, Query()] = None,
    title: Annotated[str | None, Query()] = None,
    slug: Annotated[str | None, Query()] = None,
) -> ListResponse[ProductResponse]:
    """List products matching every supplied filter."""
    products = await service.find_many(PRODUCT, entity_id=id, name=title, slug=slug)
    return ListResponse[ProductResponse](
        message="Products found",
        results=len(products),
        data=[product_to_response(p) for p in products],
    )


@router.get(
    "/{product_id}",
    response_model=DataResponse[ProductResponse],
    responses=ERROR_RESPONSES,
    summary="Get product",
)
async def get_product(
    product_id: str,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> DataResponse[ProductResponse]:
    """Get a product by ID."""
    product = await service.find_by_id(PRODUCT, product_id)
    return DataResponse[ProductResponse](
        message="Product found",
        data=product_to_response(product),
    )


@router.post(
    "",
    response_model=DataResponse[ProductResponse],
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Create product",
)
async def create_product(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    created_by: Annotated[str | None, Depends(get_created_by)],
    category_id: Annotated[str, Query()],
    sub_category_id: Annotated[str, Query()],
    brand_id: Annotated[str, Query()],
    title: Annotated[str, Form(min_length=1)],
    price: Annotated[float, Form(ge=MIN_PRICE)],
    stock: Annotated[int, Form(ge=MIN_STOCK)],
    overview: Annotated[str | None, Form()] = None,
    specifications: Annotated[str | None, Form(description="JSON object")] = None,
    badge: Annotated[Badge | None, Form()] = None,
    discount_kind: Annotated[DiscountKind, Form()] = DiscountKind.PERCENTAGE,
    discount_amount: Annotated[float, Form(ge=0)] = 0.0,
    rating: Annotated[float, Form(ge=0, le=5)] = 0.0,
    images: Annotated[list[UploadFile] | None, File()] = None,
) -> DataResponse[ProductResponse]:
    """Create a product with its image gallery.

    The price after discount is computed server side. The brand must
    belong to the sub-category, and the sub-category to the category.
    """
    fields: dict[str, Any] = {
        "title": title,
        "price": price,
        "stock": stock,
        "overview": overview,
        "specifications": specifications,
        "badge": badge.value if badge else None,
        "discount_kind": discount_kind.value,
        "discount_amount": discount_amount,
        "rating": rating,
    }
    product = await service.create(
        PRODUCT,
        fields,
        files=await read_uploads(images),
        parent_ids={
            "category_id": category_id,
            "sub_category_id": sub_category_id,
            "brand_id": brand_id,
        },
        created_by=created_by,
    )
    return DataResponse[ProductResponse](
        message="Product created successfully",
        data=product_to_response(product),
    )


@router.put(
    "/{product_id}",
    response_model=DataResponse[ProductResponse],
    responses=ERROR_RESPONSES,
    summary="Update product",
    description="All fields are optional. Any pricing field recomputes the price after discount.",
)
async def update_product(
    product_id: str,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    title: Annotated[str | None, Form()] = None,
    price: Annotated[float | None, Form(ge=MIN_PRICE)] = None,
    stock: Annotated[int | None, Form(ge=MIN_STOCK)] = None,
    overview: Annotated[str | None, Form()] = None,
    specifications: Annotated[str | None, Form(description="JSON object")] = None,
    badge: Annotated[Badge | None, Form()] = None,
    discount_kind: Annotated[DiscountKind | None, Form()] = None,
    discount_amount: Annotated[float | None, Form(ge=0)] = None,
    rating: Annotated[float | None, Form(ge=0, le=5)] = None,
    asset_id: Annotated[str | None, Form(description="Gallery image to replace")] = None,
    image: Annotated[UploadFile | None, File()] = None,
) -> DataResponse[ProductResponse]:
    """Partially update a product."""
    submitted: dict[str, Any] = {
        "title": title,
        "price": price,
        "stock": stock,
        "overview": overview,
        "specifications": specifications,
        "badge": badge.value if badge else None,
        "discount_kind": discount_kind.value if discount_kind else None,
        "discount_amount": discount_amount,
        "rating": rating,
    }
    # Untouched form fields arrive as empty strings
    fields = {key: value for key, value in submitted.items() if value not in (None, "")}

    product = await service.update(
        PRODUCT,
        product_id,
        fields,
        file=await read_upload(image),
        asset_id=asset_id or None,
    )
    return DataResponse[ProductResponse](
        message="Product updated successfully",
        data=product_to_response(product),
    )


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=ERROR_RESPONSES,
    summary="Delete product",
    description="Also deletes the product's image gallery.",
)
async def delete_product(
    product_id: str,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> Response:
    """Delete a product and its images."""
    await service.delete(PRODUCT, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
