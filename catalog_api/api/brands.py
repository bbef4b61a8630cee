"""Brand API endpoints."""

from typing import Annotated

from fastapi import Depends, File, Form, Query, UploadFile, status

from catalog_api.api.deps import get_catalog_service, read_upload
from catalog_api.api.resources import ERROR_RESPONSES, build_named_router
from catalog_api.api.schemas import BrandResponse, DataResponse
from catalog_api.catalog.kinds import BRAND
from catalog_api.catalog.service import CatalogService

router = build_named_router(BRAND, BrandResponse, "/api/brands", "Brands")


@router.post(
    "",
    response_model=DataResponse[BrandResponse],
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Create brand",
)
async def create_brand(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    category_id: Annotated[str, Query()],
    sub_category_id: Annotated[str, Query()],
    name: Annotated[str, Form(min_length=1)],
    image: Annotated[UploadFile | None, File()] = None,
) -> DataResponse[BrandResponse]:
    """Create a brand under a sub-category of the given category.

    The sub-category must belong to the category, otherwise the request
    is rejected with INCONSISTENT_HIERARCHY.
    """
    file = await read_upload(image)
    brand = await service.create(
        BRAND,
        {"name": name},
        files=[file] if file else [],
        parent_ids={"category_id": category_id, "sub_category_id": sub_category_id},
    )
    return DataResponse[BrandResponse](
        message="Brand created successfully",
        data=BrandResponse.model_validate(brand),
    )
