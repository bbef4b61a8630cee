"""Category API endpoints."""

from typing import Annotated

from fastapi import Depends, File, Form, UploadFile, status

from catalog_api.api.deps import get_catalog_service, read_upload
from catalog_api.api.resources import ERROR_RESPONSES, build_named_router
from catalog_api.api.schemas import CategoryResponse, DataResponse
from catalog_api.catalog.kinds import CATEGORY
from catalog_api.catalog.service import CatalogService

router = build_named_router(CATEGORY, CategoryResponse, "/api/categories", "Categories")


@router.post(
    "",
    response_model=DataResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Create category",
)
async def create_category(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    name: Annotated[str, Form(min_length=1)],
    image: Annotated[UploadFile | None, File()] = None,
) -> DataResponse[CategoryResponse]:
    """Create a root category with its cover image."""
    file = await read_upload(image)
    category = await service.create(
        CATEGORY,
        {"name": name},
        files=[file] if file else [],
    )
    return DataResponse[CategoryResponse](
        message="Category created successfully",
        data=CategoryResponse.model_validate(category),
    )
