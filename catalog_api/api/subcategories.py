"""SubCategory API endpoints."""

from typing import Annotated

from fastapi import Depends, File, Form, Query, UploadFile, status

from catalog_api.api.deps import get_catalog_service, read_upload
from catalog_api.api.resources import ERROR_RESPONSES, build_named_router
from catalog_api.api.schemas import DataResponse, SubCategoryResponse
from catalog_api.catalog.kinds import SUB_CATEGORY
from catalog_api.catalog.service import CatalogService

router = build_named_router(
    SUB_CATEGORY, SubCategoryResponse, "/api/subcategories", "SubCategories"
)


@router.post(
    "",
    response_model=DataResponse[SubCategoryResponse],
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Create sub-category",
)
async def create_sub_category(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    category_id: Annotated[str, Query()],
    name: Annotated[str, Form(min_length=1)],
    image: Annotated[UploadFile | None, File()] = None,
) -> DataResponse[SubCategoryResponse]:
    """Create a sub-category under an existing category."""
    file = await read_upload(image)
    sub_category = await service.create(
        SUB_CATEGORY,
        {"name": name},
        files=[file] if file else [],
        parent_ids={"category_id": category_id},
    )
    return DataResponse[SubCategoryResponse](
        message="SubCategory created successfully",
        data=SubCategoryResponse.model_validate(sub_category),
    )
