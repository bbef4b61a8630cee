"""Router factory for the named catalog resources.

Categories, sub-categories and brands share their read, update and
delete endpoints; only creation differs (which parent ids it takes), so
each resource module adds its own POST to the router built here.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from pydantic import BaseModel

from catalog_api.api.deps import get_catalog_service, read_upload
from catalog_api.api.schemas import DataResponse, ErrorResponse, ListResponse
from catalog_api.catalog.kinds import EntityKind
from catalog_api.catalog.service import CatalogService

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


def build_named_router(
    kind: EntityKind,
    schema: type[BaseModel],
    prefix: str,
    plural: str,
) -> APIRouter:
    """Build the list/get/update/delete endpoints for a named entity kind.

    Args:
        kind: Entity kind served by the router.
        schema: Response schema of one entity.
        prefix: URL prefix (e.g. "/api/categories").
        plural: Plural label used in messages and tags.

    Returns:
        Router without a create endpoint.
    """
    router = APIRouter(prefix=prefix, tags=[plural])
    label = kind.label

    @router.get(
        "",
        response_model=ListResponse[schema],
        responses=ERROR_RESPONSES,
        summary=f"List {plural.lower()}",
        description="Filter by any combination of id, name and slug.",
    )
    async def list_entities(
        service: Annotated[CatalogService, Depends(get_catalog_service)],
        id: Annotated[str | None, Query()] = None,
        name: Annotated[str | None, Query()] = None,
        slug: Annotated[str | None, Query()] = None,
    ) -> ListResponse:
        entities = await service.find_many(kind, entity_id=id, name=name, slug=slug)
        return ListResponse[schema](
            message=f"{plural} found",
            results=len(entities),
            data=[schema.model_validate(entity) for entity in entities],
        )

    @router.get(
        "/{entity_id}",
        response_model=DataResponse[schema],
        responses=ERROR_RESPONSES,
        summary=f"Get {label.lower()}",
    )
    async def get_entity(
        entity_id: str,
        service: Annotated[CatalogService, Depends(get_catalog_service)],
    ) -> DataResponse:
        entity = await service.find_by_id(kind, entity_id)
        return DataResponse[schema](
            message=f"{label} found",
            data=schema.model_validate(entity),
        )

    @router.put(
        "/{entity_id}",
        response_model=DataResponse[schema],
        responses=ERROR_RESPONSES,
        summary=f"Update {label.lower()}",
        description="All fields are optional; the image replaces the stored one in place.",
    )
    async def update_entity(
        entity_id: str,
        service: Annotated[CatalogService, Depends(get_catalog_service)],
        name: Annotated[str | None, Form()] = None,
        image: Annotated[UploadFile | None, File()] = None,
    ) -> DataResponse:
        fields = {"name": name} if name else {}
        entity = await service.update(
            kind,
            entity_id,
            fields,
            file=await read_upload(image),
        )
        return DataResponse[schema](
            message=f"{label} updated successfully",
            data=schema.model_validate(entity),
        )

    @router.delete(
        "/{entity_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        responses=ERROR_RESPONSES,
        summary=f"Delete {label.lower()}",
        description="Also deletes stored images and every descendant entity.",
    )
    async def delete_entity(
        entity_id: str,
        service: Annotated[CatalogService, Depends(get_catalog_service)],
    ) -> Response:
        await service.delete(kind, entity_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
