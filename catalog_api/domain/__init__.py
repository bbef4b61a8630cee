"""Domain layer - catalog errors.

Example usage:
    from catalog_api.domain import EntityNotFound

    raise EntityNotFound("Brand", brand_id)
"""

from catalog_api.domain.exceptions import (
    AssetDeleteFailed,
    AssetUploadFailed,
    CatalogError,
    Conflict,
    DuplicateName,
    EntityNotFound,
    InconsistentHierarchy,
    InvalidAsset,
    InvalidIdentifier,
    InvalidSpecifications,
    MissingAsset,
    NotFound,
    ParentNotFound,
    UpstreamFailure,
    ValidationFailed,
)

__all__ = [
    "AssetDeleteFailed",
    "AssetUploadFailed",
    "CatalogError",
    "Conflict",
    "DuplicateName",
    "EntityNotFound",
    "InconsistentHierarchy",
    "InvalidAsset",
    "InvalidIdentifier",
    "InvalidSpecifications",
    "MissingAsset",
    "NotFound",
    "ParentNotFound",
    "UpstreamFailure",
    "ValidationFailed",
]
