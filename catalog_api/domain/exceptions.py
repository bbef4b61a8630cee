"""Domain exceptions.

All catalog errors that represent rule violations or failed collaborators.
Each error carries the HTTP status and machine-readable code the API layer
uses to build the response envelope.
"""

from typing import Any


class CatalogError(Exception):
    """Base class for all catalog exceptions.

    All catalog errors should inherit from this class to allow
    catching them in one place at the API boundary.
    """

    status_code: int = 500
    error_code: str = "CATALOG_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize catalog error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationFailed(CatalogError):
    """Raised when a request is missing data or carries malformed data."""

    status_code = 400
    error_code = "VALIDATION_FAILED"


class MissingAsset(ValidationFailed):
    """Raised when an entity that carries images is created without one."""

    error_code = "MISSING_ASSET"

    def __init__(self, kind: str) -> None:
        super().__init__(
            "Please upload an image",
            details={"kind": kind},
        )


class InvalidAsset(ValidationFailed):
    """Raised when an uploaded file is not an accepted image type."""

    error_code = "INVALID_ASSET"

    def __init__(self, filename: str, allowed: list[str]) -> None:
        super().__init__(
            f"Unsupported file type: {filename}. Allowed: {', '.join(allowed)}",
            details={"filename": filename, "allowed": allowed},
        )


class InvalidSpecifications(ValidationFailed):
    """Raised when the product specifications payload cannot be parsed."""

    error_code = "INVALID_SPECIFICATIONS"

    def __init__(self, reason: str) -> None:
        super().__init__(
            f"Invalid specifications: {reason}",
            details={"reason": reason},
        )


class InvalidIdentifier(ValidationFailed):
    """Raised when an id used in a filter is not well formed."""

    error_code = "INVALID_IDENTIFIER"

    def __init__(self, value: str) -> None:
        super().__init__(
            f"Malformed id: {value!r}",
            details={"id": value},
        )


class InconsistentHierarchy(ValidationFailed):
    """Raised when supplied parent ids do not form one branch of the tree.

    For example, a brand whose sub-category belongs to a different
    category than the one supplied alongside it.
    """

    error_code = "INCONSISTENT_HIERARCHY"

    def __init__(
        self,
        child_kind: str,
        child_id: str,
        parent_kind: str,
        expected_parent_id: str,
        actual_parent_id: str,
    ) -> None:
        """Initialize inconsistent hierarchy error.

        Args:
            child_kind: Kind of the resolved parent whose own reference is checked.
            child_id: ID of that parent.
            parent_kind: Kind of the ancestor it should point to.
            expected_parent_id: Ancestor id supplied by the caller.
            actual_parent_id: Ancestor id stored on the resolved parent.
        """
        super().__init__(
            f"{child_kind} {child_id} does not belong to {parent_kind} {expected_parent_id}",
            details={
                "child_kind": child_kind,
                "child_id": child_id,
                "parent_kind": parent_kind,
                "expected_parent_id": expected_parent_id,
                "actual_parent_id": actual_parent_id,
            },
        )


# ============================================================================
# Lookup Errors
# ============================================================================


class NotFound(CatalogError):
    """Base class for lookups that resolved to nothing."""

    status_code = 404
    error_code = "NOT_FOUND"


class EntityNotFound(NotFound):
    """Raised when the target entity of an operation does not exist."""

    error_code = "ENTITY_NOT_FOUND"

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(
            f"{kind} not found",
            details={"kind": kind, "id": entity_id},
        )


class ParentNotFound(NotFound):
    """Raised when a declared parent reference does not resolve."""

    error_code = "PARENT_NOT_FOUND"

    def __init__(self, parent_kind: str, parent_id: str) -> None:
        super().__init__(
            f"{parent_kind} not found",
            details={"parent_kind": parent_kind, "parent_id": parent_id},
        )


# ============================================================================
# Conflict Errors
# ============================================================================


class Conflict(CatalogError):
    """Base class for writes that clash with existing state."""

    status_code = 409
    error_code = "CONFLICT"


class DuplicateName(Conflict):
    """Raised when another entity of the same kind already has the name."""

    error_code = "DUPLICATE_NAME"

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(
            "This name already exists",
            details={"kind": kind, "name": name},
        )


# ============================================================================
# Upstream Errors
# ============================================================================


class UpstreamFailure(CatalogError):
    """Base class for failures of the media store."""

    status_code = 502
    error_code = "UPSTREAM_FAILURE"


class AssetUploadFailed(UpstreamFailure):
    """Raised when an asset cannot be stored."""

    error_code = "ASSET_UPLOAD_FAILED"

    def __init__(self, folder: str, reason: str) -> None:
        super().__init__(
            f"Failed to upload asset to {folder}",
            details={"folder": folder, "reason": reason},
        )


class AssetDeleteFailed(UpstreamFailure):
    """Raised when stored assets cannot be removed."""

    error_code = "ASSET_DELETE_FAILED"

    def __init__(self, folder: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete assets under {folder}",
            details={"folder": folder, "reason": reason},
        )
