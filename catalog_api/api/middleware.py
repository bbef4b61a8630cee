"""API middleware for the Catalog API.

Provides:
- Request ID correlation and request timestamps
- API key authentication for mutating requests
- Error handling
"""

import time
from datetime import datetime, timezone
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from catalog_api.api.schemas import EnvelopeStatus
from catalog_api.infrastructure.config import settings

logger = structlog.get_logger()


# ============================================================================
# Request ID Middleware
# ============================================================================


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware to add request ID for correlation.

    Generates or extracts a request ID and adds it to:
    - Request state for access in handlers
    - Response headers for client correlation
    - Log context for tracing

    When enabled in settings, the time the request was received is also
    stored on the request state and echoed in a response header.
    """

    HEADER_NAME = "X-Request-ID"
    TIME_HEADER_NAME = "X-Request-Time"

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request with correlation ID.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response with request ID header.
        """
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid4())
        request.state.request_id = request_id

        request_time = None
        if settings.request_timestamp_enabled:
            request_time = datetime.now(timezone.utc).isoformat()
            request.state.request_time = request_time

        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.perf_counter()
        response = None

        try:
            response = await call_next(request)
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000

            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=getattr(response, "status_code", 500),
                duration_ms=round(duration_ms, 2),
            )

            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[self.HEADER_NAME] = request_id
        if request_time:
            response.headers[self.TIME_HEADER_NAME] = request_time

        return response


# ============================================================================
# API Key Authentication Middleware
# ============================================================================


# Methods that change catalog state
PROTECTED_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


def _unauthorized(error_code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={
            "status": EnvelopeStatus.FAIL.value,
            "error_code": error_code,
            "message": message,
            "details": {},
        },
        headers={"WWW-Authenticate": "Bearer"},
    )


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Middleware for API key authentication.

    Reads are public. Mutating requests must carry a valid API key in
    the Bearer format: "Authorization: Bearer <api_key>". The check is
    disabled when no key is configured.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Validate API key for mutating requests.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response or 401 error.
        """
        if not settings.catalog_api_key or request.method not in PROTECTED_METHODS:
            return await call_next(request)

        path = request.url.path
        auth_header = request.headers.get("Authorization")

        if not auth_header:
            logger.warning(
                "Missing authorization header",
                path=path,
                method=request.method,
            )
            return _unauthorized("UNAUTHORIZED", "Missing Authorization header")

        parts = auth_header.split(" ", 1)
        if len(parts) != 2 or parts[0].lower() != "bearer":
            logger.warning(
                "Invalid authorization format",
                path=path,
                method=request.method,
            )
            return _unauthorized(
                "UNAUTHORIZED",
                "Invalid Authorization header format. Use 'Bearer <api_key>'",
            )

        if parts[1] != settings.catalog_api_key:
            logger.warning(
                "Invalid API key",
                path=path,
                method=request.method,
            )
            return _unauthorized("INVALID_API_KEY", "Invalid API key")

        return await call_next(request)


# ============================================================================
# Error Handling Middleware
# ============================================================================


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware for consistent error handling.

    Catches unhandled exceptions and returns standardized error responses.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Handle errors uniformly.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response or error response.
        """
        try:
            return await call_next(request)
        except Exception as e:
            request_id = getattr(request.state, "request_id", None)

            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error=str(e),
            )

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "status": EnvelopeStatus.ERROR.value,
                    "error_code": "INTERNAL_ERROR",
                    "message": "An internal error occurred",
                    "details": {},
                    "request_id": request_id,
                },
            )


# ============================================================================
# Middleware Setup
# ============================================================================


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application.

    Middleware is added in reverse order (last added = first executed).

    Args:
        app: FastAPI application instance.
    """
    # Error handling (innermost - wraps the routers directly)
    app.add_middleware(ErrorHandlerMiddleware)

    # API key authentication
    app.add_middleware(ApiKeyMiddleware)

    # Request ID correlation (outermost - every response gets the header)
    app.add_middleware(RequestIdMiddleware)
