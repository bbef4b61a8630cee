"""Catalog API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog_api.api.brands import router as brands_router
from catalog_api.api.categories import router as categories_router
from catalog_api.api.health import router as health_router
from catalog_api.api.middleware import setup_middleware
from catalog_api.api.products import router as products_router
from catalog_api.api.schemas import ErrorResponse, envelope_status
from catalog_api.api.subcategories import router as subcategories_router
from catalog_api.domain.exceptions import CatalogError
from catalog_api.infrastructure.config import settings
from catalog_api.infrastructure.database import create_tables, engine
from catalog_api.infrastructure.logging_config import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    # Startup
    configure_logging()
    logger.info(
        "Starting Catalog API",
        version=settings.api_version,
        debug=settings.debug,
    )

    if settings.create_tables_on_startup:
        await create_tables()
        logger.info("Database tables ready")

    yield

    # Shutdown
    logger.info("Shutting down Catalog API")
    await engine.dispose()


app = FastAPI(
    title="Catalog API",
    description="Hierarchical product catalog: categories, sub-categories, brands and products",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, API key auth, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(categories_router)
app.include_router(subcategories_router)
app.include_router(brands_router)
app.include_router(products_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


def _error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: object = None,
) -> JSONResponse:
    body = ErrorResponse(
        status=envelope_status(status_code),
        message=message,
        error_code=error_code,
        details=details if details is not None else {},
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
    )


@app.exception_handler(CatalogError)
async def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Translate catalog errors into the response envelope."""
    if exc.status_code >= 500:
        logger.error(
            "Catalog operation failed",
            path=request.url.path,
            error_code=exc.error_code,
            error=exc.message,
        )
    return _error_response(
        request,
        exc.status_code,
        exc.error_code,
        exc.message,
        exc.details,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed requests as 400 with the offending fields."""
    errors = jsonable_encoder(exc.errors())
    fields = [".".join(str(part) for part in error.get("loc", ())) for error in errors]
    return _error_response(
        request,
        400,
        "VALIDATION_FAILED",
        f"Invalid request: {', '.join(fields)}" if fields else "Invalid request",
        errors,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle HTTP exceptions (unknown routes, wrong methods) with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", {})
    else:
        error_code = "NOT_FOUND" if exc.status_code == 404 else "ERROR"
        message = str(detail)
        details = {}

    return _error_response(request, exc.status_code, error_code, message, details)


def run() -> None:
    """Run the API with uvicorn."""
    uvicorn.run(
        "catalog_api.main:app",
        host="0.0.0.0",
        port=8000,
        log_level=settings.log_level.lower(),
    )
