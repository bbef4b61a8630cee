"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from catalog_api.api.brands import router as brands_router
from catalog_api.api.categories import router as categories_router
from catalog_api.api.health import router as health_router
from catalog_api.api.products import router as products_router
from catalog_api.api.subcategories import router as subcategories_router

__all__ = [
    "brands_router",
    "categories_router",
    "health_router",
    "products_router",
    "subcategories_router",
]
