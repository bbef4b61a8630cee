"""Catalog tree - models, entity kinds, repository and service.

The tree has four levels, each owned by the one above it:

    Category -> SubCategory -> Brand -> Product

Example usage:
    from catalog_api.catalog.kinds import CATEGORY
    from catalog_api.catalog.service import CatalogService

    service = CatalogService(session, media_store)
    categories = await service.find_many(CATEGORY, slug="electronics")
"""
