"""Slug and short-id generation."""

import shortuuid
from slugify import slugify

from catalog_api.infrastructure.config import settings

SLUG_SEPARATOR = "_"


def make_slug(name: str) -> str:
    """Derive a URL-safe slug from a display name.

    Whitespace and punctuation collapse into a single ``_`` and the result
    is lowercased. The function is pure: the same name always yields the
    same slug.

    Example:
        >>> make_slug("Home & Garden")
        'home_garden'
    """
    return slugify(name, separator=SLUG_SEPARATOR, lowercase=True)


def make_short_id(length: int | None = None) -> str:
    """Generate a short random alphanumeric token for an asset folder."""
    return shortuuid.ShortUUID().random(length=length or settings.short_id_length)
