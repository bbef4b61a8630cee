"""Catalog repository for database operations.

Provides lookups, writes and deletes for every entity kind of the
catalog tree through one kind-parameterized interface.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.catalog.kinds import EntityKind


class CatalogRepository:
    """Repository for catalog entities.

    Every method takes the ``EntityKind`` it operates on, so the same
    instance serves categories, sub-categories, brands and products.

    Example usage:
        async with async_session_factory() as session:
            repo = CatalogRepository(session)
            brands = await repo.find_all(BRAND, {"slug": "acme"})
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def add(self, entity: Any) -> Any:
        """Insert a new entity.

        Args:
            entity: Model instance to insert.

        Returns:
            The entity with its primary key populated.
        """
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def save(self, entity: Any) -> Any:
        """Flush pending changes of an already persistent entity."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, kind: EntityKind, entity_id: str) -> Any | None:
        """Get an entity by primary key.

        Args:
            kind: Entity kind.
            entity_id: Primary key.

        Returns:
            Entity if found, None otherwise.
        """
        return await self.session.get(kind.model, entity_id)

    async def find_all(
        self,
        kind: EntityKind,
        filters: dict[str, Any] | None = None,
    ) -> Sequence[Any]:
        """Find entities whose attributes equal every supplied filter value.

        Args:
            kind: Entity kind.
            filters: Attribute name to value. ``None`` values are ignored.

        Returns:
            Matching entities, oldest first.
        """
        model = kind.model
        query = select(model)

        conditions = [
            getattr(model, attr) == value
            for attr, value in (filters or {}).items()
            if value is not None
        ]
        if conditions:
            query = query.where(and_(*conditions))

        query = query.order_by(model.created_at.asc(), model.id.asc())

        result = await self.session.execute(query)
        return result.scalars().all()

    async def find_by_name(
        self,
        kind: EntityKind,
        name: str,
        exclude_id: str | None = None,
    ) -> Any | None:
        """Find an entity of a kind by its display name.

        Args:
            kind: Entity kind.
            name: Name (or title) to match exactly.
            exclude_id: Entity to ignore, used when renaming.

        Returns:
            First matching entity, if any.
        """
        model = kind.model
        query = select(model).where(getattr(model, kind.name_field) == name)
        if exclude_id is not None:
            query = query.where(model.id != exclude_id)

        result = await self.session.execute(query.limit(1))
        return result.scalars().first()

    async def delete_by_id(self, kind: EntityKind, entity_id: str) -> int:
        """Delete an entity by primary key.

        Args:
            kind: Entity kind.
            entity_id: Primary key.

        Returns:
            Number of deleted rows (0 when someone else got there first).
        """
        model = kind.model
        result = await self.session.execute(
            delete(model).where(model.id == entity_id)
        )
        await self.session.flush()
        return result.rowcount or 0
