"""
SQLAlchemy implementation of the image store.

Wraps one AsyncSession: owning entities are loaded by primary key or by
an alternate field, image records are checked and deleted through
ImageCRUD.

Dependencies: sqlalchemy, entity_images.boundary.db.CRUD
System role: Storage collaborator backed by the application database
"""

import logging
from typing import Any

from sqlalchemy import inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from entity_images.boundary.db.CRUD.image_crud import image_crud

logger = logging.getLogger(__name__)


class SqlAlchemyImageStore:
    """Image store bound to a single async database session."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize store.

        Args:
            db: AsyncSession for database operations
        """
        self.db = db

    def add(self, instance: Any) -> None:
        self.db.add(instance)

    async def flush(self) -> None:
        await self.db.flush()

    async def commit(self) -> None:
        await self.db.commit()

    async def find_entity(self, owner_type: type, identity: str, field: str | None = None) -> Any | None:
        """
        Load an owning entity by primary key or by an alternate field.

        The identity string is converted to the primary key's Python type
        first; an identity that cannot be converted matches nothing.
        """
        if field is not None:
            stmt = select(owner_type).where(getattr(owner_type, field) == identity).limit(1)
            result = await self.db.execute(stmt)
            return result.scalar_one_or_none()

        pk_column = sa_inspect(owner_type).primary_key[0]
        try:
            python_type = pk_column.type.python_type
        except NotImplementedError:
            python_type = None

        key: Any = identity
        if python_type is not None and not isinstance(identity, python_type):
            try:
                key = python_type(identity)
            except (TypeError, ValueError):
                logger.debug(
                    "Identity does not fit primary key type",
                    extra={"owner_type": owner_type.__name__, "identity": identity},
                )
                return None

        return await self.db.get(owner_type, key)

    async def delete(self, instance: Any) -> None:
        deleted = await image_crud.delete_by_id(self.db, instance.id)
        if not deleted:
            logger.debug("Image record already gone", extra={"image_id": instance.id})
