"""
Generic CRUD operations for SQLAlchemy models.

Subclasses bind a model and add their own queries; records are keyed by
an ``id`` primary key of any type.

Dependencies: sqlalchemy
System role: Shared persistence helpers for model-specific CRUD classes
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from entity_images.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic delete by primary key.

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def delete_by_id(self, session: AsyncSession, id: Any) -> bool:
        """
        Delete a record by primary key.

        The session is not committed; the caller owns the transaction.

        Returns:
            True if a row was deleted
        """
        result = await session.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0
