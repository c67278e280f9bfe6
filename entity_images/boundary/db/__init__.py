"""
Database boundary layer: ORM models, CRUD operations, store and connection management.

Exports:
  - Base: Declarative base shared with owning entity models
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - ImageModel: Image record model
  - BaseCRUD, ImageCRUD, image_crud: CRUD operations
  - SqlAlchemyImageStore: Storage collaborator for processors

Dependencies: sqlalchemy, entity_images.configs
System role: Database adapter providing persistent storage for image records
"""

from entity_images.boundary.db.base import Base
from entity_images.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from entity_images.boundary.db.models import ImageModel
from entity_images.boundary.db.CRUD import BaseCRUD, ImageCRUD, image_crud
from entity_images.boundary.db.store import SqlAlchemyImageStore

__all__ = [
    # Base classes
    "Base",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "ImageModel",
    # CRUD
    "BaseCRUD",
    "ImageCRUD",
    "image_crud",
    # Store
    "SqlAlchemyImageStore",
]
