"""
CRUD operations for database models.

Exports base CRUD class and the image CRUD implementation with a
pre-instantiated singleton for direct use.

Usage:
    from entity_images.boundary.db.CRUD import image_crud

    deleted = await image_crud.delete_by_id(db, image_id)
"""

from entity_images.boundary.db.CRUD.base_crud import BaseCRUD
from entity_images.boundary.db.CRUD.image_crud import ImageCRUD, image_crud

__all__ = [
    "BaseCRUD",
    "ImageCRUD",
    "image_crud",
]
