"""
Database models package.

Exports:
  - ImageModel: Image record ORM model
  - encode_image_id: Image id helper

Dependencies: sqlalchemy, entity_images.boundary.db.base
System role: Database model definitions for image records
"""

from entity_images.boundary.db.models.image_model import ImageModel, encode_image_id

__all__ = [
    "ImageModel",
    "encode_image_id",
]
