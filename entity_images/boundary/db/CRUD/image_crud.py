"""
Image CRUD operations for entity images.

Binds BaseCRUD to ImageModel and exposes a shared singleton.

Dependencies: sqlalchemy, entity_images.boundary.db.models
System role: Image record persistence
"""

from entity_images.boundary.db.models.image_model import ImageModel
from entity_images.boundary.db.CRUD.base_crud import BaseCRUD


class ImageCRUD(BaseCRUD[ImageModel]):
    """CRUD operations for ImageModel."""

    def __init__(self) -> None:
        """Initialize ImageCRUD with ImageModel."""
        super().__init__(ImageModel)


image_crud = ImageCRUD()
