"""
Application services.

Exports:
  - ImageService: Image use cases for the HTTP layer and upload glue
"""

from entity_images.application.services.image_service import ImageService

__all__ = ["ImageService"]
