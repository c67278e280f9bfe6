"""FastAPI dependency factories."""

from entity_images.api.deps.dependencies import (
    get_access_gate,
    get_image_service,
    get_registry,
)

__all__ = ["get_access_gate", "get_image_service", "get_registry"]
