"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: entity_images.configs, entity_images.application, entity_images.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from entity_images.application.services import ImageService
from entity_images.boundary.db import get_async_db
from entity_images.configs import get_settings
from entity_images.core.access_gate import AccessGate, StaticAccessGate
from entity_images.core.schema import SchemaRegistry


@lru_cache
def get_registry() -> SchemaRegistry:
    """
    Get the schema registry built from configured rules.

    Built once per process; rule errors surface on first use.

    Returns:
        SchemaRegistry: Registry of all configured schemas
    """
    return SchemaRegistry.register(get_settings().images.load_rules())


def get_access_gate() -> AccessGate:
    """
    Get the authorization oracle for gated schemas.

    Denies by default; applications override this dependency with their
    own gate.

    Returns:
        AccessGate: Access gate instance
    """
    return StaticAccessGate(granted=False)


def get_image_service(
    db: AsyncSession = Depends(get_async_db),
    registry: SchemaRegistry = Depends(get_registry),
    access_gate: AccessGate = Depends(get_access_gate),
) -> ImageService:
    """
    Get image service instance.

    Args:
        db: Async database session
        registry: Schema registry
        access_gate: Authorization oracle

    Returns:
        ImageService: Image service instance
    """
    return ImageService(
        db=db,
        registry=registry,
        settings=get_settings().images,
        access_gate=access_gate,
    )
