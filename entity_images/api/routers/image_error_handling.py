"""
Image error handling utilities.

Provides a decorator mapping image resolution errors raised by services
to HTTP 404 responses. Anything else propagates unchanged.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from entity_images.core.exceptions import EntityNotFound, ResolutionError, UnknownVariant

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_image_errors(func: F) -> F:
    """
    Decorator to turn image lookup failures into 404 responses.

    Unknown slugs, unknown entity types, missing entities and unknown
    variants all mean the requested URL names no image.
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except (ResolutionError, EntityNotFound, UnknownVariant) as e:
            logger.info(
                "Image not found",
                extra={"error_type": type(e).__name__, "details": e.details},
            )
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=e.message,
            ) from e

    return wrapper  # type: ignore
