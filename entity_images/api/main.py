"""
FastAPI application with assembled routers.

Initializes the FastAPI app serving derived images under the configured
upload path and configures the uvicorn server.

Dependencies: fastapi, entity_images.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from entity_images.api.deps.dependencies import get_registry
from entity_images.configs import get_settings
from entity_images.observability.logger import configure_logging
from entity_images.observability.middleware import LocaleMiddleware, RequestLoggingMiddleware

from .routers import images_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Builds the schema registry at startup so configuration errors fail
    the boot rather than the first request.
    """
    logger = logging.getLogger("uvicorn")

    registry = get_registry()
    logger.info(
        "Image schemas registered: %s",
        ", ".join(registry.slugs) or "none",
        extra={"environment": get_settings().environment},
    )

    yield

    get_registry.cache_clear()


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Entity Images",
        description="Derived image variants for persisted entities",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(LocaleMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(images_router, prefix=settings.images.upload_path.rstrip("/"))

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "entity_images.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
