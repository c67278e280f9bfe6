"""
Image service orchestrator.

Wires a database session into a processor context and exposes the image
use cases: resolving processors for entities, public URLs and stored
records, attaching uploaded files to entities and removing them again.

Dependencies: entity_images.core, entity_images.boundary.db
System role: Image use case orchestration
"""

import logging
from pathlib import Path
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from entity_images.boundary.db.models.image_model import ImageModel
from entity_images.boundary.db.store import SqlAlchemyImageStore
from entity_images.boundary.imaging.pipeline import DerivationPipeline
from entity_images.configs.images import ImageSettings
from entity_images.core.access_gate import AccessGate
from entity_images.core.locks import IdentityLocks
from entity_images.core.processor import ImageProcessor, ProcessorContext, ProcessorResolver
from entity_images.core.schema import SchemaRegistry
from entity_images.core.store import ImageStore

logger = logging.getLogger(__name__)

# Process-wide so that saves from different requests share one lock per entity
_pipeline = DerivationPipeline()
_locks = IdentityLocks()


class ImageService:
    """Image service orchestrator."""

    def __init__(
        self,
        db: AsyncSession | None,
        registry: SchemaRegistry,
        settings: ImageSettings,
        access_gate: AccessGate,
        store: ImageStore | None = None,
    ) -> None:
        """
        Initialize image service.

        Args:
            db: Async SQLAlchemy session, used unless ``store`` is given
            registry: Schema registry built at startup
            settings: Image settings
            access_gate: Authorization oracle for gated schemas
            store: Explicit storage collaborator
        """
        if store is None:
            if db is None:
                raise ValueError("ImageService needs a database session or a store")
            store = SqlAlchemyImageStore(db)

        self.context = ProcessorContext(
            registry=registry,
            settings=settings,
            store=store,
            access_gate=access_gate,
            pipeline=_pipeline,
            locks=_locks,
        )
        self.resolver = ProcessorResolver(self.context)

    def get(self, entity: Any) -> ImageProcessor:
        """
        Get the processor for an entity.

        Raises:
            UnresolvableType: If the entity type has no schema
        """
        return self.resolver.resolve_for_instance(entity)

    async def resolve(self, slug: str, identity: str, locale: str | None = None) -> ImageProcessor:
        """
        Get the processor for the entity behind a public URL.

        Args:
            slug: Schema slug
            identity: Entity identity from the URL
            locale: URL locale for translatable schemas

        Raises:
            UnresolvableSlug: If the slug is not registered
            EntityNotFound: If the entity does not exist
        """
        processor = await self.resolver.resolve_by_slug_and_identity(slug, identity)
        if locale is not None:
            processor.translate(locale)
        return processor

    async def resolve_image(self, image: ImageModel) -> ImageProcessor:
        """Get the processor that owns a persisted image record."""
        return await self.resolver.resolve_from_image_record(image)

    async def attach_upload(
        self,
        entity: Any,
        upload: str | Path | None,
        alt: str = "",
        locale: str | None = None,
        image: ImageModel | None = None,
        commit: bool = True,
    ) -> ImageModel | None:
        """
        Bind a submitted image to its entity.

        The processor is scoped to ``locale`` and the submitted record, if
        any, is attached. With an uploaded file all variants are derived and
        the record is saved; without one only the alt text is updated.

        Args:
            entity: Owning entity
            upload: Uploaded file, None when only the alt text changed
            alt: Alternative text
            locale: Form locale for translatable schemas
            image: Image record submitted with the form
            commit: Commit the unit of work; when False only flush

        Returns:
            ImageModel | None: The entity's image record after the update
        """
        processor = self.get(entity).translate(locale)
        if image is not None:
            processor.set_image(image)

        if upload is not None:
            return await processor.save(upload, alt=alt, commit=commit)

        current = processor.get_image()
        if current is not None:
            current.alt = alt
            store = self.context.store
            store.add(current)
            if commit:
                await store.commit()
            else:
                await store.flush()
            logger.info(
                "Image alt updated",
                extra={"slug": processor.schema.slug, "image_id": current.id},
            )
        return current

    async def remove_image(self, entity: Any, locale: str | None = None, commit: bool = True) -> None:
        """
        Delete an entity's image files and record.

        Args:
            entity: Owning entity
            locale: Locale for translatable schemas
            commit: Commit the unit of work; when False only flush
        """
        await self.get(entity).translate(locale).remove(commit=commit)
