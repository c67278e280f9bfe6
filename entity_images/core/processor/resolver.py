"""
Processor resolver.

Finds the schema for an entity, for a (slug, identity) pair taken from a
public URL, or for a persisted image record, and builds the processor
bound to the matching entity.

Dependencies: entity_images.core
System role: Entry point from callers to per-entity image processors
"""

import logging
from typing import Any

from entity_images.boundary.db.models.image_model import ImageModel
from entity_images.core.exceptions import EntityNotFound, UnresolvableSlug, UnresolvableType
from entity_images.core.path_codec import decode_entity_path
from entity_images.core.processor.accessors import FieldAccessor, TranslationAccessor
from entity_images.core.processor.context import ProcessorContext
from entity_images.core.processor.processor import SLUG_FIELD, ImageProcessor
from entity_images.core.schema import EntitySchema

logger = logging.getLogger(__name__)


class ProcessorResolver:
    """Builds image processors from entities, slugs or image records."""

    def __init__(self, context: ProcessorContext) -> None:
        """
        Initialize resolver.

        Args:
            context: Collaborators handed to every processor built
        """
        self.context = context

    def build(self, schema: EntitySchema, entity: Any) -> ImageProcessor:
        """Create the processor variant matching the schema."""
        if schema.translatable:
            accessor = TranslationAccessor(schema.field, self.context.current_locale)
        else:
            accessor = FieldAccessor(schema.field)
        return ImageProcessor(self.context, schema, entity, accessor)

    def resolve_for_instance(self, entity: Any) -> ImageProcessor:
        """
        Build the processor for an entity from its runtime type.

        Raises:
            UnresolvableType: If no schema matches the entity
        """
        schema = self.context.registry.find_for_instance(entity)
        if schema is None:
            raise UnresolvableType(type(entity))
        return self.build(schema, entity)

    async def resolve_by_slug_and_identity(self, slug: str, identity: str) -> ImageProcessor:
        """
        Build the processor for the entity named by a slug and identity.

        Args:
            slug: Schema slug
            identity: Entity primary key, or slug field for schemas using it

        Raises:
            UnresolvableSlug: If no schema is registered under the slug
            EntityNotFound: If no entity has that identity
        """
        schema = self.context.registry.find_by_slug(slug)
        if schema is None:
            raise UnresolvableSlug(slug)

        if not identity:
            raise EntityNotFound(slug, identity)

        field = SLUG_FIELD if schema.use_identity_slug_field else None
        entity = await self.context.store.find_entity(schema.owner_type, identity, field)
        if entity is None:
            logger.info(
                "Image owner not found",
                extra={"slug": slug, "identity": identity},
            )
            raise EntityNotFound(slug, identity)

        return self.build(schema, entity)

    async def resolve_from_image_record(self, image: ImageModel) -> ImageProcessor:
        """
        Build the processor that produced a persisted image record.

        The record's entity path is the only link back to its schema; the
        decoded locale is applied to translatable processors.
        """
        slug, identity, locale = decode_entity_path(image.entity_path)
        processor = await self.resolve_by_slug_and_identity(slug or "", identity or "")

        if processor.is_translatable:
            processor.translate(locale)
        return processor
