"""
Image processor.

A processor binds one schema to one owning entity and drives everything
about that entity's image: reading and attaching the record, computing
the on-disk identifier and the public path, checking access, and
deriving every configured variant from an uploaded file.

Simple and translatable schemas share this implementation; they differ
only in the accessor that stores the record (see accessors.py).

Dependencies: entity_images.core, entity_images.boundary
System role: Per-entity orchestration of image derivation and lookup
"""

import asyncio
import logging
import os
import uuid as uuid_lib
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from entity_images.boundary.db.models.image_model import ImageModel, encode_image_id
from entity_images.core.access_gate import IMAGE_ATTRIBUTE
from entity_images.core.path_codec import (
    ORIGINAL_VARIANT,
    absolute_path,
    derived_filename,
    encode_entity_path,
    public_filename,
    web_path,
)
from entity_images.core.processor.accessors import FieldAccessor, TranslationAccessor
from entity_images.core.processor.context import ProcessorContext
from entity_images.core.schema import EntitySchema

logger = logging.getLogger(__name__)

PRIMARY_KEY_FIELD = "id"
SLUG_FIELD = "slug"


class ImageProcessor:
    """
    Image operations for one entity under one schema.

    Processors are created per call by the resolver and are never shared
    between tasks. The identifier is computed lazily and cached for the
    processor's lifetime, separately for each locale of a translatable
    entity.

    Attributes:
        context: Shared collaborators (registry, settings, store, gate, pipeline)
        schema: Schema the entity matched
        entity: Owning entity
        accessor: Strategy storing the record on the entity or its translation
    """

    def __init__(
        self,
        context: ProcessorContext,
        schema: EntitySchema,
        entity: Any,
        accessor: FieldAccessor | TranslationAccessor,
    ) -> None:
        self.context = context
        self.schema = schema
        self.entity = entity
        self.accessor = accessor
        self._identifiers: dict[str | None, str] = {}
        self._uuids: dict[str | None, uuid_lib.UUID] = {}

        self.accessor.seed(entity)

    def __repr__(self) -> str:
        return f"<ImageProcessor slug={self.schema.slug!r} locale={self.locale!r}>"

    @property
    def is_translatable(self) -> bool:
        return self.accessor.translatable

    @property
    def locale(self) -> str | None:
        """Active locale for translatable schemas, None otherwise."""
        return self.accessor.locale

    def translate(self, locale: str | None) -> "ImageProcessor":
        """
        Scope the processor to ``locale``.

        A None locale falls back to the ambient site locale. No effect for
        simple schemas.
        """
        self.accessor.translate(locale)
        return self

    def get_image(self) -> ImageModel | None:
        return self.accessor.get_image(self.entity)

    def set_image(self, image: ImageModel | None) -> None:
        self.accessor.set_image(self.entity, image)

    def can_access(self) -> bool:
        """
        Check if the current user may see the real image.

        Always True when the schema does not use the access gate.
        """
        if not self.schema.use_access_gate:
            return True
        return self.context.access_gate.is_granted(IMAGE_ATTRIBUTE, self.entity)

    def path_id(self) -> str:
        """Identity of the owning entity used in entity paths and public URLs."""
        field = SLUG_FIELD if self.schema.use_identity_slug_field else PRIMARY_KEY_FIELD
        return str(getattr(self.entity, field))

    def generate_id(self) -> str:
        """
        Create an id for a new image record.

        The id encodes a fresh uuid4, kept for the record built on save.
        """
        value = uuid_lib.uuid4()
        self._uuids[self.locale] = value
        return encode_image_id(value)

    def identifier(self) -> str:
        """
        Image id used as the stem of on-disk filenames.

        Cached value first, then the id of the attached record, then a
        freshly generated id.
        """
        key = self.locale
        if key not in self._identifiers:
            image = self.get_image()
            self._identifiers[key] = image.id if image is not None else self.generate_id()
        return self._identifiers[key]

    def generate_entity_path(self) -> str:
        """Encoded (slug, identity[, locale]) stored on the image record."""
        return encode_entity_path(self.schema.slug, self.path_id(), self.locale)

    def public_path(self, variant: str = ORIGINAL_VARIANT) -> str:
        """
        Public URL path of a variant.

        Raises:
            UnknownVariant: If the schema has no such variant
        """
        spec = self.schema.variant(variant)
        segments = [self.schema.slug]
        if self.is_translatable:
            segments.append(self.locale)
        segments.append(public_filename(self.path_id(), variant, spec.format))
        return web_path(self.context.settings.upload_path, *segments)

    def absolute_file_path(self, variant: str = ORIGINAL_VARIANT, blurred: bool = False) -> str:
        """
        Absolute on-disk path of a derived file.

        Raises:
            UnknownVariant: If the schema has no such variant
        """
        spec = self.schema.variant(variant)
        settings = self.context.settings
        return absolute_path(
            settings.upload_path,
            settings.public_root,
            derived_filename(self.identifier(), variant, spec.format, blurred),
        )

    def resolve_absolute_file_path(self, variant: str = ORIGINAL_VARIANT) -> str:
        """Absolute path of the file to serve: blurred when access is denied."""
        return self.absolute_file_path(variant, blurred=not self.can_access())

    async def save(self, source_file: str | Path, alt: str = "", commit: bool = True) -> ImageModel:
        """
        Derive every variant from an uploaded file and attach the record.

        Writes the plain artifact of each variant (and, for gated schemas,
        a blurred one derived from a single full-image blur), then creates
        or updates the image record and hands record and entity to the
        store. Saves for the same entity path are serialised within the
        process.

        Args:
            source_file: Uploaded image file
            alt: Alternative text
            commit: Commit the store; when False only flush

        Returns:
            ImageModel: The saved image record

        Raises:
            DecodeError: If the upload cannot be decoded
            UnsupportedFormat: If a variant format has no encoder
            EncodingError: If the entity identity contains the path separator
        """
        entity_path = self.generate_entity_path()
        async with self.context.locks.get(entity_path):
            await self._derive_variants(Path(source_file))

            image = self.get_image()
            if image is None:
                image = self._new_image()
            self._fill_image_fields(image, entity_path, alt)

            store = self.context.store
            store.add(image)
            self.set_image(image)
            store.add(self.entity)

            if commit:
                await store.commit()
            else:
                await store.flush()

        logger.info(
            "Image saved",
            extra={
                "slug": self.schema.slug,
                "entity_path": entity_path,
                "image_id": image.id,
                "variants": list(self.schema.variants),
            },
        )
        return image

    async def remove(self, commit: bool = True) -> None:
        """
        Delete the entity's image: derived files, then the record.

        The record is detached from the entity before it is deleted so the
        owner never references a missing row. A later save starts over with
        a fresh identifier.

        Args:
            commit: Commit the store; when False only flush
        """
        entity_path = self.generate_entity_path()
        async with self.context.locks.get(entity_path):
            await self.remove_files()

            store = self.context.store
            image = self.get_image()
            image_id = image.id if image is not None else None
            if image is not None:
                self.set_image(None)
                store.add(self.entity)
                await store.flush()
                await store.delete(image)

            self._identifiers.pop(self.locale, None)
            self._uuids.pop(self.locale, None)

            if commit:
                await store.commit()
            else:
                await store.flush()

        logger.info(
            "Image removed",
            extra={
                "slug": self.schema.slug,
                "entity_path": entity_path,
                "image_id": image_id,
            },
        )

    async def remove_files(self) -> None:
        """Delete every derived file of the current image, blurred ones included."""
        pipeline = self.context.pipeline
        for variant in self.schema.variants:
            for blurred in (False, True):
                await asyncio.to_thread(pipeline.remove, self.absolute_file_path(variant, blurred))

    async def _derive_variants(self, source: Path) -> None:
        pipeline = self.context.pipeline
        blurred_source = None
        if self.schema.use_access_gate:
            blurred_source = await asyncio.to_thread(pipeline.blur_full, source)

        try:
            for name, spec in self.schema.variants.items():
                await asyncio.to_thread(pipeline.resize, source, self.absolute_file_path(name), spec)
                if blurred_source is not None:
                    await asyncio.to_thread(
                        pipeline.resize,
                        blurred_source,
                        self.absolute_file_path(name, blurred=True),
                        spec,
                    )
        finally:
            if blurred_source is not None:
                pipeline.remove(blurred_source)

    def _new_image(self) -> ImageModel:
        identifier = self.identifier()
        value = self._uuids.get(self.locale)
        if value is None or encode_image_id(value) != identifier:
            # Identifier came from a record detached since; files keep its stem
            return ImageModel(id=identifier)
        return ImageModel(uuid=value, id=identifier)

    def _fill_image_fields(self, image: ImageModel, entity_path: str, alt: str) -> None:
        variant = ORIGINAL_VARIANT if ORIGINAL_VARIANT in self.schema.variants else next(iter(self.schema.variants))
        stat = os.stat(self.absolute_file_path(variant))

        image.entity_path = entity_path
        image.alt = alt
        image.created_at = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
        image.updated_at = datetime.fromtimestamp(stat.st_ctime, tz=timezone.utc)
