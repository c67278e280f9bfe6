"""
Image processors.

Exports:
  - ImageProcessor: Per-entity image operations
  - ProcessorResolver: Builds processors from entities, slugs or records
  - ProcessorContext: Collaborators shared by processors
  - FieldAccessor, TranslationAccessor, TranslatableEntity: Record storage strategies
"""

from entity_images.core.processor.accessors import (
    FieldAccessor,
    TranslatableEntity,
    TranslationAccessor,
)
from entity_images.core.processor.context import ProcessorContext
from entity_images.core.processor.processor import ImageProcessor
from entity_images.core.processor.resolver import ProcessorResolver

__all__ = [
    "FieldAccessor",
    "ImageProcessor",
    "ProcessorContext",
    "ProcessorResolver",
    "TranslatableEntity",
    "TranslationAccessor",
]
