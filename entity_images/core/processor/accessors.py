"""
Image accessor strategies.

A processor reads and writes the image record of its entity through an
accessor. The field accessor uses the configured attribute of the entity
itself; the translation accessor uses the same attribute on the entity's
translation for the active locale.

Dependencies: entity_images.boundary.db.models
System role: Variant-specific storage of the image record on an entity
"""

from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from entity_images.boundary.db.models.image_model import ImageModel


@runtime_checkable
class TranslatableEntity(Protocol):
    """Entity exposing per-locale translation objects."""

    translations: Mapping[str, Any]

    def translate(self, locale: str) -> Any:
        """Return the translation object for ``locale``."""
        ...


class FieldAccessor:
    """Image stored directly on the entity."""

    translatable = False

    def __init__(self, field: str) -> None:
        self.field = field

    @property
    def locale(self) -> str | None:
        return None

    def translate(self, locale: str | None) -> None:
        pass

    def seed(self, entity: Any) -> None:
        pass

    def get_image(self, entity: Any) -> ImageModel | None:
        return getattr(entity, self.field, None)

    def set_image(self, entity: Any, image: ImageModel | None) -> None:
        setattr(entity, self.field, image)


class TranslationAccessor:
    """
    Image stored on the translation for the active locale.

    The active locale is the one chosen with ``translate``; without it the
    ambient site locale returned by ``locale_provider`` is used.
    """

    translatable = True

    def __init__(self, field: str, locale_provider: Callable[[], str]) -> None:
        self.field = field
        self.locale_provider = locale_provider
        self._locale: str | None = None

    @property
    def locale(self) -> str:
        return self._locale or self.locale_provider()

    def translate(self, locale: str | None) -> None:
        self._locale = locale

    def seed(self, entity: TranslatableEntity) -> None:
        """Attach an empty image record to every translation that has none."""
        for translation in entity.translations.values():
            if getattr(translation, self.field, None) is None:
                setattr(translation, self.field, ImageModel())

    def get_image(self, entity: TranslatableEntity) -> ImageModel | None:
        return getattr(entity.translate(self.locale), self.field, None)

    def set_image(self, entity: TranslatableEntity, image: ImageModel | None) -> None:
        setattr(entity.translate(self.locale), self.field, image)
