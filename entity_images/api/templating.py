"""
Template helpers.

Renders ``<img>`` tags for image records so server-side templates can
embed the public URL of a variant without resolving processors
themselves.

Dependencies: entity_images.application.services
System role: Presentation helper for image records
"""

from html import escape
from typing import Any

from entity_images.application.services import ImageService
from entity_images.boundary.db.models.image_model import ImageModel
from entity_images.core.path_codec import ORIGINAL_VARIANT

PLACEHOLDER_SRC = "https://placehold.jp/200x200.png?text=No image"
PLACEHOLDER_ALT = "No image"


def _render(attributes: dict[str, Any]) -> str:
    rendered = " ".join(
        f'{escape(str(name))}="{escape(str(value))}"'
        for name, value in attributes.items()
        if value is not None
    )
    return f"<img {rendered}/>"


async def render_image_tag(
    service: ImageService,
    image: ImageModel | None,
    variant: str | None = None,
    locale: str | None = None,
    attrs: dict[str, Any] | None = None,
) -> str:
    """
    Render an ``<img>`` tag for an image record.

    A missing image renders the placeholder. Extra attributes are added
    after ``src`` and ``alt`` and may override them.

    Args:
        service: Image service bound to the current unit of work
        image: Image record, or None
        variant: Variant to link, defaults to the original
        locale: Locale for translatable schemas, defaults to the record's
        attrs: Additional HTML attributes

    Raises:
        UnknownVariant: If the schema has no such variant
    """
    if image is None:
        return _render({"src": PLACEHOLDER_SRC, "alt": PLACEHOLDER_ALT, **(attrs or {})})

    processor = await service.resolve_image(image)
    if locale is not None:
        processor.translate(locale)

    src = processor.public_path(variant or ORIGINAL_VARIANT)
    return _render({"src": src, "alt": image.alt or "", **(attrs or {})})
