"""
Test suite for ImageProcessor on translatable schemas.

Tests per-locale image records, locale fallback to the ambient site
locale, and isolation between locales on save.

System role: Verification of translatable image handling
"""

import pytest

from entity_images.boundary.db.models.image_model import ImageModel
from entity_images.core.site_locale import set_current_locale


class TestTranslatableProcessor:
    """Test suite for locale handling."""

    def test_construction_seeds_every_translation(self, resolver, product) -> None:
        resolver.resolve_for_instance(product)

        assert isinstance(product.translations["en"].picture, ImageModel)
        assert isinstance(product.translations["fr"].picture, ImageModel)

    def test_seeding_keeps_existing_records(self, resolver, product) -> None:
        # Arrange
        existing = ImageModel(id="kept")
        product.translations["fr"].picture = existing

        # Act
        resolver.resolve_for_instance(product)

        # Assert
        assert product.translations["fr"].picture is existing

    def test_locale_defaults_to_configured_locale(self, resolver, product) -> None:
        processor = resolver.resolve_for_instance(product)

        assert processor.is_translatable is True
        assert processor.locale == "en"

    def test_locale_follows_ambient_site_locale(self, resolver, product) -> None:
        processor = resolver.resolve_for_instance(product)

        set_current_locale("fr")

        assert processor.locale == "fr"

    def test_explicit_locale_wins_over_ambient(self, resolver, product) -> None:
        set_current_locale("fr")

        processor = resolver.resolve_for_instance(product).translate("de")

        assert processor.locale == "de"

    def test_identifiers_differ_per_locale(self, resolver, product) -> None:
        processor = resolver.resolve_for_instance(product)

        en_id = processor.translate("en").identifier()
        fr_id = processor.translate("fr").identifier()

        assert en_id == product.translations["en"].picture.id
        assert fr_id == product.translations["fr"].picture.id
        assert en_id != fr_id

    def test_public_path_includes_locale(self, resolver, product) -> None:
        processor = resolver.resolve_for_instance(product).translate("fr")

        assert processor.public_path("thumb") == "/upload/product/fr/7-thumb.webp"

    def test_entity_path_includes_locale(self, resolver, product) -> None:
        processor = resolver.resolve_for_instance(product).translate("fr")

        assert processor.generate_entity_path() == "product:7:fr"

    @pytest.mark.asyncio
    async def test_save_in_one_locale_leaves_other_untouched(self, resolver, product, sample_png) -> None:
        # Arrange
        processor = resolver.resolve_for_instance(product)
        en_before = product.translations["en"].picture
        en_id = en_before.id

        # Act
        image = await processor.translate("fr").save(sample_png, alt="Photo")

        # Assert
        assert product.translations["fr"].picture is image
        assert image.entity_path == "product:7:fr"
        assert image.alt == "Photo"
        assert product.translations["en"].picture is en_before
        assert en_before.id == en_id
        assert en_before.entity_path == ""

    @pytest.mark.asyncio
    async def test_save_updates_seeded_record_in_place(self, resolver, product, sample_png) -> None:
        processor = resolver.resolve_for_instance(product).translate("fr")
        seeded = product.translations["fr"].picture

        image = await processor.save(sample_png)

        assert image is seeded
