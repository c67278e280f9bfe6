"""
Test suite for the image serving endpoint.

Drives the FastAPI app with the image service dependency overridden by a
service over the in-memory store and derived files written to a temp
directory.

System role: Verification of the public HTTP contract
"""

from email.utils import format_datetime
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from entity_images.api.deps.dependencies import get_image_service
from entity_images.api.main import create_app
from entity_images.application.services import ImageService
from entity_images.boundary.db.models.image_model import ImageModel
from entity_images.core.access_gate import CallableAccessGate

WEBP = {"Accept": "image/avif,image/webp,*/*"}


def _write(path: str, size: tuple[int, int], fmt: str = "WEBP") -> bytes:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color=(0, 128, 0)).save(path, format=fmt)
    return Path(path).read_bytes()


@pytest.fixture
def access():
    """Mutable switch read by the access gate."""
    return {"granted": True}


@pytest.fixture
def image_service(registry, image_settings, memory_store, access) -> ImageService:
    return ImageService(
        db=None,
        registry=registry,
        settings=image_settings,
        access_gate=CallableAccessGate(lambda attribute, subject: access["granted"]),
        store=memory_store,
    )


@pytest.fixture
def client(image_service) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_image_service] = lambda: image_service
    return TestClient(app)


@pytest.fixture
def article_thumb(image_service, article) -> bytes:
    article.cover = ImageModel(id="img1")
    return _write(image_service.get(article).absolute_file_path("thumb"), (20, 10))


class TestContentNegotiation:
    """Test suite for Accept header handling."""

    def test_rejects_clients_without_webp(self, client, article_thumb) -> None:
        response = client.get("/upload/article/42-thumb.webp", headers={"Accept": "image/png"})

        assert response.status_code == 406

    def test_rejects_default_accept(self, client, article_thumb) -> None:
        response = client.get("/upload/article/42-thumb.webp")

        assert response.status_code == 406

    def test_accepts_avif_clients(self, client, article_thumb) -> None:
        response = client.get("/upload/article/42-thumb.webp", headers={"Accept": "image/avif"})

        assert response.status_code == 200


class TestNotFound:
    """Test suite for 404 responses."""

    def test_unknown_slug(self, client) -> None:
        assert client.get("/upload/ghost/1.webp", headers=WEBP).status_code == 404

    def test_unknown_entity(self, client, article_thumb) -> None:
        assert client.get("/upload/article/99-thumb.webp", headers=WEBP).status_code == 404

    def test_malformed_filename(self, client, article_thumb) -> None:
        assert client.get("/upload/article/not a file", headers=WEBP).status_code == 404

    def test_unknown_variant_suffix(self, client, article_thumb) -> None:
        assert client.get("/upload/article/42-huge.webp", headers=WEBP).status_code == 404

    def test_format_mismatch(self, client, article_thumb) -> None:
        assert client.get("/upload/article/42-thumb.png", headers=WEBP).status_code == 404

    def test_missing_file(self, client, article) -> None:
        assert client.get("/upload/article/42-thumb.webp", headers=WEBP).status_code == 404

    def test_too_many_segments(self, client, article_thumb) -> None:
        assert client.get("/upload/article/a/b/42-thumb.webp", headers=WEBP).status_code == 404


class TestServing:
    """Test suite for successful responses and caching."""

    def test_serves_file_with_cache_headers(self, client, article_thumb) -> None:
        # Act
        response = client.get("/upload/article/42-thumb.webp", headers=WEBP)

        # Assert
        assert response.status_code == 200
        assert response.content == article_thumb
        assert response.headers["content-type"] == "image/webp"
        assert response.headers["cache-control"] == "public, max-age=2678400"
        assert "last-modified" in response.headers

    def test_not_modified_when_client_copy_is_current(self, client, article_thumb) -> None:
        # Arrange
        first = client.get("/upload/article/42-thumb.webp", headers=WEBP)

        # Act
        response = client.get(
            "/upload/article/42-thumb.webp",
            headers={**WEBP, "If-Modified-Since": first.headers["last-modified"]},
        )

        # Assert
        assert response.status_code == 304
        assert response.content == b""
        assert response.headers["cache-control"] == "public, max-age=2678400"

    def test_stale_client_copy_gets_full_response(self, client, article_thumb) -> None:
        stale = format_datetime(datetime(2000, 1, 1, tzinfo=timezone.utc), usegmt=True)

        response = client.get(
            "/upload/article/42-thumb.webp",
            headers={**WEBP, "If-Modified-Since": stale},
        )

        assert response.status_code == 200

    def test_invalid_if_modified_since_is_ignored(self, client, article_thumb) -> None:
        response = client.get(
            "/upload/article/42-thumb.webp",
            headers={**WEBP, "If-Modified-Since": "yesterday"},
        )

        assert response.status_code == 200

    def test_jpg_variant_is_served_as_image_jpeg(self, client, image_service, article) -> None:
        article.cover = ImageModel(id="img1")
        _write(image_service.get(article).absolute_file_path("small"), (50, 25), fmt="JPEG")

        response = client.get("/upload/article/42-small.jpg", headers=WEBP)

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"

    def test_serves_original_from_bare_filename(self, client, image_service, article) -> None:
        article.cover = ImageModel(id="img1")
        content = _write(image_service.get(article).absolute_file_path("original"), (30, 30))

        response = client.get("/upload/article/42.webp", headers=WEBP)

        assert response.status_code == 200
        assert response.content == content


class TestGatedAndTranslated:
    """Test suite for access gated and translatable schemas."""

    @pytest.fixture
    def secret_files(self, image_service, secret_document) -> tuple[bytes, bytes]:
        secret_document.scan = ImageModel(id="scan1")
        processor = image_service.get(secret_document)
        plain = _write(processor.absolute_file_path("preview"), (40, 20), fmt="PNG")
        blurred = _write(processor.absolute_file_path("preview", blurred=True), (20, 10), fmt="PNG")
        return plain, blurred

    def test_denied_access_serves_blurred_file(self, client, access, secret_files) -> None:
        access["granted"] = False

        response = client.get("/upload/secret/3-preview.png", headers=WEBP)

        assert response.status_code == 200
        assert response.content == secret_files[1]

    def test_granted_access_serves_plain_file(self, client, secret_files) -> None:
        response = client.get("/upload/secret/3-preview.png", headers=WEBP)

        assert response.status_code == 200
        assert response.content == secret_files[0]

    def test_locale_segment_selects_translation(self, client, image_service, product) -> None:
        # Arrange
        processor = image_service.get(product)
        fr = _write(processor.translate("fr").absolute_file_path("thumb"), (10, 10))
        _write(processor.translate("en").absolute_file_path("thumb"), (12, 12))

        # Act
        response = client.get("/upload/product/fr/7-thumb.webp", headers=WEBP)

        # Assert
        assert response.status_code == 200
        assert response.content == fr

    def test_translatable_schema_requires_locale_segment(self, client, image_service, product) -> None:
        processor = image_service.get(product)
        _write(processor.translate("en").absolute_file_path("thumb"), (12, 12))

        response = client.get("/upload/product/7-thumb.webp", headers=WEBP)

        assert response.status_code == 404

    def test_simple_schema_rejects_locale_segment(self, client, article_thumb) -> None:
        response = client.get("/upload/article/zz/42-thumb.webp", headers=WEBP)

        assert response.status_code == 404
