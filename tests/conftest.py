"""
Shared test fixtures and configuration for entire test suite.

Provides: Temp directories and images, in-memory image store, plain owning
entities, schema registry, processor contexts, in-memory async database
Dependencies: pytest, Pillow, sqlalchemy
System role: Test infrastructure and fixture management
"""

import shutil
import tempfile
from pathlib import Path
from typing import Any

import pytest
from PIL import Image

from entity_images.configs.images import ImageSettings
from entity_images.core.access_gate import StaticAccessGate
from entity_images.core.processor import ProcessorContext, ProcessorResolver
from entity_images.core.schema import SchemaRegistry
from entity_images.core.site_locale import clear_current_locale


class Article:
    """Plain owning entity with a single image."""

    def __init__(self, id: int, slug: str, cover: Any = None) -> None:
        self.id = id
        self.slug = slug
        self.cover = cover


class SecretDocument:
    """Owning entity whose image is access gated."""

    def __init__(self, id: int, scan: Any = None) -> None:
        self.id = id
        self.scan = scan


class ProductTranslation:
    """Per-locale fields of a product."""

    def __init__(self, locale: str) -> None:
        self.locale = locale
        self.picture = None


class Product:
    """Owning entity with one image per locale."""

    def __init__(self, id: int, locales: tuple[str, ...] = ("en", "fr")) -> None:
        self.id = id
        self.translations = {locale: ProductTranslation(locale) for locale in locales}

    def translate(self, locale: str) -> ProductTranslation:
        if locale not in self.translations:
            self.translations[locale] = ProductTranslation(locale)
        return self.translations[locale]


class InMemoryImageStore:
    """Image store keeping entities and staged objects in dicts."""

    def __init__(self) -> None:
        self.entities: dict[tuple[type, str, str], Any] = {}
        self.added: list[Any] = []
        self.deleted: list[Any] = []
        self.commits = 0
        self.flushes = 0
        self.lookups = 0

    def put(self, entity: Any, field: str = "id") -> Any:
        self.entities[(type(entity), field, str(getattr(entity, field)))] = entity
        return entity

    def add(self, instance: Any) -> None:
        self.added.append(instance)

    async def flush(self) -> None:
        self.flushes += 1

    async def commit(self) -> None:
        self.commits += 1

    async def find_entity(self, owner_type: type, identity: str, field: str | None = None) -> Any | None:
        self.lookups += 1
        return self.entities.get((owner_type, field or "id", identity))

    async def delete(self, instance: Any) -> None:
        self.deleted.append(instance)
        self.added = [obj for obj in self.added if obj is not instance]


@pytest.fixture(autouse=True)
def reset_site_locale():
    """Keep the ambient locale from leaking between tests."""
    clear_current_locale()
    yield
    clear_current_locale()


@pytest.fixture
def temp_dir():
    """
    Create a temporary directory for test files.

    Yields:
        Path: Path to temporary directory
    """
    temp_path = Path(tempfile.mkdtemp(prefix="entity_images_test_"))
    yield temp_path

    # Cleanup
    if temp_path.exists():
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_png(temp_dir: Path) -> Path:
    """1000x500 RGB PNG upload."""
    path = temp_dir / "upload.png"
    Image.new("RGB", (1000, 500), color=(200, 30, 30)).save(path, format="PNG")
    return path


@pytest.fixture
def sample_rgba_png(temp_dir: Path) -> Path:
    """400x400 RGBA PNG upload with transparency."""
    path = temp_dir / "upload_alpha.png"
    Image.new("RGBA", (400, 400), color=(10, 120, 200, 128)).save(path, format="PNG")
    return path


@pytest.fixture
def not_an_image(temp_dir: Path) -> Path:
    """Text file with an image extension."""
    path = temp_dir / "broken.png"
    path.write_bytes(b"definitely not pixels")
    return path


@pytest.fixture
def image_settings(temp_dir: Path) -> ImageSettings:
    """Image settings rooted in the temp directory."""
    return ImageSettings(
        path="/upload",
        project_dir=temp_dir,
        public_dir="public",
        default_locale="en",
    )


@pytest.fixture
def image_rules() -> list[dict[str, Any]]:
    """Rules for the plain test entities."""
    return [
        {
            "class": Article,
            "field": "cover",
            "slug": "article",
            "files": {
                "thumb": {"format": "webp", "width": 200},
                "card": {"format": "jpeg", "width": 400, "height": 100},
                "small": {"format": "jpg", "width": 50},
            },
        },
        {
            "class": Product,
            "field": "picture",
            "slug": "product",
            "translatable": True,
            "files": {"thumb": {"format": "webp", "width": 100, "height": 100}},
        },
        {
            "class": SecretDocument,
            "field": "scan",
            "slug": "secret",
            "use_voter": True,
            "files": {"preview": {"format": "png", "height": 50}},
        },
    ]


@pytest.fixture
def registry(image_rules: list[dict[str, Any]]) -> SchemaRegistry:
    """Schema registry built from the test rules."""
    return SchemaRegistry.register(image_rules)


@pytest.fixture
def memory_store() -> InMemoryImageStore:
    """Empty in-memory image store."""
    return InMemoryImageStore()


@pytest.fixture
def make_context(registry, image_settings, memory_store):
    """
    Factory for processor contexts.

    Returns:
        Callable: ``make_context(granted=True)`` -> ProcessorContext
    """
    def _make(granted: bool = True) -> ProcessorContext:
        return ProcessorContext(
            registry=registry,
            settings=image_settings,
            store=memory_store,
            access_gate=StaticAccessGate(granted),
        )

    return _make


@pytest.fixture
def resolver(make_context) -> ProcessorResolver:
    """Resolver over a context whose access gate grants everything."""
    return ProcessorResolver(make_context())


@pytest.fixture
def article(memory_store: InMemoryImageStore) -> Article:
    """Stored article without an image."""
    return memory_store.put(Article(id=42, slug="hello-world"))


@pytest.fixture
def product(memory_store: InMemoryImageStore) -> Product:
    """Stored product with en and fr translations."""
    return memory_store.put(Product(id=7))


@pytest.fixture
def secret_document(memory_store: InMemoryImageStore) -> SecretDocument:
    """Stored access gated document."""
    return memory_store.put(SecretDocument(id=3))


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from entity_images.boundary.db.base import Base

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()
