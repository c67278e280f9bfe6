"""
Schema model and registry for configured image rules.

Turns the declarative rule configuration into immutable EntitySchema
values and answers the two lookups the resolver needs: by slug and by
entity instance. Registration order is the tie-break for both lookups:
the first registered schema that matches wins, so more specific owner
types must be listed before their base classes.

Dependencies: importlib, entity_images.configs
System role: Read-only schema registry built once at startup
"""

import importlib
import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from entity_images.configs.images import FileConfig, RuleConfig
from entity_images.core.exceptions import ConfigError, UnknownVariant
from entity_images.core.path_codec import ORIGINAL_VARIANT, PATH_SEPARATOR

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "webp"


@dataclass(frozen=True)
class FileVariantSpec:
    """
    One derived size of an image.

    Fields:
        name: Variant name, unique within its schema
        format: Target image format (file extension)
        width: Target width in pixels, None to keep the source width
        height: Target height in pixels, None to keep the source height
    """

    name: str
    format: str
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True)
class EntitySchema:
    """
    One configured image rule.

    Fields:
        slug: Short name used in URLs and entity paths, unique in the registry
        owner_type: Class (or runtime-checkable protocol) of owning entities
        field: Attribute holding the image on the entity or its translations
        translatable: One image per locale when True
        use_identity_slug_field: Identify entities by 'slug' instead of 'id'
        use_access_gate: Serve blurred variants when the oracle denies access
        variants: Ordered, read-only mapping of variant name to spec
    """

    slug: str
    owner_type: type
    field: str
    translatable: bool = False
    use_identity_slug_field: bool = False
    use_access_gate: bool = False
    variants: Mapping[str, FileVariantSpec] = field(default_factory=lambda: MappingProxyType({}))

    def matches(self, entity: Any) -> bool:
        """Check that the entity is an instance of the configured owner type."""
        return isinstance(entity, self.owner_type)

    def variant(self, name: str) -> FileVariantSpec:
        """
        Get the spec of a configured variant.

        Raises:
            UnknownVariant: If the schema has no such variant
        """
        try:
            return self.variants[name]
        except KeyError:
            raise UnknownVariant(name, self.slug) from None


def _import_owner(owner: Any, slug: str) -> type:
    if isinstance(owner, type):
        return owner
    if not isinstance(owner, str) or not owner:
        raise ConfigError(f"Invalid owner type {owner!r}", slug=slug)

    module_name, sep, attr = owner.partition(":")
    if not sep:
        module_name, _, attr = owner.rpartition(".")
    if not module_name or not attr:
        raise ConfigError(f"Invalid owner type {owner!r}", slug=slug)

    try:
        target: Any = importlib.import_module(module_name)
        for part in attr.split("."):
            target = getattr(target, part)
    except (ImportError, AttributeError) as exc:
        raise ConfigError(f"Can't import owner type {owner!r}", slug=slug) from exc

    if not isinstance(target, type):
        raise ConfigError(f"Owner {owner!r} is not a class", slug=slug)
    return target


def _build_variant(name: str, config: FileConfig, slug: str) -> FileVariantSpec:
    for dimension in (config.width, config.height):
        if dimension is not None and dimension <= 0:
            raise ConfigError(
                f"Variant \"{name}\" has a non-positive dimension",
                slug=slug,
                details={"variant": name},
            )
    return FileVariantSpec(
        name=name,
        format=(config.format or DEFAULT_FORMAT).lower(),
        width=config.width,
        height=config.height,
    )


def build_schema(rule: RuleConfig) -> EntitySchema:
    """
    Build one schema from a rule, injecting the original variant if requested.

    Raises:
        ConfigError: If the rule is malformed
    """
    slug = rule.slug
    if not slug:
        raise ConfigError("Image rule has an empty slug")
    if PATH_SEPARATOR in slug:
        raise ConfigError(f"Slug contains the entity path separator \"{PATH_SEPARATOR}\"", slug=slug)
    if not rule.field:
        raise ConfigError("Image rule has an empty field", slug=slug)

    files = dict(rule.files)
    if rule.save_original:
        files[ORIGINAL_VARIANT] = FileConfig(format=None, width=None, height=None)
    if not files:
        raise ConfigError("Image rule has no file variants", slug=slug)

    return EntitySchema(
        slug=slug,
        owner_type=_import_owner(rule.owner, slug),
        field=rule.field,
        translatable=rule.translatable,
        use_identity_slug_field=rule.use_slug,
        use_access_gate=rule.use_voter,
        variants=MappingProxyType(
            {name: _build_variant(name, config, slug) for name, config in files.items()}
        ),
    )


class SchemaRegistry:
    """
    Immutable, ordered collection of entity schemas.

    Built once at startup through ``register`` and passed by reference to
    every component that needs it.
    """

    def __init__(self, schemas: Iterable[EntitySchema] = ()) -> None:
        self._schemas: tuple[EntitySchema, ...] = tuple(schemas)

        seen: set[str] = set()
        for schema in self._schemas:
            if schema.slug in seen:
                raise ConfigError("Duplicate image slug", slug=schema.slug)
            seen.add(schema.slug)

    @classmethod
    def register(cls, rules: Iterable[RuleConfig | Mapping[str, Any]]) -> "SchemaRegistry":
        """
        Build the registry from configuration rules.

        Args:
            rules: RuleConfig models or raw rule mappings, in registration order

        Returns:
            SchemaRegistry: Read-only registry

        Raises:
            ConfigError: On a repeated slug, an empty variant map, or an invalid owner type
        """
        schemas = []
        for rule in rules:
            if not isinstance(rule, RuleConfig):
                rule = RuleConfig.model_validate(rule)
            schemas.append(build_schema(rule))

        registry = cls(schemas)
        logger.info(
            "Image schema registry built",
            extra={"schema_count": len(registry), "slugs": registry.slugs},
        )
        return registry

    @property
    def slugs(self) -> list[str]:
        """Registered slugs in registration order."""
        return [schema.slug for schema in self._schemas]

    def __iter__(self) -> Iterator[EntitySchema]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)

    def find_by_slug(self, slug: str) -> EntitySchema | None:
        """First schema registered under the slug, or None."""
        for schema in self._schemas:
            if schema.slug == slug:
                return schema
        return None

    def find_for_instance(self, entity: Any) -> EntitySchema | None:
        """First schema, in registration order, whose owner type matches the entity."""
        for schema in self._schemas:
            if schema.matches(entity):
                return schema
        return None
