"""
Processor context.

Bundles everything a processor needs besides its schema and entity: the
registry, image settings, storage, access oracle, derivation pipeline and
identity locks. Registry, settings, pipeline and locks are process-wide and
shared by reference; the store is scoped to one unit of work.

Dependencies: entity_images.configs, entity_images.core
System role: Explicit wiring passed to processors and the resolver
"""

from dataclasses import dataclass, field

from entity_images.boundary.imaging.pipeline import DerivationPipeline
from entity_images.configs.images import ImageSettings
from entity_images.core.access_gate import AccessGate
from entity_images.core.locks import IdentityLocks
from entity_images.core.schema import SchemaRegistry
from entity_images.core.site_locale import get_current_locale
from entity_images.core.store import ImageStore


@dataclass(frozen=True)
class ProcessorContext:
    """Immutable collaborators shared by the processors of one unit of work."""

    registry: SchemaRegistry
    settings: ImageSettings
    store: ImageStore
    access_gate: AccessGate
    pipeline: DerivationPipeline = field(default_factory=DerivationPipeline)
    locks: IdentityLocks = field(default_factory=IdentityLocks)

    def current_locale(self) -> str:
        """Ambient site locale, falling back to the configured default."""
        return get_current_locale(self.settings.default_locale)
