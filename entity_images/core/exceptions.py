"""
Exception hierarchy for the entity image engine.

Provides layered exception structure for configuration, resolution and
derivation errors. All exceptions include context for observability and
debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class EntityImageException(Exception):
    """Base exception for all entity image errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigError(EntityImageException):
    """Raised when the image rules cannot be turned into a schema registry."""

    def __init__(
        self,
        message: str,
        slug: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error message
            slug: Slug of the offending rule, if known
            details: Additional context
        """
        details = details or {}
        if slug is not None:
            details["slug"] = slug
        super().__init__(message, details)


class ResolutionError(EntityImageException):
    """Base exception for failures to find a schema."""

    pass


class UnresolvableSlug(ResolutionError):
    """Raised when no schema is registered under a slug."""

    def __init__(self, slug: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize unresolvable slug error.

        Args:
            slug: Requested slug
            details: Additional context
        """
        details = details or {}
        details["slug"] = slug
        super().__init__(f"Can't resolve slug \"{slug}\" for image", details)


class UnresolvableType(ResolutionError):
    """Raised when no schema matches the runtime type of an entity."""

    def __init__(self, entity_type: type, details: dict[str, Any] | None = None) -> None:
        """
        Initialize unresolvable type error.

        Args:
            entity_type: Runtime type of the entity
            details: Additional context
        """
        details = details or {}
        details["entity_type"] = entity_type.__qualname__
        super().__init__(
            f"Can't resolve image processor for object of class \"{entity_type.__qualname__}\"",
            details,
        )


class EntityNotFound(EntityImageException):
    """Raised when an identity does not correspond to an owning record."""

    def __init__(self, slug: str, identity: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize entity not found error.

        Args:
            slug: Schema slug used for the lookup
            identity: Identity that matched nothing
            details: Additional context
        """
        details = details or {}
        details.update({"slug": slug, "identity": identity})
        super().__init__(f"Entity not found: {slug}:{identity}", details)


class UnknownVariant(EntityImageException):
    """Raised when a variant name is absent from a schema."""

    def __init__(self, variant: str, slug: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize unknown variant error.

        Args:
            variant: Requested variant name
            slug: Schema slug
            details: Additional context
        """
        details = details or {}
        details.update({"variant": variant, "slug": slug})
        super().__init__(
            f"Can't resolve file size \"{variant}\" for schema \"{slug}\"",
            details,
        )


class EncodingError(EntityImageException):
    """Raised when a value cannot be placed in an encoded entity path."""

    def __init__(self, value: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize encoding error.

        Args:
            value: Value containing the reserved separator
            details: Additional context
        """
        details = details or {}
        details["value"] = value
        super().__init__(f"Value contains the entity path separator: {value!r}", details)


class DerivationError(EntityImageException):
    """Base exception for image transform failures."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize derivation error.

        Args:
            message: Error message
            path: File being read or written
            details: Additional context
        """
        details = details or {}
        if path is not None:
            details["path"] = path
        super().__init__(message, details)


class DecodeError(DerivationError):
    """Raised when a source file cannot be read as an image."""

    pass


class UnsupportedFormat(DerivationError):
    """Raised when no encoder exists for a target format."""

    pass
