"""
Storage collaborator protocol.

The engine does not own persistence: it looks owning entities up, stages
records and entities for writing, and asks the store to flush or commit.
Transaction and consistency guarantees belong to the implementation.

Dependencies: None (pure domain layer)
System role: Boundary to the persisted-entity storage engine
"""

from typing import Any, Protocol


class ImageStore(Protocol):
    """Operations the processors and resolver need from storage."""

    def add(self, instance: Any) -> None:
        """Stage an image record or owning entity for writing."""
        ...

    async def flush(self) -> None:
        """Write staged changes without ending the transaction."""
        ...

    async def commit(self) -> None:
        """Durably commit staged changes."""
        ...

    async def find_entity(self, owner_type: type, identity: str, field: str | None = None) -> Any | None:
        """
        Load an owning entity.

        Args:
            owner_type: Entity class to query
            identity: Identity string from a URL or entity path
            field: Alternate unique field, None for the primary key

        Returns:
            The entity, or None when nothing matches
        """
        ...

    async def delete(self, instance: Any) -> None:
        """Delete a persisted image record."""
        ...
