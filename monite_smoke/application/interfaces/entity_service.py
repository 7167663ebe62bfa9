"""Abstract entity service interface (port) for the entity-management API."""

from abc import ABC, abstractmethod

from monite_smoke.application.schemas.entity import EntityCreate, EntityUpdate
from monite_smoke.domain.entities import Entity


class EntityService(ABC):
    """Port for the entity-management backend used by the smoke test."""

    @abstractmethod
    async def create_entity(self, record: EntityCreate) -> Entity:
        """Create an entity and return it with its server-assigned id.

        Raises:
            EntityServiceError: If the backend rejects the request.
        """
        ...

    @abstractmethod
    async def get_entity(self, entity_id: str) -> Entity | None:
        """Retrieve an entity by id. Returns None if it does not exist."""
        ...

    @abstractmethod
    async def list_entities(self) -> list[Entity]:
        """Retrieve every entity visible to the client."""
        ...

    @abstractmethod
    async def update_entity(self, entity_id: str, patch: EntityUpdate) -> Entity:
        """Apply a partial update and return the updated entity."""
        ...

    @abstractmethod
    async def delete_entity(self, entity_id: str) -> None:
        """Delete an entity."""
        ...
