"""Abstract repository interface (port) for knowledge-base resources."""

from abc import ABC, abstractmethod

from app.domain.entities import Resource


class ResourceRepository(ABC):
    """Port for resource persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def create(self, resource: Resource) -> Resource:
        """Persist a new resource and return it with its generated ID."""
        ...

    @abstractmethod
    async def get_by_id(self, resource_id: str) -> Resource | None:
        """Retrieve a single resource by its ID."""
        ...

    @abstractmethod
    async def list_all(self) -> list[Resource]:
        """Return every resource, oldest first."""
        ...

    @abstractmethod
    async def delete(self, resource_id: str) -> bool:
        """Delete a resource. Returns True if deleted, False if not found."""
        ...

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every resource. Returns count of deleted rows.

        Embeddings must be cleared first; see EmbeddingRepository.delete_all.
        """
        ...
