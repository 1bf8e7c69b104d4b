"""Abstract repository interface (port) for embedding records and vector search."""

from abc import ABC, abstractmethod

from app.domain.entities import EmbeddingRecord, SimilarityMatch


class EmbeddingRepository(ABC):
    """Port for embedding persistence and exact cosine-similarity search."""

    @abstractmethod
    async def insert_many(self, records: list[EmbeddingRecord]) -> None:
        """Persist a batch of records. Either every row becomes visible or none does."""
        ...

    @abstractmethod
    async def search(
        self,
        query_embedding: list[float],
        *,
        min_similarity: float,
        limit: int,
    ) -> list[SimilarityMatch]:
        """Find the records most similar to the query embedding.

        Similarity is ``1 - cosine_distance``. Only rows strictly above
        ``min_similarity`` are returned, ordered by descending similarity
        and then by insertion order, at most ``limit`` of them.
        """
        ...

    @abstractmethod
    async def list_by_resource(self, resource_id: str) -> list[EmbeddingRecord]:
        """Return the records of one resource in insertion (chunk) order."""
        ...

    @abstractmethod
    async def delete_by_resource(self, resource_id: str) -> int:
        """Delete all records for a resource. Returns count of deleted rows."""
        ...

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every record. Returns count of deleted rows."""
        ...
