"""In-memory implementation of EmbeddingRepository — exact cosine scan over a numpy matrix."""

import asyncio
import logging
from dataclasses import replace

import numpy as np

from app.application.interfaces import EmbeddingRepository
from app.domain.entities import EmbeddingRecord, SimilarityMatch
from app.domain.exceptions import StorageError

logger = logging.getLogger(__name__)


def cosine_similarities(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """Return ``1 - cosine_distance`` between every row of ``matrix`` and ``query``.

    Zero vectors have no direction; like pgvector, their similarity is NaN,
    which never compares greater than a threshold.
    """
    dots = matrix @ query
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.where(norms == 0.0, np.nan, dots / norms)


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """Cosine similarity of two vectors (NaN when either has zero norm)."""
    matrix = np.asarray([a], dtype=np.float64)
    return float(cosine_similarities(matrix, np.asarray(b, dtype=np.float64))[0])


class InMemoryEmbeddingRepository(EmbeddingRepository):
    """Embedding store kept as a numpy matrix; ids are assigned in insertion order.

    Row ``i`` of ``_matrix`` is the vector of ``_records[i]``, so row order is
    insertion order.
    """

    def __init__(self, dimensions: int):
        self._dimensions = dimensions
        self._records: list[EmbeddingRecord] = []
        self._matrix = np.empty((0, dimensions), dtype=np.float64)
        self._next_id = 1
        self._lock = asyncio.Lock()

    def _check_dimensions(self, vector: list[float], operation: str) -> None:
        if len(vector) != self._dimensions:
            raise StorageError(
                operation,
                f"vector has {len(vector)} dimensions, store expects {self._dimensions}",
            )

    async def insert_many(self, records: list[EmbeddingRecord]) -> None:
        """Validate the whole batch, then publish it in one step."""
        if not records:
            return

        for record in records:
            self._check_dimensions(record.embedding, "insert")
        rows = np.asarray([record.embedding for record in records], dtype=np.float64)

        async with self._lock:
            batch: list[EmbeddingRecord] = []
            for offset, record in enumerate(records):
                record.id = self._next_id + offset
                batch.append(replace(record, embedding=list(record.embedding)))
            self._next_id += len(batch)
            self._records.extend(batch)
            self._matrix = np.vstack([self._matrix, rows])

        logger.info("Stored %d embeddings for resource %s", len(batch), records[0].resource_id)

    async def search(
        self,
        query_embedding: list[float],
        *,
        min_similarity: float,
        limit: int,
    ) -> list[SimilarityMatch]:
        self._check_dimensions(query_embedding, "search")
        if limit <= 0 or not self._records:
            return []

        records, matrix = self._records, self._matrix
        scores = cosine_similarities(matrix, np.asarray(query_embedding, dtype=np.float64))

        # NaN > x is False, so zero vectors drop out here
        hits = np.flatnonzero(scores > min_similarity)
        # Stable sort keeps ascending row (= id) order among equal scores
        ranked = hits[np.argsort(-scores[hits], kind="stable")][:limit]

        return [
            SimilarityMatch(
                content=records[i].content,
                similarity=float(scores[i]),
                resource_id=records[i].resource_id,
            )
            for i in ranked
        ]

    async def list_by_resource(self, resource_id: str) -> list[EmbeddingRecord]:
        return [
            replace(r, embedding=list(r.embedding))
            for r in self._records
            if r.resource_id == resource_id
        ]

    async def delete_by_resource(self, resource_id: str) -> int:
        async with self._lock:
            keep = np.array(
                [r.resource_id != resource_id for r in self._records], dtype=bool
            )
            count = len(self._records) - int(keep.sum())
            self._records = [r for r, kept in zip(self._records, keep) if kept]
            self._matrix = self._matrix[keep]
        if count > 0:
            logger.info("Deleted %d embeddings for resource %s", count, resource_id)
        return count

    async def delete_all(self) -> int:
        async with self._lock:
            count = len(self._records)
            self._records = []
            self._matrix = np.empty((0, self._dimensions), dtype=np.float64)
            return count
