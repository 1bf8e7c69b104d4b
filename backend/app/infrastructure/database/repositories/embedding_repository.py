"""SQLAlchemy implementation of EmbeddingRepository — pgvector-powered vector search."""

import logging

from sqlalchemy import Select, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces import EmbeddingRepository
from app.domain.entities import EmbeddingRecord, SimilarityMatch
from app.domain.exceptions import StorageError
from app.infrastructure.database.models import EmbeddingModel, EMBEDDING_DIMENSIONS

logger = logging.getLogger(__name__)


def check_dimensions(vector: list[float], dimensions: int, operation: str) -> None:
    """Reject vectors whose length differs from the store's fixed dimensionality."""
    if len(vector) != dimensions:
        raise StorageError(
            operation,
            f"vector has {len(vector)} dimensions, store expects {dimensions}",
        )


def build_search_query(
    query_embedding: list[float], *, min_similarity: float, limit: int
) -> Select:
    """Build the exact cosine-similarity scan.

    ``<=>`` is pgvector's cosine distance, so ``1 - distance`` is cosine
    similarity. Ties are broken by id, i.e. insertion order. Zero-norm rows
    are excluded: their distance is NaN, which Postgres sorts above every
    number and treats as greater than any threshold.
    """
    similarity = (
        1 - EmbeddingModel.embedding.cosine_distance(query_embedding)
    ).label("similarity")

    return (
        select(EmbeddingModel.content, EmbeddingModel.resource_id, similarity)
        .where(func.vector_norm(EmbeddingModel.embedding) > 0)
        .where(similarity > min_similarity)
        .order_by(similarity.desc(), EmbeddingModel.id.asc())
        .limit(limit)
    )


class PgEmbeddingRepository(EmbeddingRepository):
    """Concrete embedding repository backed by PostgreSQL + pgvector."""

    def __init__(self, session: AsyncSession, dimensions: int = EMBEDDING_DIMENSIONS):
        self._session = session
        self._dimensions = dimensions

    async def insert_many(self, records: list[EmbeddingRecord]) -> None:
        """Add every row and flush once; the request transaction commits them together."""
        if not records:
            return

        for record in records:
            check_dimensions(record.embedding, self._dimensions, "insert")

        models = [
            EmbeddingModel(
                resource_id=record.resource_id,
                content=record.content,
                embedding=record.embedding,
            )
            for record in records
        ]

        try:
            self._session.add_all(models)
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise StorageError("insert", str(exc)) from exc

        for record, model in zip(records, models, strict=True):
            record.id = model.id
        logger.info("Stored %d embeddings for resource %s", len(models), records[0].resource_id)

    async def search(
        self,
        query_embedding: list[float],
        *,
        min_similarity: float,
        limit: int,
    ) -> list[SimilarityMatch]:
        check_dimensions(query_embedding, self._dimensions, "search")
        if not any(query_embedding):
            # A zero query has NaN similarity to every row
            return []
        query = build_search_query(
            query_embedding, min_similarity=min_similarity, limit=limit
        )

        try:
            result = await self._session.execute(query)
        except SQLAlchemyError as exc:
            raise StorageError("search", str(exc)) from exc

        return [
            SimilarityMatch(
                content=row.content,
                similarity=float(row.similarity),
                resource_id=row.resource_id,
            )
            for row in result.all()
        ]

    async def list_by_resource(self, resource_id: str) -> list[EmbeddingRecord]:
        try:
            result = await self._session.execute(
                select(EmbeddingModel)
                .where(EmbeddingModel.resource_id == resource_id)
                .order_by(EmbeddingModel.id.asc())
            )
        except SQLAlchemyError as exc:
            raise StorageError("select", str(exc)) from exc

        return [
            EmbeddingRecord(
                id=model.id,
                resource_id=model.resource_id,
                content=model.content,
                embedding=[float(v) for v in model.embedding],
                created_at=model.created_at,
            )
            for model in result.scalars().all()
        ]

    async def delete_by_resource(self, resource_id: str) -> int:
        try:
            result = await self._session.execute(
                delete(EmbeddingModel).where(EmbeddingModel.resource_id == resource_id)
            )
        except SQLAlchemyError as exc:
            raise StorageError("delete", str(exc)) from exc
        count = result.rowcount
        if count > 0:
            logger.info("Deleted %d embeddings for resource %s", count, resource_id)
        return count

    async def delete_all(self) -> int:
        try:
            result = await self._session.execute(delete(EmbeddingModel))
        except SQLAlchemyError as exc:
            raise StorageError("delete", str(exc)) from exc
        return result.rowcount
