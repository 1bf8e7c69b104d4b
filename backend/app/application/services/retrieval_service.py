"""Retrieval service — orchestrates ingestion and semantic search.

This is an application service that coordinates:
1. Creating a resource for new content
2. Splitting it into period-delimited chunks
3. Generating embeddings for all chunks via the EmbeddingProvider
4. Storing chunks + embeddings via the EmbeddingRepository
5. Embedding a question and ranking stored chunks by cosine similarity
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from app.application.interfaces import (
    EmbeddingProvider,
    EmbeddingRepository,
    ResourceRepository,
)
from app.application.services.text_chunker import generate_chunks
from app.domain.entities import (
    ClearResult,
    EmbeddingRecord,
    IngestResult,
    Resource,
    SimilarityMatch,
)
from app.domain.exceptions import (
    EmbeddingProviderError,
    EntityNotFoundError,
    IngestError,
    RetrievalTimeoutError,
    ValidationError,
)
from app.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("RetrievalPipeline")

T = TypeVar("T")

# ── Defaults ────────────────────────────────────────────────────────
DEFAULT_MIN_SIMILARITY = 0.1
DEFAULT_LIMIT = 10
_DEFAULT_TIMEOUT = 30.0


class RetrievalService:
    """Application service for the knowledge-base ingestion and query paths.

    Ingestion is atomic from the caller's point of view: when embedding or
    storage fails, the freshly created resource is deleted again before
    ``IngestError`` is raised.
    """

    def __init__(
        self,
        resource_repository: ResourceRepository,
        embedding_repository: EmbeddingRepository,
        embedding_provider: EmbeddingProvider,
        *,
        min_similarity: float = DEFAULT_MIN_SIMILARITY,
        limit: int = DEFAULT_LIMIT,
        embedding_timeout: float = _DEFAULT_TIMEOUT,
        storage_timeout: float = _DEFAULT_TIMEOUT,
    ):
        self._resource_repo = resource_repository
        self._embedding_repo = embedding_repository
        self._embedding_provider = embedding_provider
        self._min_similarity = min_similarity
        self._limit = limit
        self._embedding_timeout = embedding_timeout
        self._storage_timeout = storage_timeout

    # ── Ingestion ────────────────────────────────────────────────────

    async def ingest(self, content: str) -> IngestResult:
        """Create a resource, chunk it, embed every chunk and store the vectors.

        Raises:
            IngestError: wrapping ValidationError, EmbeddingProviderError,
                StorageError or RetrievalTimeoutError.
        """
        resource: Resource | None = None
        try:
            text = (content or "").strip()
            if not text:
                raise ValidationError("Content cannot be empty")

            with plog.timed_step(PipelineStage.RESOURCE, "Creating resource", chars=len(text)):
                resource = await self._store(
                    self._resource_repo.create(Resource(content=text)), "create resource"
                )

            chunks = generate_chunks(text)
            plog.step_complete(
                PipelineStage.CHUNK, f"Split into {len(chunks)} chunk(s)", resource_id=resource.id
            )

            if chunks:
                with plog.timed_step(PipelineStage.EMBED, f"Embedding {len(chunks)} chunk(s)"):
                    vectors = await self._embed(
                        self._embedding_provider.generate_embeddings(chunks), "embed chunks"
                    )
                if len(vectors) != len(chunks):
                    raise EmbeddingProviderError(
                        provider=self._embedding_provider.provider_name,
                        status_code=502,
                        message=f"Expected {len(chunks)} embeddings, got {len(vectors)}",
                    )

                records = [
                    EmbeddingRecord(resource_id=resource.id, content=chunk, embedding=vector)
                    for chunk, vector in zip(chunks, vectors, strict=True)
                ]
                with plog.timed_step(PipelineStage.STORE, f"Storing {len(records)} embedding(s)"):
                    await self._store(
                        self._embedding_repo.insert_many(records), "insert embeddings"
                    )

        except Exception as exc:
            if resource is not None:
                await self._discard_resource(resource.id)
            plog.step_error(PipelineStage.PIPELINE, "Ingestion failed", error=exc)
            raise IngestError(f"Ingestion failed: {exc}", cause=exc) from exc

        plog.step_complete(
            PipelineStage.COMPLETE,
            "Resource ingested",
            resource_id=resource.id,
            chunks=len(chunks),
        )
        return IngestResult(resource_id=resource.id, chunk_count=len(chunks))

    async def _discard_resource(self, resource_id: str) -> None:
        """Compensating delete for a resource whose embeddings never landed."""
        try:
            await self._store(self._embedding_repo.delete_by_resource(resource_id), "delete embeddings")
            await self._store(self._resource_repo.delete(resource_id), "delete resource")
            logger.info("Rolled back resource %s after failed ingestion", resource_id)
        except Exception as exc:
            # The request transaction rollback still applies on the SQL backend
            logger.warning("Could not roll back resource %s: %s", resource_id, exc)

    # ── Query ────────────────────────────────────────────────────────

    async def query(
        self,
        question: str,
        *,
        min_similarity: float | None = None,
        limit: int | None = None,
    ) -> list[SimilarityMatch]:
        """Embed the question and return matching chunks, most similar first.

        An empty list means nothing cleared the threshold; it is not an error.
        """
        text = (question or "").strip()
        if not text:
            raise ValidationError("Question cannot be empty")

        threshold = self._min_similarity if min_similarity is None else min_similarity
        top_k = self._limit if limit is None else limit
        if top_k < 1:
            raise ValidationError("Limit must be at least 1")

        with plog.timed_step(PipelineStage.SEARCH, "Searching knowledge base", threshold=threshold, limit=top_k):
            vector = await self._embed(
                self._embedding_provider.generate_embedding(text), "embed query"
            )
            matches = await self._store(
                self._embedding_repo.search(vector, min_similarity=threshold, limit=top_k),
                "similarity search",
            )

        plog.stats(
            matches=len(matches),
            top=f"{matches[0].similarity:.3f}" if matches else "-",
        )
        return matches

    # ── Resource administration ──────────────────────────────────────

    async def list_resources(self) -> list[Resource]:
        return await self._store(self._resource_repo.list_all(), "list resources")

    async def get_resource(self, resource_id: str) -> Resource:
        resource = await self._store(self._resource_repo.get_by_id(resource_id), "get resource")
        if resource is None:
            raise EntityNotFoundError("Resource", resource_id)
        return resource

    async def get_resource_embeddings(self, resource_id: str) -> list[EmbeddingRecord]:
        await self.get_resource(resource_id)
        return await self._store(
            self._embedding_repo.list_by_resource(resource_id), "list embeddings"
        )

    async def delete_resource(self, resource_id: str) -> None:
        """Delete one resource, its embeddings first."""
        await self.get_resource(resource_id)
        removed = await self._store(
            self._embedding_repo.delete_by_resource(resource_id), "delete embeddings"
        )
        await self._store(self._resource_repo.delete(resource_id), "delete resource")
        logger.info("Deleted resource %s (%d embeddings)", resource_id, removed)

    async def clear_all(self) -> ClearResult:
        """Remove every embedding, then every resource.

        Global and unscoped: callers must gate this behind authorization.
        """
        with plog.timed_step(PipelineStage.CLEAR, "Clearing knowledge base"):
            deleted_embeddings = await self._store(self._embedding_repo.delete_all(), "delete embeddings")
            deleted_resources = await self._store(self._resource_repo.delete_all(), "delete resources")

        plog.stats(embeddings=deleted_embeddings, resources=deleted_resources)
        return ClearResult(
            deleted_embeddings=deleted_embeddings,
            deleted_resources=deleted_resources,
        )

    # ── Timeout wrappers ─────────────────────────────────────────────

    async def _embed(self, call: Awaitable[T], operation: str) -> T:
        return await _with_timeout(call, self._embedding_timeout, operation)

    async def _store(self, call: Awaitable[T], operation: str) -> T:
        return await _with_timeout(call, self._storage_timeout, operation)


async def _with_timeout(call: Awaitable[T], timeout: float, operation: str) -> T:
    try:
        return await asyncio.wait_for(call, timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise RetrievalTimeoutError(operation, timeout) from exc
