"""FastAPI dependency injection — wires infrastructure to application layer."""

import hmac
from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.application.interfaces import EmbeddingProvider
from app.application.services import RetrievalService
from app.infrastructure.database.session import get_db_session
from app.infrastructure.database.repositories import (
    PgEmbeddingRepository,
    SQLAlchemyResourceRepository,
)
from app.infrastructure.embeddings import CohereEmbeddingProvider
from app.infrastructure.memory import InMemoryEmbeddingRepository, InMemoryResourceRepository


@lru_cache
def get_memory_repositories() -> tuple[InMemoryResourceRepository, InMemoryEmbeddingRepository]:
    """Process-wide stores for the ``memory`` backend, shared by every request."""
    settings = get_settings()
    return (
        InMemoryResourceRepository(),
        InMemoryEmbeddingRepository(dimensions=settings.embedding_dimensions),
    )


def get_embedding_provider() -> EmbeddingProvider:
    """Provides the configured embedding model client."""
    settings = get_settings()
    return CohereEmbeddingProvider(
        api_key=settings.embedding_api_key,
        base_url=settings.embedding_base_url,
        model=settings.embedding_model,
        model_dimensions=settings.embedding_dimensions,
        timeout=settings.embedding_timeout_seconds,
    )


async def get_retrieval_service(
    session: AsyncSession = Depends(get_db_session),
    embedding_provider: EmbeddingProvider = Depends(get_embedding_provider),
) -> AsyncGenerator[RetrievalService, None]:
    """Provides a RetrievalService bound to the request's session (or the memory store)."""
    settings = get_settings()

    if settings.vector_store_backend == "memory":
        resource_repo, embedding_repo = get_memory_repositories()
    else:
        resource_repo = SQLAlchemyResourceRepository(session)
        embedding_repo = PgEmbeddingRepository(session, dimensions=settings.embedding_dimensions)

    yield RetrievalService(
        resource_repository=resource_repo,
        embedding_repository=embedding_repo,
        embedding_provider=embedding_provider,
        min_similarity=settings.retrieval_min_similarity,
        limit=settings.retrieval_limit,
        embedding_timeout=settings.embedding_timeout_seconds,
        storage_timeout=settings.storage_timeout_seconds,
    )


async def require_admin_token(
    x_admin_token: str | None = Header(default=None),
) -> None:
    """Gate destructive, unscoped operations behind the shared admin token."""
    expected = get_settings().admin_token
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Bulk clear is disabled: ADMIN_TOKEN is not configured",
        )
    if x_admin_token is None or not hmac.compare_digest(x_admin_token, expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin token",
        )
