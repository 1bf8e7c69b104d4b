"""Unit tests for the pgvector repository that need no running database."""

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateTable

from app.domain.entities import EmbeddingRecord
from app.domain.exceptions import StorageError
from app.infrastructure.database.models import EMBEDDING_DIMENSIONS, EmbeddingModel
from app.infrastructure.database.repositories.embedding_repository import (
    PgEmbeddingRepository,
    build_search_query,
    check_dimensions,
)


class UnusableSession:
    """Any attribute access means the repository touched the database."""

    def __getattr__(self, name):
        raise AssertionError(f"session.{name} should not be used")


def test_search_query_is_exact_cosine_scan():
    query = build_search_query([0.1, 0.2, 0.3], min_similarity=0.1, limit=10)
    sql = str(query.compile(dialect=postgresql.dialect()))

    assert "<=>" in sql
    assert "FROM embeddings" in sql
    assert "similarity DESC" in sql
    assert "embeddings.id ASC" in sql
    assert "LIMIT" in sql


def test_check_dimensions():
    check_dimensions([0.0] * 4, 4, "insert")
    with pytest.raises(StorageError) as exc_info:
        check_dimensions([0.0] * 3, 4, "insert")
    assert exc_info.value.operation == "insert"


@pytest.mark.asyncio
async def test_search_rejects_wrong_dimensions_before_querying():
    repo = PgEmbeddingRepository(UnusableSession(), dimensions=4)
    with pytest.raises(StorageError):
        await repo.search([1.0, 0.0], min_similarity=0.1, limit=10)


@pytest.mark.asyncio
async def test_insert_many_rejects_wrong_dimensions_before_writing():
    repo = PgEmbeddingRepository(UnusableSession(), dimensions=4)
    records = [
        EmbeddingRecord(resource_id="r1", content="ok", embedding=[0.0] * 4),
        EmbeddingRecord(resource_id="r1", content="bad", embedding=[0.0] * 3),
    ]
    with pytest.raises(StorageError):
        await repo.insert_many(records)


@pytest.mark.asyncio
async def test_insert_many_with_no_records_is_a_no_op():
    repo = PgEmbeddingRepository(UnusableSession(), dimensions=4)
    await repo.insert_many([])


def test_search_query_excludes_zero_norm_rows():
    query = build_search_query([0.1, 0.2, 0.3], min_similarity=0.1, limit=10)
    sql = str(query.compile(dialect=postgresql.dialect()))

    assert "vector_norm(embeddings.embedding) >" in sql


@pytest.mark.asyncio
async def test_search_with_zero_query_returns_nothing_without_querying():
    repo = PgEmbeddingRepository(UnusableSession(), dimensions=4)
    assert await repo.search([0.0] * 4, min_similarity=-1.0, limit=10) == []


def test_embeddings_table_ddl():
    ddl = str(CreateTable(EmbeddingModel.__table__).compile(dialect=postgresql.dialect()))

    assert f"embedding VECTOR({EMBEDDING_DIMENSIONS}) NOT NULL" in ddl
    assert "id SERIAL NOT NULL" in ddl
    assert "ON DELETE CASCADE" in ddl
