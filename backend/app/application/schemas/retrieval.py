"""Pydantic schemas for knowledge-base ingestion and query API requests and responses."""

from datetime import datetime

from pydantic import BaseModel, Field


# ── Request Schemas ──────────────────────────────────────────────────


class IngestRequest(BaseModel):
    """Request body for adding text content to the knowledge base."""

    content: str = Field(..., description="Raw text; split into chunks on every period")


class QueryRequest(BaseModel):
    """Request body for a semantic search."""

    question: str = Field(..., description="Free-text question to ground an answer for")
    min_similarity: float | None = Field(
        default=None, ge=-1.0, le=1.0, description="Override the configured similarity threshold"
    )
    limit: int | None = Field(default=None, ge=1, le=100, description="Maximum number of results")


# ── Response Schemas ─────────────────────────────────────────────────


class IngestResponse(BaseModel):
    """Result of a successful ingestion."""

    resource_id: str
    chunk_count: int
    message: str


class ResourceSchema(BaseModel):
    """A stored resource."""

    id: str
    content: str
    created_at: datetime
    updated_at: datetime


class EmbeddingSummarySchema(BaseModel):
    """A stored chunk, without its vector."""

    id: int
    content: str
    dimensions: int


class ResourceDetailSchema(ResourceSchema):
    """A resource together with the chunks it was embedded as."""

    embeddings: list[EmbeddingSummarySchema] = []


class QueryMatchSchema(BaseModel):
    """A single ranked chunk."""

    content: str
    similarity: float
    resource_id: str | None = None


class QueryResponse(BaseModel):
    """Ranked matches for a question; may be empty."""

    matches: list[QueryMatchSchema] = []
    total_matches: int = 0


class ClearResponse(BaseModel):
    """Row counts removed by a bulk clear."""

    deleted_embeddings: int
    deleted_resources: int
    message: str
