"""Domain entity for ingested knowledge-base resources."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from app.domain.exceptions import ValidationError


@dataclass
class Resource:
    """A unit of original text content added to the knowledge base.

    Resources are immutable once created: their embeddings are exactly the
    chunking of ``content`` at ingestion time.
    """

    content: str
    id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not isinstance(self.content, str) or not self.content.strip():
            raise ValidationError("Content cannot be empty")


@dataclass
class IngestResult:
    """Outcome of a successful ingestion."""

    resource_id: str
    chunk_count: int


@dataclass
class ClearResult:
    """Row counts removed by a bulk clear."""

    deleted_embeddings: int
    deleted_resources: int
