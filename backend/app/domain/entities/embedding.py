"""Domain entities for chunk embeddings and similarity matches."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class EmbeddingRecord:
    """A chunk of a resource together with its embedding vector.

    Every record belongs to exactly one resource. ``content`` is the chunk
    text, positionally aligned with the vector produced for it.
    """

    resource_id: str
    content: str
    embedding: list[float] = field(default_factory=list)
    id: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class SimilarityMatch:
    """A single search hit, ranked by cosine similarity (-1.0 – 1.0)."""

    content: str
    similarity: float
    resource_id: str | None = None
