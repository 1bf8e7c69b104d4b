"""Process-local repositories used by the ``memory`` vector-store backend."""

from .resource_repository import InMemoryResourceRepository
from .embedding_repository import (
    InMemoryEmbeddingRepository,
    cosine_similarities,
    cosine_similarity,
)

__all__ = [
    "InMemoryResourceRepository",
    "InMemoryEmbeddingRepository",
    "cosine_similarity",
    "cosine_similarities",
]
