from .embedding_provider import EmbeddingProvider
from .resource_repository import ResourceRepository
from .embedding_repository import EmbeddingRepository

__all__ = [
    "EmbeddingProvider",
    "ResourceRepository",
    "EmbeddingRepository",
]
