from .resource_repository import SQLAlchemyResourceRepository
from .embedding_repository import PgEmbeddingRepository

__all__ = [
    "SQLAlchemyResourceRepository",
    "PgEmbeddingRepository",
]
