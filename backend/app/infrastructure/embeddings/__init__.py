"""Embedding provider adapters."""

from .cohere_embedding_provider import CohereEmbeddingProvider

__all__ = ["CohereEmbeddingProvider"]
