from .resource import Resource, IngestResult, ClearResult
from .embedding import EmbeddingRecord, SimilarityMatch

__all__ = [
    "Resource",
    "IngestResult",
    "ClearResult",
    "EmbeddingRecord",
    "SimilarityMatch",
]
