from .retrieval import (
    IngestRequest,
    QueryRequest,
    IngestResponse,
    ResourceSchema,
    EmbeddingSummarySchema,
    ResourceDetailSchema,
    QueryMatchSchema,
    QueryResponse,
    ClearResponse,
)

__all__ = [
    "IngestRequest",
    "QueryRequest",
    "IngestResponse",
    "ResourceSchema",
    "EmbeddingSummarySchema",
    "ResourceDetailSchema",
    "QueryMatchSchema",
    "QueryResponse",
    "ClearResponse",
]
