from .text_chunker import generate_chunks
from .retrieval_service import RetrievalService

__all__ = [
    "generate_chunks",
    "RetrievalService",
]
