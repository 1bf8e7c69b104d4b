from .resource_models import ResourceModel
from .embedding_models import EmbeddingModel, EMBEDDING_DIMENSIONS

__all__ = [
    "ResourceModel",
    "EmbeddingModel",
    "EMBEDDING_DIMENSIONS",
]
