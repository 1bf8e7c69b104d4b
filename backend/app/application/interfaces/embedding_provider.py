"""Abstract interface (port) for embedding generation."""

from abc import ABC, abstractmethod


class EmbeddingProvider(ABC):
    """Port for generating text embeddings — implemented in the infrastructure layer.

    Batch and single calls must use the same model so that stored chunk
    vectors and query vectors are comparable under cosine similarity.
    """

    @abstractmethod
    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Args:
            texts: List of text strings to embed.

        Returns:
            List of embedding vectors, one per input text, in input order.
            Each vector has the same dimensionality (determined by the model).
        """
        ...

    @abstractmethod
    async def generate_embedding(self, text: str) -> list[float]:
        """Generate a single embedding vector, e.g. for a search query."""
        ...

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of the service that produces the embeddings."""
        ...

    @property
    @abstractmethod
    def model(self) -> str:
        """Return the identifier of the embedding model in use."""
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Return the dimensionality of the embedding vectors produced by this provider."""
        ...
