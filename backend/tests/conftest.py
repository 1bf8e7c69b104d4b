"""Shared test fakes for the retrieval core."""

import asyncio
import re

import pytest

from app.application.interfaces import EmbeddingProvider
from app.application.services import RetrievalService
from app.domain.exceptions import EmbeddingProviderError
from app.infrastructure.memory import InMemoryEmbeddingRepository, InMemoryResourceRepository

# Bag-of-words vocabulary; any other word lands in the last slot.
VOCABULARY = [
    "the", "ocean", "is", "deep", "salty", "fish", "live", "there",
    "argo", "float", "temperature", "salinity",
]


class FakeEmbeddingProvider(EmbeddingProvider):
    """Deterministic bag-of-words embedder — identical text gives identical vectors."""

    def __init__(self):
        self.batch_calls: list[list[str]] = []
        self.single_calls: list[str] = []

    @property
    def provider_name(self) -> str:
        return "fake"

    @property
    def model(self) -> str:
        return "fake-bow"

    @property
    def dimensions(self) -> int:
        return len(VOCABULARY) + 1

    def _vector(self, text: str) -> list[float]:
        vector = [0.0] * self.dimensions
        for word in re.findall(r"[a-z]+", text.lower()):
            slot = VOCABULARY.index(word) if word in VOCABULARY else len(VOCABULARY)
            vector[slot] += 1.0
        return vector

    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        self.batch_calls.append(list(texts))
        return [self._vector(t) for t in texts]

    async def generate_embedding(self, text: str) -> list[float]:
        self.single_calls.append(text)
        return self._vector(text)



class FailingEmbeddingProvider(FakeEmbeddingProvider):
    """Provider whose every call fails like a rate-limited API."""

    async def generate_embeddings(self, texts):
        raise EmbeddingProviderError(provider="fake", status_code=429, message="Rate limit exceeded")

    async def generate_embedding(self, text):
        raise EmbeddingProviderError(provider="fake", status_code=429, message="Rate limit exceeded")


class SlowEmbeddingProvider(FakeEmbeddingProvider):
    """Provider that never answers within a short timeout."""

    async def generate_embeddings(self, texts):
        await asyncio.sleep(5)
        return await super().generate_embeddings(texts)

    async def generate_embedding(self, text):
        await asyncio.sleep(5)
        return await super().generate_embedding(text)


class ShortBatchEmbeddingProvider(FakeEmbeddingProvider):
    """Provider that drops the last vector of every batch."""

    async def generate_embeddings(self, texts):
        vectors = await super().generate_embeddings(texts)
        return vectors[:-1]


class SlowEmbeddingRepository(InMemoryEmbeddingRepository):
    """Store whose batch insert never completes within a short timeout."""

    async def insert_many(self, records):
        await asyncio.sleep(5)
        await super().insert_many(records)


@pytest.fixture
def embedding_provider() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def resource_repo() -> InMemoryResourceRepository:
    return InMemoryResourceRepository()


@pytest.fixture
def embedding_repo(embedding_provider: FakeEmbeddingProvider) -> InMemoryEmbeddingRepository:
    return InMemoryEmbeddingRepository(dimensions=embedding_provider.dimensions)


@pytest.fixture
def service(
    resource_repo: InMemoryResourceRepository,
    embedding_repo: InMemoryEmbeddingRepository,
    embedding_provider: FakeEmbeddingProvider,
) -> RetrievalService:
    return RetrievalService(resource_repo, embedding_repo, embedding_provider)


@pytest.fixture
def failing_embedding_provider() -> FailingEmbeddingProvider:
    return FailingEmbeddingProvider()


@pytest.fixture
def slow_embedding_provider() -> SlowEmbeddingProvider:
    return SlowEmbeddingProvider()


@pytest.fixture
def short_batch_embedding_provider() -> ShortBatchEmbeddingProvider:
    return ShortBatchEmbeddingProvider()


@pytest.fixture
def slow_embedding_repo(embedding_provider: FakeEmbeddingProvider) -> SlowEmbeddingRepository:
    return SlowEmbeddingRepository(dimensions=embedding_provider.dimensions)
