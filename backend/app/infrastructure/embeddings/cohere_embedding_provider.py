"""Cohere embedding provider — calls the OpenAI-compatible /embeddings endpoint.

Default model: embed-english-v3.0 (1024 dimensions). Any server that speaks
the OpenAI embeddings wire format can be targeted through ``base_url``.
"""

import json
import logging
from typing import Any

import httpx

from app.application.interfaces.embedding_provider import EmbeddingProvider
from app.domain.exceptions import EmbeddingProviderError

logger = logging.getLogger(__name__)


class CohereEmbeddingProvider(EmbeddingProvider):
    """Infrastructure adapter — generates embeddings via the Cohere compatibility API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.cohere.ai/compatibility/v1",
        model: str = "embed-english-v3.0",
        model_dimensions: int = 1024,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._dimensions = model_dimensions
        self._timeout = timeout
        self._http_client = http_client

    @property
    def provider_name(self) -> str:
        return "cohere"

    @property
    def model(self) -> str:
        return self._model

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a batch of texts, preserving input order."""
        if not texts:
            return []

        url = f"{self._base_url}/embeddings"
        payload: dict[str, Any] = {
            "model": self._model,
            "input": texts,
            "encoding_format": "float",
        }

        client = await self._get_client()
        should_close = self._http_client is None

        try:
            try:
                response = await client.post(
                    url, headers=self._get_headers(), json=payload
                )
            except httpx.TimeoutException as exc:
                raise EmbeddingProviderError(
                    provider=self.provider_name,
                    status_code=504,
                    message=f"Request timed out: {exc}",
                ) from exc
            except httpx.HTTPError as exc:
                raise EmbeddingProviderError(
                    provider=self.provider_name,
                    status_code=503,
                    message=f"Request failed: {exc}",
                ) from exc

            if response.status_code != 200:
                self._raise_provider_error(response)

            try:
                data = response.json()
            except json.JSONDecodeError as exc:
                raise EmbeddingProviderError(
                    provider=self.provider_name,
                    status_code=502,
                    message="Response body is not valid JSON",
                ) from exc

            result = self._parse_embeddings(data, expected=len(texts))

            logger.info(
                "Generated %d embeddings (model=%s, dims=%d)",
                len(result),
                self._model,
                len(result[0]) if result else 0,
            )
            return result

        finally:
            if should_close:
                await client.aclose()

    async def generate_embedding(self, text: str) -> list[float]:
        """Generate a single embedding, e.g. for a search query."""
        results = await self.generate_embeddings([text])
        return results[0]

    def _parse_embeddings(self, data: Any, *, expected: int) -> list[list[float]]:
        """Validate the response shape and coerce vectors to ``list[float]``."""
        items = data.get("data") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise EmbeddingProviderError(
                provider=self.provider_name,
                status_code=502,
                message="Response has no 'data' list",
            )
        if len(items) != expected:
            raise EmbeddingProviderError(
                provider=self.provider_name,
                status_code=502,
                message=f"Expected {expected} embeddings, got {len(items)}",
            )

        # Each input position must come back exactly once
        indices = [item.get("index") if isinstance(item, dict) else None for item in items]
        if sorted(i for i in indices if isinstance(i, int)) != list(range(expected)):
            raise EmbeddingProviderError(
                provider=self.provider_name,
                status_code=502,
                message="Response indices do not match inputs",
            )
        ordered = sorted(items, key=lambda x: x["index"])

        vectors: list[list[float]] = []
        for item in ordered:
            raw = item.get("embedding")
            if not isinstance(raw, list) or not raw:
                raise EmbeddingProviderError(
                    provider=self.provider_name,
                    status_code=502,
                    message="Embedding entry is missing or empty",
                )
            try:
                vectors.append([float(v) for v in raw])
            except (TypeError, ValueError) as exc:
                raise EmbeddingProviderError(
                    provider=self.provider_name,
                    status_code=502,
                    message="Embedding contains non-numeric values",
                ) from exc
        return vectors

    def _raise_provider_error(self, response: httpx.Response) -> None:
        """Raise EmbeddingProviderError from a non-200 httpx Response."""
        try:
            data = response.json()
            error = data.get("error") or {}
            if isinstance(error, dict):
                message = error.get("message", response.text)
            else:
                message = data.get("message", response.text)
        except Exception:
            message = response.text

        logger.error(
            "Embedding API error %d: %s", response.status_code, str(message)[:500]
        )
        raise EmbeddingProviderError(
            provider=self.provider_name,
            status_code=response.status_code,
            message=str(message)[:500],
        )
