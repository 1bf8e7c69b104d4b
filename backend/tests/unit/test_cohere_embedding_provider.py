"""Unit tests for the CohereEmbeddingProvider."""

import json

import httpx
import pytest

from app.domain.exceptions import EmbeddingProviderError
from app.infrastructure.embeddings import CohereEmbeddingProvider


# ── Helpers ──


def _mock_embeddings_response(vectors: list[list[float]], *, reverse: bool = False) -> dict:
    """Build a mock OpenAI-compatible embeddings response."""
    data = [
        {"object": "embedding", "index": i, "embedding": v}
        for i, v in enumerate(vectors)
    ]
    if reverse:
        data.reverse()
    return {
        "object": "list",
        "data": data,
        "model": "embed-english-v3.0",
        "usage": {"prompt_tokens": 4, "total_tokens": 4},
    }


def _make_mock_transport(
    response_data: dict | None = None,
    status_code: int = 200,
    captured: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """Create a mock transport that returns a fixed response."""

    def handler(request: httpx.Request) -> httpx.Response:
        if captured is not None:
            captured.append(request)
        return httpx.Response(status_code, json=response_data or {})

    return httpx.MockTransport(handler)


def _provider(transport: httpx.MockTransport) -> CohereEmbeddingProvider:
    return CohereEmbeddingProvider(
        api_key="test-key",
        model_dimensions=3,
        http_client=httpx.AsyncClient(transport=transport),
    )


# ── Tests ──


@pytest.mark.asyncio
async def test_generate_embeddings_sends_model_and_inputs():
    captured: list[httpx.Request] = []
    transport = _make_mock_transport(
        _mock_embeddings_response([[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]]), captured=captured
    )

    result = await _provider(transport).generate_embeddings(["first", "second"])

    assert result == [[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]]
    request = captured[0]
    assert request.url.path.endswith("/embeddings")
    assert request.headers["Authorization"] == "Bearer test-key"
    body = json.loads(request.content)
    assert body["model"] == "embed-english-v3.0"
    assert body["input"] == ["first", "second"]


@pytest.mark.asyncio
async def test_generate_embeddings_restores_input_order():
    transport = _make_mock_transport(
        _mock_embeddings_response([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]], reverse=True)
    )

    result = await _provider(transport).generate_embeddings(["a", "b"])

    assert result == [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]


@pytest.mark.asyncio
async def test_generate_embedding_returns_single_vector():
    transport = _make_mock_transport(_mock_embeddings_response([[1, 2, 3]]))

    result = await _provider(transport).generate_embedding("salty ocean")

    assert result == [1.0, 2.0, 3.0]
    assert all(isinstance(v, float) for v in result)


@pytest.mark.asyncio
async def test_empty_batch_makes_no_request():
    captured: list[httpx.Request] = []
    transport = _make_mock_transport(captured=captured)

    assert await _provider(transport).generate_embeddings([]) == []
    assert captured == []


@pytest.mark.asyncio
async def test_error_status_raises_provider_error():
    transport = _make_mock_transport(
        {"error": {"message": "Rate limit exceeded"}}, status_code=429
    )

    with pytest.raises(EmbeddingProviderError) as exc_info:
        await _provider(transport).generate_embeddings(["x"])

    assert exc_info.value.status_code == 429
    assert "Rate limit" in exc_info.value.message
    assert exc_info.value.provider == "cohere"


@pytest.mark.asyncio
async def test_count_mismatch_raises_provider_error():
    transport = _make_mock_transport(_mock_embeddings_response([[0.1, 0.2, 0.3]]))

    with pytest.raises(EmbeddingProviderError):
        await _provider(transport).generate_embeddings(["a", "b"])


@pytest.mark.asyncio
async def test_non_numeric_vector_raises_provider_error():
    transport = _make_mock_transport(_mock_embeddings_response([["a", "b", "c"]]))

    with pytest.raises(EmbeddingProviderError):
        await _provider(transport).generate_embeddings(["a"])


@pytest.mark.asyncio
async def test_missing_data_raises_provider_error():
    transport = _make_mock_transport({"object": "list"})

    with pytest.raises(EmbeddingProviderError):
        await _provider(transport).generate_embeddings(["a"])


@pytest.mark.asyncio
async def test_transport_failure_raises_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    provider = _provider(httpx.MockTransport(handler))

    with pytest.raises(EmbeddingProviderError) as exc_info:
        await provider.generate_embeddings(["a"])

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_duplicate_indices_raise_provider_error():
    response = _mock_embeddings_response([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    for item in response["data"]:
        item["index"] = 1
    transport = _make_mock_transport(response)

    with pytest.raises(EmbeddingProviderError) as exc_info:
        await _provider(transport).generate_embeddings(["a", "b"])

    assert exc_info.value.status_code == 502
    assert "indices" in exc_info.value.message


@pytest.mark.asyncio
async def test_missing_index_raises_provider_error():
    response = _mock_embeddings_response([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    del response["data"][0]["index"]
    transport = _make_mock_transport(response)

    with pytest.raises(EmbeddingProviderError):
        await _provider(transport).generate_embeddings(["a", "b"])
