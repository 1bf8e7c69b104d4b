"""Translate retrieval-core exceptions into HTTP errors."""

from fastapi import HTTPException, status

from app.domain.exceptions import (
    EmbeddingProviderError,
    EntityNotFoundError,
    IngestError,
    RetrievalError,
    RetrievalTimeoutError,
    StorageError,
    ValidationError,
)


def to_http_error(exc: RetrievalError) -> HTTPException:
    """Map a domain exception to an HTTPException with a distinguishable status."""
    if isinstance(exc, IngestError) and isinstance(exc.cause, RetrievalError):
        error = to_http_error(exc.cause)
        error.detail = exc.message
        return error
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=exc.message)
    if isinstance(exc, EntityNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, EmbeddingProviderError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"[{exc.provider}] {exc.message}",
        )
    if isinstance(exc, StorageError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    if isinstance(exc, RetrievalTimeoutError):
        return HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
