"""Domain-specific exceptions — framework-independent."""


class RetrievalError(Exception):
    """Base class for every error raised by the retrieval core."""


class EntityNotFoundError(RetrievalError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class ValidationError(RetrievalError):
    """Raised when input content or a query is empty or malformed."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class EmbeddingProviderError(RetrievalError):
    """Raised when the embedding model call fails or returns garbage.

    Covers network, auth, rate-limit and malformed-response failures.
    """

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{provider}] {status_code}: {message}")


class StorageError(RetrievalError):
    """Raised when an insert, search or delete against the store fails."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"Storage {operation} failed: {message}")


class RetrievalTimeoutError(RetrievalError):
    """Raised when an embedding or storage call exceeds its time budget."""

    def __init__(self, operation: str, timeout: float):
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"{operation} timed out after {timeout:g}s")


class IngestError(RetrievalError):
    """Raised when the create → chunk → embed → store pipeline fails.

    The underlying failure is kept on ``cause`` (and chained as ``__cause__``).
    """

    def __init__(self, message: str, cause: Exception | None = None):
        self.message = message
        self.cause = cause
        super().__init__(message)
