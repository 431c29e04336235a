"""
Domain errors.

Every error carries a human-readable ``message`` plus a ``details`` dict
that the API layer logs and, for client errors, returns. Routers map the
classes to HTTP status codes in one place (api/routers/error_handling.py).

    RagBackendException
    ├── ValidationError
    │   └── EmptyVectorError
    ├── EmbeddingProviderError
    │   └── EmbeddingNotConfiguredError
    └── VectorStoreError
        └── DimensionMismatchError

Dependencies: None (pure domain layer)
System role: Error vocabulary shared by every layer
"""

from typing import Any

EMPTY_VECTOR_MESSAGE = "vector must have at least 1 dimension"


def _with_context(details: dict[str, Any] | None, **context: Any) -> dict[str, Any]:
    merged = dict(details or {})
    merged.update({key: value for key, value in context.items() if value is not None})
    return merged


class RagBackendException(Exception):
    """Root of the hierarchy; catch this to handle any domain failure."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message} | Details: {self.details}"


class ValidationError(RagBackendException):
    """Caller supplied bad input; maps to HTTP 400."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, _with_context(details, field=field))


class EmptyVectorError(ValidationError):
    """
    Embedding is missing or has zero elements.

    The message is always EMPTY_VECTOR_MESSAGE; the RAG service reports
    it verbatim to the caller instead of a generic failure.
    """

    def __init__(self, field: str = "embedding", details: dict[str, Any] | None = None) -> None:
        super().__init__(EMPTY_VECTOR_MESSAGE, field=field, details=details)


class EmbeddingProviderError(RagBackendException):
    """
    Remote embedding API failed.

    Args:
        message: What went wrong
        provider: Provider name (huggingface, google)
        status_code: HTTP status from the API, when there was a response
        details: Extra context
    """

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            _with_context(details, provider=provider, status_code=status_code),
        )


class EmbeddingNotConfiguredError(EmbeddingProviderError):
    """No API key configured; raised before any network call."""


class VectorStoreError(RagBackendException):
    """Persistence or search failure in the chunk store."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, _with_context(details, operation=operation))


class DimensionMismatchError(VectorStoreError):
    """Two vectors being compared have different lengths."""

    def __init__(self, left: int, right: int) -> None:
        super().__init__(
            f"Vector dimension mismatch: {left} != {right}",
            operation="similarity",
            details={"left_dimension": left, "right_dimension": right},
        )
