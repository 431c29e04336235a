"""
Router error handling.

Provides a decorator that turns domain exceptions raised by stores and
services into HTTPExceptions with consistent status codes and logging.

Status mapping:
- ValidationError (incl. EmptyVectorError) -> 400
- EmbeddingNotConfiguredError -> 503
- EmbeddingProviderError -> 502
- VectorStoreError -> 500
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from rag_backend.core.exceptions import (
    EmbeddingNotConfiguredError,
    EmbeddingProviderError,
    RagBackendException,
    ValidationError,
    VectorStoreError,
)
from rag_backend.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_service_errors(func: F) -> F:
    """
    Decorator to map domain errors onto HTTPExceptions.

    The response detail is the exception message, so fixed phrases such as
    "vector must have at least 1 dimension" reach the client unchanged.
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except ValidationError as e:
            logger.warning(
                "Invalid request",
                extra={"error": e.message, "details": str(e.details)},
            )
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

        except EmbeddingNotConfiguredError as e:
            logger.error("Embedding provider not configured", extra={"error": e.message})
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)

        except EmbeddingProviderError as e:
            logger.error(
                "Embedding provider failure",
                extra={"error": e.message, "details": str(e.details)},
            )
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)

        except VectorStoreError as e:
            logger.error(
                "Vector store failure",
                extra={"error": e.message, "details": str(e.details)},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=e.message,
            )

        except RagBackendException as e:
            log_exception_with_context(logger, "Unhandled service error", e, details=e.details)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=e.message,
            )

    return wrapper  # type: ignore
