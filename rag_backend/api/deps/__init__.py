"""FastAPI dependency providers."""

from .dependencies import (
    get_embedder,
    get_rag_service,
    get_retrieval_service,
    get_service_cache,
    get_settings_dependency,
    get_vector_store,
)

__all__ = [
    "get_embedder",
    "get_rag_service",
    "get_retrieval_service",
    "get_service_cache",
    "get_settings_dependency",
    "get_vector_store",
]
