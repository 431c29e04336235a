"""
Embedding boundary layer.

HTTP clients for remote embedding APIs with retry and response validation.

Dependencies: httpx, tenacity
System role: Embedding API adapter
"""

from rag_backend.boundary.embedding.factory import get_embedding_provider
from rag_backend.boundary.embedding.provider import (
    BatchEmbeddingResult,
    EmbeddedText,
    EmbeddingProvider,
    FailedEmbedding,
    GoogleEmbeddingProvider,
    HuggingFaceEmbeddingProvider,
)

__all__ = [
    "BatchEmbeddingResult",
    "EmbeddedText",
    "EmbeddingProvider",
    "FailedEmbedding",
    "GoogleEmbeddingProvider",
    "HuggingFaceEmbeddingProvider",
    "get_embedding_provider",
]
