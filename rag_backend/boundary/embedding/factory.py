"""
Embedding provider factory.

Selects the provider implementation from EMBEDDING_PROVIDER.

Dependencies: rag_backend.boundary.embedding.provider, rag_backend.configs
System role: Embedding provider instantiation and selection
"""

import logging

import httpx

from rag_backend.boundary.embedding.provider import (
    EmbeddingProvider,
    GoogleEmbeddingProvider,
    HuggingFaceEmbeddingProvider,
)
from rag_backend.configs.embedding import EmbeddingSettings

logger = logging.getLogger(__name__)

_PROVIDERS: dict[str, type[EmbeddingProvider]] = {
    "huggingface": HuggingFaceEmbeddingProvider,
    "google": GoogleEmbeddingProvider,
}


def get_embedding_provider(
    settings: EmbeddingSettings,
    client: httpx.AsyncClient | None = None,
) -> EmbeddingProvider:
    """
    Create the embedding provider named by ``settings.provider``.

    Args:
        settings: Embedding configuration
        client: Optional shared HTTP client

    Returns:
        EmbeddingProvider: Configured provider instance

    Raises:
        ValueError: If the provider name is unknown
    """
    provider_name = settings.provider.lower()
    provider_cls = _PROVIDERS.get(provider_name)
    if provider_cls is None:
        raise ValueError(
            f"Invalid EMBEDDING_PROVIDER: {provider_name}. "
            f"Must be one of: {', '.join(sorted(_PROVIDERS))}."
        )

    logger.info(
        f"{__name__}:get_embedding_provider - Creating {provider_name} embedding provider",
        extra={"endpoint": settings.resolved_endpoint},
    )
    provider = provider_cls(settings, client=client)
    if not provider.is_configured:
        logger.warning("Embedding API key is missing; embedding calls will be rejected")
    return provider
