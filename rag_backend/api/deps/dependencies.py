"""
Dependency injection container.

Factory functions for FastAPI dependencies. Process-wide objects (the
embedding provider with its HTTP client, the search strategy selector with
its cached pgvector capability) live in ServiceCache; stores and services
are built per request around the request's AsyncSession.

Dependencies: rag_backend.configs, rag_backend.application, rag_backend.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rag_backend.application.services import RagService, RetrievalService
from rag_backend.boundary.db import get_async_db
from rag_backend.boundary.embedding import EmbeddingProvider, get_embedding_provider
from rag_backend.boundary.vdb import PgVectorStore, SearchStrategySelector
from rag_backend.configs import Settings, get_settings


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._embedding_provider = None
        self._strategy_selector = None

    @property
    def embedding_provider(self) -> EmbeddingProvider:
        """Get cached embedding provider."""
        if self._embedding_provider is None:
            self._embedding_provider = get_embedding_provider(get_settings().embedding)
        return self._embedding_provider

    @property
    def strategy_selector(self) -> SearchStrategySelector:
        """Get cached similarity search strategy selector."""
        if self._strategy_selector is None:
            self._strategy_selector = SearchStrategySelector(
                native_enabled=get_settings().vector_store.native_search,
            )
        return self._strategy_selector

    async def aclose(self) -> None:
        """Release the provider's HTTP client and clear all cached instances."""
        if self._embedding_provider is not None:
            await self._embedding_provider.aclose()
        self.clear()

    def clear(self) -> None:
        """Clear all cached instances."""
        self._embedding_provider = None
        self._strategy_selector = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_embedder() -> EmbeddingProvider:
    """Get the shared embedding provider."""
    return get_service_cache().embedding_provider


def get_vector_store(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> PgVectorStore:
    """
    Get vector store instance.

    Args:
        db: Async database session (injected via Depends)
        settings: Application settings (injected via Depends)

    Returns:
        PgVectorStore: Request-scoped store sharing the process-wide strategy selector
    """
    return PgVectorStore(
        db=db,
        settings=settings.vector_store,
        selector=get_service_cache().strategy_selector,
    )


def get_retrieval_service(
    embedder: EmbeddingProvider = Depends(get_embedder),
    vector_store: PgVectorStore = Depends(get_vector_store),
) -> RetrievalService:
    """
    Get retrieval service instance.

    Args:
        embedder: Shared embedding provider (injected via Depends)
        vector_store: Request-scoped vector store (injected via Depends)

    Returns:
        RetrievalService: Retrieval orchestrator
    """
    return RetrievalService(embedding_provider=embedder, vector_store=vector_store)


def get_rag_service(
    retrieval_service: RetrievalService = Depends(get_retrieval_service),
    settings: Settings = Depends(get_settings_dependency),
) -> RagService:
    """
    Get RAG service instance.

    Args:
        retrieval_service: Retrieval orchestrator (injected via Depends)
        settings: Application settings (injected via Depends)

    Returns:
        RagService: RAG answer assembler using the configured similarity threshold
    """
    return RagService(
        retrieval_service=retrieval_service,
        similarity_threshold=settings.vector_store.similarity_threshold,
    )
