"""
Test suite for dependency injection container.

Tests factory functions for store and service creation and the
process-wide ServiceCache.

System role: Verification of DI container
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from rag_backend.api.deps.dependencies import (
    ServiceCache,
    get_rag_service,
    get_retrieval_service,
    get_vector_store,
)
from rag_backend.application.services import RagService, RetrievalService
from rag_backend.boundary.vdb import PgVectorStore, SearchStrategySelector
from rag_backend.configs import Settings
from rag_backend.configs.vector_store import VectorStoreSettings


@pytest.fixture
def mock_db_session() -> AsyncSession:
    """Provide mock async database session."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def settings(vector_store_settings: VectorStoreSettings) -> Settings:
    return Settings(vector_store=vector_store_settings.model_copy(update={"similarity_threshold": 0.42}))


class TestGetVectorStore:
    """Test suite for get_vector_store factory."""

    def test_should_share_selector_from_service_cache(
        self, mock_db_session: AsyncSession, settings: Settings
    ) -> None:
        # Arrange
        cache = ServiceCache()
        with patch("rag_backend.api.deps.dependencies.get_service_cache", return_value=cache), patch(
            "rag_backend.api.deps.dependencies.get_settings", return_value=settings
        ):
            # Act
            first = get_vector_store(db=mock_db_session, settings=settings)
            second = get_vector_store(db=mock_db_session, settings=settings)

        # Assert
        assert isinstance(first, PgVectorStore)
        assert first.db is mock_db_session
        assert isinstance(first.selector, SearchStrategySelector)
        assert first.selector is second.selector


class TestGetServices:
    """Test suite for service factories."""

    def test_get_retrieval_service_should_wire_embedder_and_store(self, mock_embedder) -> None:
        store = MagicMock(spec=PgVectorStore)

        service = get_retrieval_service(embedder=mock_embedder, vector_store=store)

        assert isinstance(service, RetrievalService)
        assert service.embedding_provider is mock_embedder
        assert service.vector_store is store

    def test_get_rag_service_should_use_configured_threshold(self, settings: Settings) -> None:
        retrieval = MagicMock(spec=RetrievalService)

        service = get_rag_service(retrieval_service=retrieval, settings=settings)

        assert isinstance(service, RagService)
        assert service.similarity_threshold == 0.42


class TestServiceCache:
    """Test suite for ServiceCache lifecycle."""

    @pytest.mark.asyncio
    async def test_aclose_should_close_provider_and_clear(self, mock_embedder) -> None:
        cache = ServiceCache()
        with patch(
            "rag_backend.api.deps.dependencies.get_embedding_provider", return_value=mock_embedder
        ):
            assert cache.embedding_provider is mock_embedder
            assert cache.embedding_provider is mock_embedder

        await cache.aclose()

        mock_embedder.aclose.assert_awaited_once()
        assert cache._embedding_provider is None
