"""
Fixtures shared by every test package.

Provides: in-memory database session, settings, fake embedding provider, sample ids
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure
"""

from unittest.mock import AsyncMock, MagicMock
import uuid

import pytest

from rag_backend.configs.embedding import EmbeddingSettings
from rag_backend.configs.vector_store import VectorStoreSettings


@pytest.fixture
async def test_async_db():
    """
    Fresh in-memory SQLite schema per test.

    The embedding column falls back to JSON on SQLite, so only the
    brute-force search path can run against this session.
    """
    from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
    from sqlalchemy.pool import StaticPool
    from rag_backend.boundary.db.base import Base
    from rag_backend.boundary.db.models import ChunkModel  # noqa: F401 - registers the table

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session factory
    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Create session for test
    async with async_session() as session:
        yield session
        await session.rollback()

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def vector_store_settings() -> VectorStoreSettings:
    """Vector store settings with defaults, independent of the environment."""
    return VectorStoreSettings(
        top_k=5,
        similarity_threshold=0.7,
        native_search=True,
        invalid_element_policy="coerce",
    )


@pytest.fixture
def embedding_settings() -> EmbeddingSettings:
    """Hugging Face settings with a token and a tiny retry delay."""
    return EmbeddingSettings(
        provider="huggingface",
        endpoint="https://embeddings.test/models",
        model="test-model",
        api_key="test-token",
        max_attempts=3,
        retry_base_delay=0.01,
        batch_concurrency=1,
    )


@pytest.fixture
def mock_embedder():
    """
    Create mock EmbeddingProvider for testing.

    Returns:
        MagicMock: Provider whose embed() returns a fixed 3-d vector
    """
    provider = MagicMock()
    provider.embed = AsyncMock(return_value=[1.0, 0.0, 0.0])
    provider.embed_batch = AsyncMock()
    provider.aclose = AsyncMock()
    return provider


@pytest.fixture
def bot_id() -> int:
    """Tenant id used across tests."""
    return 42


@pytest.fixture
def document_id() -> str:
    """Generate a test document ID."""
    return f"doc-{uuid.uuid4()}"
