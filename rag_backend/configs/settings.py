"""
Aggregated application settings.

Groups database, embedding and vector store configuration behind one
object that is built once per process.

Dependencies: pydantic, pydantic_settings
System role: Configuration entry point
"""

from functools import lru_cache

from pydantic import Field

from rag_backend.configs.base import BaseSettings
from rag_backend.configs.database import DatabaseSettings
from rag_backend.configs.embedding import EmbeddingSettings
from rag_backend.configs.vector_store import VectorStoreSettings


class Settings(BaseSettings):
    """Top-level settings; each group reads its own env prefix."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Process-wide settings, read from the environment on first call.

    Usage:
        settings = get_settings()
        threshold = settings.vector_store.similarity_threshold
    """
    return Settings()
