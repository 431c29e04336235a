"""
Configuration package.

pydantic-settings groups: POSTGRES_*, EMBEDDING_*, VECTOR_STORE_*.
"""

from rag_backend.configs.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
