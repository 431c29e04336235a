"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - ChunkModel: Persisted retrieval unit
  - chunk_crud: CRUD operation singleton

Dependencies: sqlalchemy, rag_backend.configs
System role: Database adapter providing persistent chunk storage
"""

from rag_backend.boundary.db.base import Base, TimestampMixin, UUIDMixin
from rag_backend.boundary.db.connection import (
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
    ping_database,
)
from rag_backend.boundary.db.models.chunk_model import ChunkModel
from rag_backend.boundary.db.CRUD import BaseCRUD, ChunkCRUD, chunk_crud

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "dispose_engine",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "ping_database",
    # Models
    "ChunkModel",
    # CRUD
    "BaseCRUD",
    "ChunkCRUD",
    "chunk_crud",
]
