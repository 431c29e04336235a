"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from rag_backend.boundary.db.CRUD import chunk_crud

    chunks = await chunk_crud.get_by_bot_id(db, bot_id)
"""

from rag_backend.boundary.db.CRUD.base_crud import BaseCRUD
from rag_backend.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud

__all__ = [
    "BaseCRUD",
    "ChunkCRUD",
    "chunk_crud",
]
