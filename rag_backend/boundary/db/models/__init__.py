"""ORM models."""

from rag_backend.boundary.db.models.chunk_model import ChunkModel

__all__ = ["ChunkModel"]
