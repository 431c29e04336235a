"""
Vector chunk ORM model.

Represents one retrievable text chunk with its embedding and provenance,
scoped to a tenant (bot) and a source document.

Dependencies: sqlalchemy, rag_backend.boundary.db.base
System role: Chunk persistence for similarity search
"""

from typing import Any

from sqlalchemy import Float, Index, Integer, JSON, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from rag_backend.boundary.db.base import Base, UUIDMixin, TimestampMixin

# float8[] on PostgreSQL (cast to pgvector's ``vector`` at query time), JSON elsewhere.
EmbeddingType = ARRAY(Float).with_variant(JSON(), "sqlite")
MetadataType = JSONB().with_variant(JSON(), "sqlite")


class ChunkModel(Base, UUIDMixin, TimestampMixin):
    """
    Chunk ORM model.

    Rows are created by the write path, never updated in place, and
    removed in bulk by document_id when a document is re-ingested or
    deleted. All reads are scoped by bot_id.

    Attributes:
        id: UUID primary key (auto-generated)
        bot_id: Tenant scope
        document_id: Source document identifier
        filename: Original file name, for provenance display
        text: Chunk content (non-empty)
        embedding: Vector of floats; one dimension per embedding model
        chunk_metadata: Open JSON object stored in the ``metadata`` column
        created_at: Insert timestamp (UTC)
        updated_at: Last modification timestamp (UTC)
    """

    __tablename__ = "vector_chunk"
    __table_args__ = (
        Index("ix_vector_chunk_bot_id", "bot_id"),
        Index("ix_vector_chunk_document_id_bot_id", "document_id", "bot_id"),
    )

    bot_id: Mapped[int] = mapped_column(Integer, nullable=False)

    document_id: Mapped[str] = mapped_column(String(255), nullable=False)

    filename: Mapped[str | None] = mapped_column(
        String(1024),
        nullable=True,
        doc="Original filename",
    )

    text: Mapped[str] = mapped_column(Text, nullable=False)

    embedding: Mapped[list[float]] = mapped_column(EmbeddingType, nullable=False)

    # "metadata" is reserved on declarative classes
    chunk_metadata: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata",
        MetadataType,
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"ChunkModel(id={self.id}, bot_id={self.bot_id}, "
            f"document_id={self.document_id!r}, dims={len(self.embedding or [])})"
        )
