"""
Chunk API schemas.

Request/response schemas for the vector store endpoints. JSON uses
camelCase (``botId``, ``documentId``, ``queryEmbedding``); aliases map it
onto snake_case attributes.

Dependencies: pydantic
System role: Vector store API contracts
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from rag_backend.boundary.vdb.vector_schemas import ChunkInput


def with_filename(metadata: dict[str, Any] | None, filename: str | None) -> dict[str, Any]:
    """Caller metadata with ``filename`` folded in; caller keys win."""
    merged: dict[str, Any] = {"filename": filename} if filename else {}
    merged.update(metadata or {})
    return merged


class SaveChunkRequest(BaseModel):
    """Store one chunk with a caller-supplied embedding."""

    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(alias="documentId")
    bot_id: int = Field(alias="botId")
    filename: str | None = None
    text: str
    # Left loose so the store reports empty or non-numeric vectors itself
    embedding: list[Any] | None = None
    metadata: dict[str, Any] | None = None

    def merged_metadata(self) -> dict[str, Any]:
        return with_filename(self.metadata, self.filename)

    def to_chunk_input(self) -> ChunkInput:
        return ChunkInput(
            bot_id=self.bot_id,
            document_id=self.document_id,
            text=self.text,
            embedding=self.embedding,
            filename=self.filename,
            metadata=self.metadata,
        )


class BatchChunkItem(SaveChunkRequest):
    """One item of a batch save; chunk position fields are accepted and ignored."""

    chunk_index: int | None = Field(default=None, alias="chunkIndex")
    total_chunks: int | None = Field(default=None, alias="totalChunks")


class GenerateChunkRequest(BaseModel):
    """Embed text server-side, then store it."""

    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(alias="documentId")
    bot_id: int = Field(alias="botId")
    filename: str | None = None
    text: str
    metadata: dict[str, Any] | None = None

    def merged_metadata(self) -> dict[str, Any]:
        return with_filename(self.metadata, self.filename)


class GenerateChunksRequest(BaseModel):
    """Embed several texts of one document, then store the successes."""

    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(alias="documentId")
    bot_id: int = Field(alias="botId")
    filename: str | None = None
    texts: list[str] = Field(min_length=1)
    metadata: dict[str, Any] | None = None


class ChunkResponse(BaseModel):
    """Stored chunk (embedding omitted)."""

    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    document_id: str = Field(alias="documentId")
    bot_id: int = Field(alias="botId")
    filename: str | None = None
    text: str
    metadata: dict[str, Any] | None = None
    created_at: datetime = Field(alias="createdAt")

    @classmethod
    def from_chunk(cls, chunk: Any) -> "ChunkResponse":
        """Build from a stored ChunkModel row."""
        return cls(
            id=chunk.id,
            document_id=chunk.document_id,
            bot_id=chunk.bot_id,
            filename=chunk.filename,
            text=chunk.text,
            metadata=chunk.chunk_metadata,
            created_at=chunk.created_at,
        )


class FailedChunkResponse(BaseModel):
    """Batch item that could not be embedded."""

    index: int
    text: str
    error: str


class GenerateChunksResponse(BaseModel):
    """Result of batch embed-and-save."""

    chunks: list[ChunkResponse]
    failed: list[FailedChunkResponse] = Field(default_factory=list)


class SearchRequest(BaseModel):
    """Similarity search with a caller-supplied query embedding."""

    model_config = ConfigDict(populate_by_name=True)

    bot_id: int = Field(alias="botId")
    query: str | None = Field(default=None, description="Original query text, informational")
    query_embedding: list[Any] | None = Field(default=None, alias="queryEmbedding")
    k: int = Field(default=5, ge=1)
    similarity_threshold: float | None = Field(default=None, alias="similarityThreshold")


class ChunkCountResponse(BaseModel):
    """Chunk count for a document."""

    model_config = ConfigDict(populate_by_name=True)

    count: int
    document_id: str = Field(alias="documentId")
    bot_id: int | None = Field(default=None, alias="botId")
