"""
Vector store schemas.

Pydantic models for chunk writes and similarity search results.
Field aliases keep the camelCase JSON shape used by API clients
(``botId``, ``documentId``); Python code uses snake_case names.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChunkInput(BaseModel):
    """One chunk to persist. The embedding is validated by the store, not here."""

    model_config = ConfigDict(populate_by_name=True)

    bot_id: int = Field(alias="botId", description="Tenant scope")
    document_id: str = Field(alias="documentId", description="Source document identifier")
    text: str = Field(description="Chunk text content")
    embedding: list[Any] | None = Field(default=None, description="Embedding vector")
    filename: str | None = Field(default=None, description="Original file name")
    metadata: dict[str, Any] | None = Field(default=None, description="Provenance metadata")


class VectorSearchResult(BaseModel):
    """Single ranked result from a similarity search."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Chunk identifier")
    document_id: str = Field(alias="documentId", description="Source document identifier")
    bot_id: int = Field(alias="botId", description="Tenant scope")
    filename: str | None = Field(default=None, description="Original file name")
    text: str = Field(description="Chunk text content")
    score: float = Field(description="Cosine similarity")
    metadata: dict[str, Any] | None = Field(default=None, description="Chunk metadata")

    @property
    def display_name(self) -> str:
        """File name for provenance display, falling back to metadata then 'unknown'."""
        if self.filename:
            return self.filename
        if self.metadata and self.metadata.get("filename"):
            return str(self.metadata["filename"])
        return "unknown"
