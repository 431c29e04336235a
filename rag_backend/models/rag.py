"""
RAG query schemas.

Request/response schemas for the answer assembler. The response carries
the retrieved context and per-chunk provenance; answer text generation is
left to the consumer.

Dependencies: pydantic
System role: RAG API contracts
"""

from pydantic import BaseModel, ConfigDict, Field


class RagQueryRequest(BaseModel):
    """Question scoped to one tenant."""

    model_config = ConfigDict(populate_by_name=True)

    bot_id: int = Field(alias="botId")
    query: str
    max_results: int = Field(default=5, ge=1, alias="maxResults")


class RagSource(BaseModel):
    """Provenance of one retrieved chunk."""

    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(alias="documentId")
    source: str
    similarity: float
    text_preview: str = Field(alias="textPreview")


class RagResponse(BaseModel):
    """Structured answer: query, notice or recovery message, context and sources."""

    model_config = ConfigDict(populate_by_name=True)

    query: str
    answer: str
    context: str = ""
    sources: list[RagSource] = Field(default_factory=list)
    error: str | None = None


class RelevantDocumentsResponse(BaseModel):
    """Context-only retrieval outcome."""

    query: str
    context: str | None = None
    error: str | None = None
