"""
Retrieval API schemas.

Dependencies: pydantic
System role: Retrieval API contracts
"""

from pydantic import BaseModel, ConfigDict, Field


class RetrieveDocumentsRequest(BaseModel):
    """Query text scoped to one tenant."""

    model_config = ConfigDict(populate_by_name=True)

    bot_id: int = Field(alias="botId")
    query: str
    k: int = Field(default=5, ge=1)
    similarity_threshold: float | None = Field(default=None, alias="similarityThreshold")


class ContextResponse(BaseModel):
    """Rendered context block for a downstream language model."""

    context: str
