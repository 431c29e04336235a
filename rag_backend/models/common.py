"""
Common response models.

Shared response schemas.

Dependencies: pydantic
System role: Common API response structures
"""

from pydantic import BaseModel, Field


class DeleteResponse(BaseModel):
    """Outcome of a bulk delete."""

    success: bool = True
    message: str
    deleted: int = Field(default=0, description="Number of rows removed")
