"""
Vector store configuration settings.

Similarity search defaults and the policy applied to malformed
embedding values on write.

Dependencies: pydantic, pydantic_settings
System role: Vector storage and retrieval configuration
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VectorStoreSettings(BaseSettings):
    """Chunk store and similarity search configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    top_k: int = Field(default=5, description="Number of top results to retrieve")
    similarity_threshold: float = Field(
        default=0.7,
        description="Minimum cosine similarity for thresholded search",
    )
    native_search: bool = Field(
        default=True,
        description="Try the pgvector <=> operator before the in-process scan",
    )
    invalid_element_policy: Literal["coerce", "reject"] = Field(
        default="coerce",
        description="Non-numeric or non-finite embedding values: 'coerce' to 0.0 with a warning, or 'reject'",
    )
