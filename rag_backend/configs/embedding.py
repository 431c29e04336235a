"""
Embedding provider configuration settings.

Selects the remote inference API used to turn text into vectors and
holds its credentials, timeout and retry policy.

Dependencies: pydantic, pydantic_settings
System role: Embedding API configuration
"""

from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

HUGGINGFACE_ENDPOINT = "https://api-inference.huggingface.co/pipeline/feature-extraction"
GOOGLE_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/embedding-001:embedContent"


class EmbeddingSettings(BaseSettings):
    """Remote embedding API configuration (Hugging Face or Google)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    provider: Literal["huggingface", "google"] = Field(
        default="huggingface",
        description="Embedding API flavour: 'huggingface' feature-extraction or 'google' embedContent",
    )
    endpoint: str | None = Field(
        default=None,
        description="Override the provider's default endpoint URL",
    )
    model: str = Field(
        default="sentence-transformers/all-MiniLM-L6-v2",
        description="Model name appended to the Hugging Face endpoint",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Bearer token (Hugging Face) or API key (Google)",
    )

    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    verify_ssl: bool = Field(
        default=True,
        description="Verify TLS certificates of the embedding API",
    )

    max_attempts: int = Field(default=3, description="Attempts per embedding call, first try included")
    retry_base_delay: float = Field(
        default=1.0,
        description="Backoff base in seconds; delay = base * 2^(attempt-1)",
    )
    batch_concurrency: int = Field(
        default=1,
        description="Concurrent requests inside embed_batch (1 = sequential)",
    )

    @field_validator("max_attempts", "batch_concurrency")
    @classmethod
    def _at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"value must be >= 1, got {v}")
        return v

    @property
    def resolved_endpoint(self) -> str:
        """Endpoint URL, falling back to the provider default."""
        if self.endpoint:
            return self.endpoint
        return HUGGINGFACE_ENDPOINT if self.provider == "huggingface" else GOOGLE_ENDPOINT
