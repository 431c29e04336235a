"""
Database settings.

Connection parameters for the PostgreSQL instance that holds the
``vector_chunk`` table. A full ``POSTGRES_URL`` takes precedence over the
individual fields, which is how tests and local runs point at SQLite.

Dependencies: pydantic, pydantic_settings
System role: Chunk store connection configuration
"""

from urllib.parse import quote_plus

from pydantic import Field, SecretStr
from pydantic_settings import SettingsConfigDict

from rag_backend.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """PostgreSQL (with pgvector) connection and pool settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str | None = Field(default=None, description="Complete async SQLAlchemy URL")

    host: str = "localhost"
    port: int = 5432
    user: str = "postgres"
    password: SecretStr = SecretStr("postgres")
    db: str = Field(default="rag", description="Database name")
    sslmode: str = Field(default="prefer", description="disable, prefer or require")

    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = Field(default=30, description="Seconds to wait for a pooled connection")
    echo_sql: bool = False

    @property
    def async_database_url(self) -> str:
        """asyncpg URL built from the individual fields unless ``url`` is set."""
        if self.url:
            return self.url
        password = quote_plus(self.password.get_secret_value())
        query = "" if self.sslmode == "disable" else f"?ssl={self.sslmode}"
        return f"postgresql+asyncpg://{self.user}:{password}@{self.host}:{self.port}/{self.db}{query}"
