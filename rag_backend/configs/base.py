"""
Shared settings base.

All configuration groups read the process environment and an optional
``.env`` file; unknown keys are ignored so one file can feed every group.

Dependencies: pydantic, pydantic_settings
System role: Common configuration behaviour
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class BaseSettings(PydanticBaseSettings):
    """Application-wide flags shared by every settings group."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Deployment name (development, staging, production)",
    )
    log_level: LogLevel = Field(default="INFO", description="Root log level")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v
