"""Usage log configuration.

All settings can be overridden via ``USAGE_LOG_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class UsageLogConfig(BaseSettings):
    """Configuration for usage log reads and retention."""

    model_config = SettingsConfigDict(
        env_prefix="USAGE_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_page_size: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Default page size for per-user log listings",
    )
    default_status_limit: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Default row limit for per-status log listings",
    )
    default_retention_days: int = Field(
        default=90,
        ge=1,
        description="Retention used by cleanup when no day count is given",
    )
