"""Forum configuration.

All settings can be overridden via ``FORUM_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ForumConfig(BaseSettings):
    """Configuration for forum posts and comments."""

    model_config = SettingsConfigDict(
        env_prefix="FORUM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_category: str = Field(
        default="free",
        description="Category assigned to posts created without one",
    )
    max_title_length: int = Field(
        default=200,
        ge=1,
        description="Maximum post title length",
    )
    max_content_length: int = Field(
        default=10000,
        ge=1,
        description="Maximum post and comment body length",
    )
