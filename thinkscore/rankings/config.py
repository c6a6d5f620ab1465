"""Ranking configuration.

All settings can be overridden via ``RANKING_*`` environment variables
(e.g., ``RANKING_DEFAULT_LIMIT=100``).
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RankingConfig(BaseSettings):
    """Configuration for leaderboards."""

    model_config = SettingsConfigDict(
        env_prefix="RANKING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_limit: int = Field(default=50, ge=1)
    """Leaderboard size when the caller gives none."""

    max_limit: int = Field(default=500, ge=1)
    """Largest leaderboard the API accepts."""
