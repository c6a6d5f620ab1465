"""Configuration for the answer evaluation pipeline.

All settings can be overridden via EVALUATION_* environment variables.
"""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class EvaluationConfig(BaseSettings):
    """Configuration for LLM answer evaluation.

    Example:
        EVALUATION_OPENAI_API_KEY=sk-...
        EVALUATION_MODEL=gpt-5-nano
        EVALUATION_LOG_REJECTED_ATTEMPTS=true
    """

    model_config = SettingsConfigDict(
        env_prefix="EVALUATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    openai_api_key: SecretStr | None = Field(
        default=None,
        description="OpenAI API key used for answer evaluation",
    )
    model: str = Field(
        default="gpt-5-nano",
        description="Model identifier passed to the Responses API",
    )
    reasoning_effort: Literal["minimal", "low", "medium", "high"] = Field(
        default="low",
        description="Reasoning effort hint",
    )
    verbosity: Literal["low", "medium", "high"] = Field(
        default="low",
        description="Output verbosity hint",
    )
    llm_timeout: float = Field(
        default=60.0,
        gt=0.0,
        description="Request timeout for the LLM client in seconds",
    )
    persist_scores: bool = Field(
        default=True,
        description="Insert an AI score row when an answer id is supplied",
    )
    log_rejected_attempts: bool = Field(
        default=False,
        description="Write an error usage log for answers rejected by the pre-check",
    )
