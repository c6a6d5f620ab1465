"""LLM gateway for answer evaluation.

Wraps the OpenAI Responses API behind a single ``generate`` call. The SDK
import is deferred to first use so the rest of the application (and the
test suite) can load without an API key configured.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from thinkscore.evaluation.config import EvaluationConfig

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """The provider call failed or returned nothing usable."""


@dataclass
class GenerationHints:
    """Provider-agnostic generation configuration."""

    reasoning_effort: str = "low"
    verbosity: str = "low"


@dataclass
class LLMResponse:
    """Raw text output of one generation.

    Attributes:
        text: Output text (expected to hold a JSON object).
        tokens_used: Total tokens reported by the provider, if any.
    """

    text: str
    tokens_used: int | None = None
    raw: Any = field(default=None, repr=False)


class LLMClient:
    """OpenAI Responses API client.

    Args:
        config: Evaluation configuration with API key, model and timeout.
    """

    def __init__(self, config: EvaluationConfig) -> None:
        self._config = config
        self._openai_client: Any = None

    @property
    def model(self) -> str:
        return self._config.model

    def default_hints(self) -> GenerationHints:
        return GenerationHints(
            reasoning_effort=self._config.reasoning_effort,
            verbosity=self._config.verbosity,
        )

    def _get_openai_client(self) -> Any:
        """Lazy-initialize OpenAI async client."""
        if self._openai_client is None:
            import openai

            api_key = self._config.openai_api_key
            key_str = api_key.get_secret_value() if api_key else None
            self._openai_client = openai.AsyncOpenAI(
                api_key=key_str,
                timeout=self._config.llm_timeout,
            )
        return self._openai_client

    async def generate(
        self,
        prompt: str,
        model: str | None = None,
        hints: GenerationHints | None = None,
    ) -> LLMResponse:
        """Run one generation.

        Args:
            prompt: Full prompt text.
            model: Model override (defaults to the configured model).
            hints: Reasoning/verbosity hints (defaults to configured values).

        Returns:
            LLMResponse with the output text and token usage.

        Raises:
            LLMError: The provider call failed or the output was empty.
        """
        hints = hints or self.default_hints()
        client = self._get_openai_client()
        try:
            response = await client.responses.create(
                model=model or self._config.model,
                input=prompt,
                reasoning={"effort": hints.reasoning_effort},
                text={"verbosity": hints.verbosity},
            )
        except Exception as e:
            logger.warning("OpenAI request failed: %s", e)
            raise LLMError(str(e)) from e

        text = getattr(response, "output_text", None)
        if not text:
            raise LLMError("OpenAI 응답이 비어있습니다.")

        usage = getattr(response, "usage", None)
        tokens = getattr(usage, "total_tokens", None) if usage is not None else None
        return LLMResponse(text=text, tokens_used=tokens, raw=response)

    async def close(self) -> None:
        """Clean up SDK client."""
        if self._openai_client is not None:
            await self._openai_client.close()
            self._openai_client = None
