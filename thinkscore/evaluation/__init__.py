"""Answer evaluation: anti-gaming pre-check, LLM scoring and usage logging.

Components:
- AnswerEvaluationService: The evaluate pipeline
- LLMClient: OpenAI Responses API gateway (lazy SDK import)
- EvaluationConfig: Pydantic settings (EVALUATION_*)
- EvaluationRequest / EvaluationResult / EvaluationOutcome: Data models
- build_prompt / is_suspected_gaming: Prompt rendering and pre-check
"""

from thinkscore.evaluation.config import EvaluationConfig
from thinkscore.evaluation.llm_client import GenerationHints, LLMClient, LLMError, LLMResponse
from thinkscore.evaluation.precheck import is_suspected_gaming
from thinkscore.evaluation.prompts import DEFAULT_AXES, build_prompt
from thinkscore.evaluation.schemas import (
    EvaluationOutcome,
    EvaluationParseError,
    EvaluationRequest,
    EvaluationResult,
    parse_evaluation,
)
from thinkscore.evaluation.service import AnswerEvaluationService

__all__ = [
    "AnswerEvaluationService",
    "EvaluationConfig",
    "EvaluationOutcome",
    "EvaluationParseError",
    "EvaluationRequest",
    "EvaluationResult",
    "GenerationHints",
    "LLMClient",
    "LLMError",
    "LLMResponse",
    "DEFAULT_AXES",
    "build_prompt",
    "is_suspected_gaming",
    "parse_evaluation",
]
