"""Fixtures for evaluation tests."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from thinkscore.evaluation.config import EvaluationConfig
from thinkscore.evaluation.llm_client import GenerationHints, LLMResponse
from thinkscore.evaluation.service import AnswerEvaluationService
from thinkscore.scores.schemas import Score
from thinkscore.usage_logs.schemas import UsageLogEntry

VALID_OUTPUT = json.dumps(
    {
        "score": 82,
        "feedback": "강점: 논리 구조가 명확합니다. 개선점: 반론을 더 다뤄 보세요.",
        "criteriaScores": {"논리적 사고": 85, "창의적 사고": 78, "일관성": 82},
    },
    ensure_ascii=False,
)


@pytest.fixture
def evaluation_config() -> EvaluationConfig:
    return EvaluationConfig(openai_api_key=None, model="gpt-5-nano")


@pytest.fixture
def mock_llm():
    """LLMClient double returning a well-formed evaluation."""
    llm = MagicMock()
    llm.model = "gpt-5-nano"
    llm.default_hints.return_value = GenerationHints()
    llm.generate = AsyncMock(return_value=LLMResponse(text=VALID_OUTPUT, tokens_used=321))
    return llm


@pytest.fixture
def mock_usage_logs():
    repo = AsyncMock()
    repo.create_pending = AsyncMock(
        return_value=UsageLogEntry(prompt="prompt", model="gpt-5-nano", id=11)
    )
    repo.mark_success = AsyncMock()
    repo.mark_error = AsyncMock()
    return repo


@pytest.fixture
def mock_scores():
    repo = AsyncMock()
    repo.create = AsyncMock(
        return_value=Score(answer_id=5, score=82, id=99, is_ai_score=True)
    )
    return repo


@pytest.fixture
def service(mock_llm, mock_usage_logs, mock_scores, evaluation_config) -> AnswerEvaluationService:
    return AnswerEvaluationService(
        llm=mock_llm,
        usage_logs=mock_usage_logs,
        scores=mock_scores,
        config=evaluation_config,
    )
