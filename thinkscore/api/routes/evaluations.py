"""Answer evaluation endpoint."""

import time

import structlog
from fastapi import APIRouter, Depends, HTTPException

from thinkscore.api.auth import get_optional_user_id, verify_api_key
from thinkscore.api.dependencies import get_evaluation_service, get_question_repository
from thinkscore.api.errors import not_found, server_error
from thinkscore.api.models import EvaluateRequest, EvaluateResponse
from thinkscore.errors import InvalidInputError, ThinkScoreError
from thinkscore.evaluation.schemas import EvaluationRequest
from thinkscore.evaluation.service import AnswerEvaluationService
from thinkscore.questions.repository import QuestionRepository

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "/evaluations",
    response_model=EvaluateResponse,
    responses=not_found("Question not found"),
    summary="Evaluate an answer",
    description=(
        "Score an answer 0-100 with two-sentence feedback and per-axis scores. "
        "When only question_id is given, the question text and its evaluation "
        "criteria are loaded from storage."
    ),
)
async def evaluate_answer(
    request: EvaluateRequest,
    api_key: str = Depends(verify_api_key),
    user_id: str | None = Depends(get_optional_user_id),
    service: AnswerEvaluationService = Depends(get_evaluation_service),
    questions: QuestionRepository = Depends(get_question_repository),
) -> EvaluateResponse:
    start_time = time.perf_counter()

    try:
        question_text = request.question
        criteria = request.criteria
        if question_text is None:
            if request.question_id is None:
                raise InvalidInputError("Provide question text or question_id")
            question = await questions.get(request.question_id)
            question_text = question.content
            if criteria is None:
                criteria = question.evaluation_criteria

        outcome = await service.evaluate(
            EvaluationRequest(
                question=question_text,
                answer=request.answer,
                criteria=criteria,
                user_id=user_id,
                question_id=request.question_id,
                answer_id=request.answer_id,
            )
        )

        latency_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            "Answer evaluated",
            log_id=outcome.log_id,
            score=outcome.result.score,
            short_circuited=outcome.short_circuited,
            score_warning=outcome.score_warning,
            latency_ms=round(latency_ms, 2),
        )

        return EvaluateResponse(
            score=outcome.result.score,
            feedback=outcome.result.feedback,
            criteria_scores=outcome.result.criteria_scores,
            log_id=outcome.log_id,
            short_circuited=outcome.short_circuited,
            score_id=outcome.score_id,
            score_warning=outcome.score_warning,
            latency_ms=round(latency_ms, 2),
        )

    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("evaluate_answer", e)
