"""Answer evaluation pipeline.

One ``evaluate`` call is:

1. pre-check (bullets/emoji short-circuit, no LLM call),
2. prompt construction,
3. ``pending`` usage log write (must succeed before the LLM is called),
4. exactly one LLM call, parsed into an ``EvaluationResult``,
5. ``success`` or ``error`` transition of the usage log,
6. best-effort AI score row for the answer.
"""

import logging
import time

from thinkscore.errors import EvaluationFailedError, InvalidInputError, ThinkScoreError
from thinkscore.evaluation.config import EvaluationConfig
from thinkscore.evaluation.llm_client import LLMClient, LLMError
from thinkscore.evaluation.precheck import is_suspected_gaming
from thinkscore.evaluation.prompts import GAMING_FEEDBACK, build_prompt, known_axes
from thinkscore.evaluation.schemas import (
    EvaluationOutcome,
    EvaluationParseError,
    EvaluationRequest,
    EvaluationResult,
    parse_evaluation,
)
from thinkscore.observability.logging import log_context
from thinkscore.scores.repository import ScoreRepository
from thinkscore.usage_logs.repository import UsageLogRepository

logger = logging.getLogger(__name__)

REJECTED_MESSAGE = "rejected by pre-check"


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _normalize_criteria(criteria: list[str] | None) -> list[str] | None:
    if not criteria:
        return None
    cleaned = [c.strip() for c in criteria if c and c.strip()]
    return cleaned or None


class AnswerEvaluationService:
    """Scores answers with the LLM and keeps the usage log in step.

    Args:
        llm: LLM gateway.
        usage_logs: Usage log store.
        scores: Score repository for the best-effort AI score row.
        config: Evaluation configuration.
    """

    def __init__(
        self,
        llm: LLMClient,
        usage_logs: UsageLogRepository,
        scores: ScoreRepository,
        config: EvaluationConfig | None = None,
    ) -> None:
        self._llm = llm
        self._logs = usage_logs
        self._scores = scores
        self._config = config or EvaluationConfig()

    async def evaluate(self, request: EvaluationRequest) -> EvaluationOutcome:
        """Evaluate one answer.

        Returns:
            EvaluationOutcome. On a normal return the LLM was called once and
            the usage log reached ``success``.

        Raises:
            InvalidInputError: Empty question or answer text.
            UpstreamDataError: The pending or success log write failed.
            EvaluationFailedError: The LLM call or response parsing failed.
        """
        if not request.question or not request.question.strip():
            raise InvalidInputError("question must not be empty")
        if not request.answer or not request.answer.strip():
            raise InvalidInputError("answer must not be empty")

        criteria = _normalize_criteria(request.criteria)

        if is_suspected_gaming(request.answer):
            return await self._reject(request, criteria)

        prompt = build_prompt(request.question, request.answer, criteria)
        model = self._llm.model

        log = await self._logs.create_pending(
            prompt,
            model,
            user_id=request.user_id,
            question_id=request.question_id,
            answer_id=request.answer_id,
        )

        with log_context(log_id=log.id, user_id=request.user_id):
            return await self._complete(request, log.id, prompt, model)

    async def _complete(
        self,
        request: EvaluationRequest,
        log_id: int,
        prompt: str,
        model: str,
    ) -> EvaluationOutcome:
        """Call the LLM for a pending log row and resolve the row."""
        started = time.perf_counter()
        try:
            response = await self._llm.generate(prompt, model, self._llm.default_hints())
            result = parse_evaluation(response.text)
        except (LLMError, EvaluationParseError) as e:
            elapsed = _elapsed_ms(started)
            logger.error("Evaluation %s failed after %dms: %s", log_id, elapsed, e)
            await self._record_error(log_id, str(e), elapsed)
            raise EvaluationFailedError() from e

        elapsed = _elapsed_ms(started)
        try:
            await self._logs.mark_success(
                log_id,
                response_text=response.text,
                score=result.score,
                feedback=result.feedback,
                criteria_scores=result.criteria_scores,
                tokens_used=response.tokens_used,
                response_time_ms=elapsed,
            )
        except ThinkScoreError as e:
            # The row must not stay pending
            logger.error("Failed to mark usage log %s as success: %s", log_id, e)
            await self._record_error(log_id, f"success write failed: {e}", elapsed)
            raise
        logger.info(
            "Evaluation %s succeeded: score=%d tokens=%s elapsed=%dms",
            log_id,
            result.score,
            response.tokens_used,
            elapsed,
        )

        outcome = EvaluationOutcome(result=result, log_id=log_id)
        if request.answer_id is not None and self._config.persist_scores:
            await self._persist_score(request.answer_id, result, outcome)
        return outcome

    async def _reject(
        self,
        request: EvaluationRequest,
        criteria: list[str] | None,
    ) -> EvaluationOutcome:
        """Short-circuit a suspected gaming attempt with a zero score."""
        result = EvaluationResult(
            score=0,
            feedback=GAMING_FEEDBACK,
            criteria_scores={axis: 0 for axis in known_axes(criteria)},
        )
        outcome = EvaluationOutcome(result=result, short_circuited=True)
        logger.info(
            "Answer rejected by pre-check (user=%s, question=%s, answer=%s)",
            request.user_id,
            request.question_id,
            request.answer_id,
        )

        if not self._config.log_rejected_attempts:
            return outcome

        try:
            log = await self._logs.create_pending(
                build_prompt(request.question, request.answer, criteria),
                self._llm.model,
                user_id=request.user_id,
                question_id=request.question_id,
                answer_id=request.answer_id,
            )
            await self._logs.mark_error(log.id, error_message=REJECTED_MESSAGE, response_time_ms=0)
            outcome.log_id = log.id
        except ThinkScoreError as e:
            logger.warning("Failed to write audit log for rejected answer: %s", e)
        return outcome

    async def _record_error(self, log_id: int, message: str, elapsed_ms: int) -> None:
        try:
            await self._logs.mark_error(log_id, error_message=message, response_time_ms=elapsed_ms)
        except ThinkScoreError as e:
            logger.error("Failed to mark usage log %s as error: %s", log_id, e)

    async def _persist_score(
        self,
        answer_id: int,
        result: EvaluationResult,
        outcome: EvaluationOutcome,
    ) -> None:
        try:
            score = await self._scores.create(
                answer_id,
                result.score,
                reason=result.feedback,
                is_ai_score=True,
            )
            outcome.score_id = score.id
        except ThinkScoreError as e:
            logger.warning("Failed to persist AI score for answer %s: %s", answer_id, e)
            outcome.score_warning = str(e)
