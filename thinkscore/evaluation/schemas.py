"""Data models for answer evaluation.

``EvaluationResult`` is the wire shape the LLM must return and the shape
handed back to callers (``score``, ``feedback``, ``criteriaScores``).
``EvaluationOutcome`` adds the bookkeeping of one evaluate call.
"""

from dataclasses import dataclass
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError

Score = Annotated[int, Field(ge=0, le=100)]


class EvaluationResult(BaseModel):
    """Parsed LLM evaluation.

    Integers are strict: ``82.0``, ``"82"`` and ``true`` are schema mismatches.
    """

    model_config = ConfigDict(strict=True, populate_by_name=True)

    score: Score = Field(description="Total score 0-100")
    feedback: str = Field(description="Two sentences: strength, then improvement")
    criteria_scores: dict[str, Score] = Field(
        alias="criteriaScores",
        description="Axis label -> sub-score, in the order the model returned them",
    )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class EvaluationParseError(ValueError):
    """LLM output was empty, not JSON, or did not match the result schema."""


def parse_evaluation(text: str | None) -> EvaluationResult:
    """Parse raw LLM output into an EvaluationResult.

    Raises:
        EvaluationParseError: Empty output, malformed JSON or schema mismatch.
    """
    if not text or not text.strip():
        raise EvaluationParseError("Empty LLM response")
    try:
        return EvaluationResult.model_validate_json(text.strip())
    except ValidationError as e:
        raise EvaluationParseError(f"Invalid evaluation response: {e.errors()[0]['msg']}") from e


@dataclass
class EvaluationRequest:
    """Input to one evaluation.

    Attributes:
        question: Question text.
        answer: Candidate answer text.
        criteria: Optional axis labels; the default rubric is used when empty.
        user_id: Acting user, for the usage log.
        question_id: Question reference, for the usage log.
        answer_id: Answer reference; also enables the AI score row.
    """

    question: str
    answer: str
    criteria: list[str] | None = None
    user_id: str | None = None
    question_id: int | None = None
    answer_id: int | None = None


@dataclass
class EvaluationOutcome:
    """Result of ``AnswerEvaluationService.evaluate``.

    Attributes:
        result: The evaluation returned to the caller.
        log_id: Usage log row written for this attempt (None when not logged).
        short_circuited: True when the pre-check rejected the answer.
        score_id: AI score row inserted for the answer, if any.
        score_warning: Why the AI score row could not be written, if it failed.
    """

    result: EvaluationResult
    log_id: int | None = None
    short_circuited: bool = False
    score_id: int | None = None
    score_warning: str | None = None
