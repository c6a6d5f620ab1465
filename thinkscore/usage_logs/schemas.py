"""Schema definitions for LLM usage log records.

Maps 1:1 to the ``openai_logs`` table. One row per evaluation attempt,
written ``pending`` before the LLM call and transitioned exactly once to
``success`` or ``error``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

VALID_STATUSES: frozenset[str] = frozenset({
    "pending",
    "success",
    "error",
})

TERMINAL_STATUSES: frozenset[str] = frozenset({"success", "error"})


@dataclass
class UsageLogEntry:
    """A persisted usage log row.

    Attributes:
        prompt: Prompt text sent to the LLM.
        model: Model identifier.
        status: pending, success or error.
        id: Database-assigned identifier.
        user_id: Acting user, if known.
        question_id: Evaluated question, if known.
        answer_id: Evaluated answer, if known.
        response_text: Raw LLM output (success only).
        score: Total score (success only).
        feedback: Feedback text (success only).
        criteria_scores: Axis label -> sub-score (success only).
        tokens_used: Token usage reported by the provider.
        response_time_ms: Elapsed wall-clock milliseconds of the LLM call.
        error_message: Failure detail (error only).
        question / answer / profile: Joined summaries on list-by-user reads.
    """

    prompt: str
    model: str
    status: str = "pending"
    id: int | None = None
    user_id: str | None = None
    question_id: int | None = None
    answer_id: int | None = None
    response_text: str | None = None
    score: int | None = None
    feedback: str | None = None
    criteria_scores: dict[str, int] | None = None
    tokens_used: int | None = None
    response_time_ms: int | None = None
    error_message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    question: dict[str, Any] | None = field(default=None, repr=False)
    answer: dict[str, Any] | None = field(default=None, repr=False)
    profile: dict[str, Any] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.status not in VALID_STATUSES:
            raise ValueError(
                f"Invalid status {self.status!r}. "
                f"Must be one of: {sorted(VALID_STATUSES)}"
            )


@dataclass
class UsageStats:
    """Aggregated usage over a set of log rows."""

    total_calls: int = 0
    success_calls: int = 0
    error_calls: int = 0
    total_tokens: int = 0
    avg_response_time: int = 0
    avg_score: float = 0.0
