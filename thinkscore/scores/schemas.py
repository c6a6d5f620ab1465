"""Schema definitions for score records.

Maps 1:1 to the ``scores`` table. An answer may carry several score rows
(re-evaluations and human scores); no uniqueness is enforced.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

MIN_SCORE = 0
MAX_SCORE = 100


def validate_score(value: Any) -> int:
    """Return ``value`` if it is an integer in [0, 100], else raise ValueError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Invalid score {value!r}. Must be an integer.")
    if not (MIN_SCORE <= value <= MAX_SCORE):
        raise ValueError(
            f"Invalid score {value}. Must be between {MIN_SCORE} and {MAX_SCORE}."
        )
    return value


@dataclass
class Score:
    """A persisted score row.

    Attributes:
        answer_id: Scored answer.
        score: Integer in [0, 100].
        reason: Feedback or justification.
        is_ai_score: True when produced by the evaluation pipeline.
        scorer_id: Human scorer, if any.
    """

    answer_id: int
    score: int
    id: int | None = None
    reason: str | None = None
    is_ai_score: bool = False
    scorer_id: str | None = None
    created_at: datetime | None = None
    answer: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        validate_score(self.score)
