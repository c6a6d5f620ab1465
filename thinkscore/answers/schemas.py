"""Schema definitions for answer records.

Maps 1:1 to the ``answers`` table. ``user_id`` is None for anonymous answers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Answer:
    """A persisted answer, optionally with joined question, profile and scores."""

    question_id: int
    content: str
    id: int | None = None
    user_id: str | None = None
    created_at: datetime | None = None
    question: dict[str, Any] | None = None
    profile: dict[str, Any] | None = None
    scores: list[dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.content or not self.content.strip():
            raise ValueError("Answer content must not be empty")
