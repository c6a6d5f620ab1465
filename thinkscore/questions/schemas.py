"""Schema definitions for question records.

Maps 1:1 to the ``questions`` table.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

VALID_DIFFICULTIES: frozenset[str] = frozenset({
    "easy",
    "medium",
    "hard",
})

# Columns callers may set on create/update
WRITABLE_FIELDS: frozenset[str] = frozenset({
    "title",
    "content",
    "description",
    "category",
    "difficulty",
    "tags",
    "evaluation_criteria",
    "is_active",
})


@dataclass
class Question:
    """A persisted question.

    Attributes:
        content: Prompt text shown to users and sent to the evaluator.
        evaluation_criteria: Ordered axis labels; None selects the default rubric.
        forum_enabled: Whether forum posts may reference this question.
        published_at: When the daily job published it as the question of the day.
    """

    content: str
    id: int | None = None
    title: str | None = None
    description: str | None = None
    category: str | None = None
    difficulty: str | None = None
    tags: list[str] = field(default_factory=list)
    evaluation_criteria: list[str] | None = None
    is_active: bool = True
    forum_enabled: bool = False
    published_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.difficulty is not None and self.difficulty not in VALID_DIFFICULTIES:
            raise ValueError(
                f"Invalid difficulty {self.difficulty!r}. "
                f"Must be one of: {sorted(VALID_DIFFICULTIES)}"
            )


def row_to_question(row: dict[str, Any]) -> Question:
    """Convert a gateway row to a Question."""
    return Question(
        id=row.get("id"),
        title=row.get("title"),
        content=row.get("content") or "",
        description=row.get("description"),
        category=row.get("category"),
        difficulty=row.get("difficulty"),
        tags=list(row.get("tags") or []),
        evaluation_criteria=row.get("evaluation_criteria"),
        is_active=bool(row.get("is_active", True)),
        forum_enabled=bool(row.get("forum_enabled", False)),
        published_at=row.get("published_at"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )
