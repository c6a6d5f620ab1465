"""Question repository: CRUD, question of the day, random pick and seeding."""

import json
import logging
import random
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from thinkscore.errors import InvalidInputError, NotFoundError
from thinkscore.questions.schemas import (
    VALID_DIFFICULTIES,
    WRITABLE_FIELDS,
    Question,
    row_to_question,
)
from thinkscore.storage.gateway import Order, TableGateway, eq, neq

logger = logging.getLogger(__name__)

TABLE = "questions"

_SEED_REQUIRED = ("title", "content")


def select_todays_question(questions: list[Question], today: date) -> Question:
    """Pick the question of the day: day-of-year modulo the number of questions.

    ``questions`` must already be in a stable order.
    """
    if not questions:
        raise NotFoundError("No active questions found")
    return questions[today.timetuple().tm_yday % len(questions)]


def _clean_fields(data: dict[str, Any]) -> dict[str, Any]:
    unknown = set(data) - WRITABLE_FIELDS
    if unknown:
        raise InvalidInputError(f"Unknown question fields: {sorted(unknown)}")
    difficulty = data.get("difficulty")
    if difficulty is not None and difficulty not in VALID_DIFFICULTIES:
        raise InvalidInputError(
            f"Invalid difficulty {difficulty!r}. Must be one of: {sorted(VALID_DIFFICULTIES)}"
        )
    return data


def load_seed_file(path: str | Path) -> list[dict[str, Any]]:
    """Read and validate a JSON list of question objects.

    Raises:
        InvalidInputError: Unreadable file, invalid JSON or malformed entries.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidInputError(f"Cannot read seed file {path}: {e}") from e

    if not isinstance(data, list):
        raise InvalidInputError("Seed file must contain a JSON list of questions")

    records: list[dict[str, Any]] = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise InvalidInputError(f"Seed entry {i} is not an object")
        missing = [k for k in _SEED_REQUIRED if not item.get(k)]
        if missing:
            raise InvalidInputError(f"Seed entry {i} is missing {', '.join(missing)}")
        records.append(
            _clean_fields({
                "title": item["title"],
                "description": item.get("description"),
                "content": item["content"],
                "category": item.get("category"),
                "difficulty": item.get("difficulty"),
                "tags": list(item.get("tags") or []),
                "evaluation_criteria": item.get("evaluation_criteria"),
                "is_active": True,
            })
        )
    return records


class QuestionRepository:
    """Repository for the ``questions`` table."""

    def __init__(self, gateway: TableGateway) -> None:
        self._gateway = gateway

    async def list_active(self) -> list[Question]:
        """Active questions, newest first."""
        result = await self._gateway.query(
            TABLE,
            filters=[eq("is_active", True)],
            order_by=[Order("created_at", descending=True)],
        )
        return [row_to_question(row) for row in result.unwrap("fetch questions")]

    async def get(self, question_id: int) -> Question:
        """Get a question by id.

        Raises:
            NotFoundError: No question with this id.
        """
        result = await self._gateway.query_one(TABLE, filters=[eq("id", question_id)])
        return row_to_question(result.unwrap("fetch question"))

    async def create(self, data: dict[str, Any]) -> Question:
        """Insert a question from writable fields."""
        if not data.get("content"):
            raise InvalidInputError("content must not be empty")
        result = await self._gateway.insert(TABLE, _clean_fields(dict(data)))
        return row_to_question(result.unwrap("create question"))

    async def update(self, question_id: int, patch: dict[str, Any]) -> Question:
        """Apply an administrative edit.

        Raises:
            InvalidInputError: Empty patch or unknown fields.
            NotFoundError: No question with this id.
        """
        if not patch:
            raise InvalidInputError("Nothing to update")
        patch = _clean_fields(dict(patch))
        patch["updated_at"] = datetime.now(timezone.utc)
        result = await self._gateway.update(TABLE, [eq("id", question_id)], patch)
        rows = result.unwrap("update question")
        if not rows:
            raise NotFoundError(f"Question {question_id} not found")
        return row_to_question(rows[0])

    async def _active_by_id(self) -> list[Question]:
        result = await self._gateway.query(
            TABLE,
            filters=[eq("is_active", True)],
            order_by=[Order("id")],
        )
        return [row_to_question(row) for row in result.unwrap("fetch active questions")]

    async def get_todays_question(self, today: date | None = None) -> Question:
        """Question of the day for ``today`` (defaults to the current UTC date).

        Raises:
            NotFoundError: No active questions.
        """
        today = today or datetime.now(timezone.utc).date()
        return select_todays_question(await self._active_by_id(), today)

    async def get_random_question(self) -> Question:
        """Uniformly random active question.

        Raises:
            NotFoundError: No active questions.
        """
        questions = await self._active_by_id()
        if not questions:
            raise NotFoundError("No active questions found")
        return random.choice(questions)

    async def mark_published(self, question_id: int, published_at: datetime) -> Question:
        """Stamp a question as published and open its forum."""
        result = await self._gateway.update(
            TABLE,
            [eq("id", question_id)],
            {"published_at": published_at, "forum_enabled": True, "updated_at": published_at},
        )
        rows = result.unwrap("publish question")
        if not rows:
            raise NotFoundError(f"Question {question_id} not found")
        return row_to_question(rows[0])

    async def seed(self, records: list[dict[str, Any]]) -> int:
        """Replace the table content with ``records``.

        Returns:
            Number of questions inserted.
        """
        if not records:
            raise InvalidInputError("No questions to seed")
        deleted = (await self._gateway.delete(TABLE, [neq("id", 0)])).unwrap("clear questions")
        inserted = (await self._gateway.insert_many(TABLE, records)).unwrap("seed questions")
        logger.info("Seeded %d questions (replaced %d)", len(inserted), len(deleted))
        return len(inserted)
