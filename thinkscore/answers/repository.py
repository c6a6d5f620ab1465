"""Answer repository.

One-to-many score rows are fetched in a second query and attached to each
answer; the gateway only joins many-to-one.
"""

import logging
from collections import defaultdict
from typing import Any

from thinkscore.answers.schemas import Answer
from thinkscore.errors import InvalidInputError
from thinkscore.storage.gateway import Join, Order, TableGateway, eq, is_in

logger = logging.getLogger(__name__)

TABLE = "answers"

_QUESTION_JOIN = Join(
    "questions",
    "question_id",
    columns=("id", "title", "content", "is_active"),
    alias="question",
)
_PROFILE_JOIN = Join(
    "profiles",
    "user_id",
    columns=("id", "display_name"),
    alias="profile",
)


class AnswerRepository:
    """Repository for the ``answers`` table."""

    def __init__(self, gateway: TableGateway) -> None:
        self._gateway = gateway

    async def create(self, question_id: int, content: str, user_id: str | None = None) -> Answer:
        """Insert an answer.

        Raises:
            InvalidInputError: Empty content.
        """
        if not content or not content.strip():
            raise InvalidInputError("content must not be empty")
        result = await self._gateway.insert(
            TABLE,
            {"question_id": question_id, "content": content, "user_id": user_id},
        )
        return _row_to_answer(result.unwrap("create answer"))

    async def list_by_user(self, user_id: str) -> list[Answer]:
        """A user's answers, newest first, with question and scores."""
        result = await self._gateway.query(
            TABLE,
            joins=[_QUESTION_JOIN],
            filters=[eq("user_id", user_id)],
            order_by=[Order("created_at", descending=True)],
        )
        return await self._with_scores(result.unwrap("fetch user answers"))

    async def list_by_question(self, question_id: int) -> list[Answer]:
        """Answers to a question, newest first, with author profile and scores."""
        result = await self._gateway.query(
            TABLE,
            joins=[_PROFILE_JOIN],
            filters=[eq("question_id", question_id)],
            order_by=[Order("created_at", descending=True)],
        )
        return await self._with_scores(result.unwrap("fetch question answers"))

    async def get(self, answer_id: int) -> Answer:
        """Get one answer with question, profile and scores.

        Raises:
            NotFoundError: No answer with this id.
        """
        result = await self._gateway.query_one(
            TABLE,
            joins=[_QUESTION_JOIN, _PROFILE_JOIN],
            filters=[eq("id", answer_id)],
        )
        answers = await self._with_scores([result.unwrap("fetch answer")])
        return answers[0]

    async def _with_scores(self, rows: list[dict[str, Any]]) -> list[Answer]:
        if not rows:
            return []
        ids = [row["id"] for row in rows]
        scores = (
            await self._gateway.query(
                "scores",
                filters=[is_in("answer_id", ids)],
                order_by=[Order("created_at", descending=True)],
            )
        ).unwrap("fetch answer scores")

        by_answer: dict[int, list[dict[str, Any]]] = defaultdict(list)
        for score in scores:
            by_answer[score["answer_id"]].append(score)
        return [_row_to_answer(row, by_answer.get(row["id"], [])) for row in rows]


def _row_to_answer(row: dict[str, Any], scores: list[dict[str, Any]] | None = None) -> Answer:
    return Answer(
        id=row.get("id"),
        user_id=row.get("user_id"),
        question_id=row["question_id"],
        content=row["content"],
        created_at=row.get("created_at"),
        question=row.get("question"),
        profile=row.get("profile"),
        scores=scores or [],
    )
