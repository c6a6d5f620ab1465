"""Score repository."""

import logging
from typing import Any

from thinkscore.errors import InvalidInputError
from thinkscore.scores.schemas import Score, validate_score
from thinkscore.storage.gateway import Join, Order, TableGateway, eq

logger = logging.getLogger(__name__)

TABLE = "scores"


class ScoreRepository:
    """Create and read score rows."""

    def __init__(self, gateway: TableGateway) -> None:
        self._gateway = gateway

    async def create(
        self,
        answer_id: int,
        score: int,
        *,
        reason: str | None = None,
        is_ai_score: bool = False,
        scorer_id: str | None = None,
    ) -> Score:
        """Insert a score row.

        Raises:
            InvalidInputError: ``score`` is not an integer in [0, 100].
            UpstreamDataError: The insert failed.
        """
        try:
            validate_score(score)
        except ValueError as e:
            raise InvalidInputError(str(e)) from e

        result = await self._gateway.insert(
            TABLE,
            {
                "answer_id": answer_id,
                "score": score,
                "reason": reason,
                "is_ai_score": is_ai_score,
                "scorer_id": scorer_id,
            },
        )
        return _row_to_score(result.unwrap("create score"))

    async def list_by_answer(self, answer_id: int) -> list[Score]:
        """Scores of one answer, newest first."""
        result = await self._gateway.query(
            TABLE,
            filters=[eq("answer_id", answer_id)],
            order_by=[Order("created_at", descending=True)],
        )
        return [_row_to_score(row) for row in result.unwrap("fetch answer scores")]

    async def list_by_user(self, user_id: str) -> list[Score]:
        """Scores of a user's answers, newest first, with the answer summary."""
        result = await self._gateway.query(
            TABLE,
            joins=[
                Join(
                    "answers",
                    "answer_id",
                    columns=("user_id", "question_id", "content"),
                    inner=True,
                    alias="answer",
                ),
            ],
            filters=[eq("answer.user_id", user_id)],
            order_by=[Order("created_at", descending=True)],
        )
        return [_row_to_score(row) for row in result.unwrap("fetch user scores")]

    async def get(self, score_id: int) -> Score:
        """Get one score with its answer.

        Raises:
            NotFoundError: No score with this id.
        """
        result = await self._gateway.query_one(
            TABLE,
            joins=[
                Join(
                    "answers",
                    "answer_id",
                    columns=("id", "user_id", "question_id", "content", "created_at"),
                    alias="answer",
                ),
            ],
            filters=[eq("id", score_id)],
        )
        return _row_to_score(result.unwrap("fetch score"))


def _row_to_score(row: dict[str, Any]) -> Score:
    return Score(
        id=row.get("id"),
        answer_id=row["answer_id"],
        score=row["score"],
        reason=row.get("reason"),
        is_ai_score=bool(row.get("is_ai_score")),
        scorer_id=row.get("scorer_id"),
        created_at=row.get("created_at"),
        answer=row.get("answer"),
    )
