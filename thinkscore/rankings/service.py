"""Ranking aggregator: leaderboards, personal rank and summary statistics.

Leaderboards are computed in memory after bulk reads through the table
gateway. Nothing in this module writes.

Components:
- Pure helpers (no I/O): ``display_name_for``, ``aggregate_user_scores``,
  ``rank_overall``, ``rank_question_scores``, ``summarize_profiles``
- RankingService: Async orchestrator over the gateway
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from thinkscore.errors import InvalidInputError
from thinkscore.rankings.config import RankingConfig
from thinkscore.rankings.schemas import (
    GUEST_NAME,
    HIDDEN_NAME,
    QuestionRankingUser,
    RankingStats,
    RankingUser,
    UserRank,
)
from thinkscore.stats import percentile, round_half_up
from thinkscore.storage.gateway import Join, Order, TableGateway, eq, gt, is_in

logger = logging.getLogger(__name__)

# ── Helpers ──────────────────────────────────────────────


@dataclass
class _UserAggregate:
    user_id: str
    total_score: int = 0
    answer_count: int = 0
    earliest_answer: datetime | None = None

    @property
    def average_score(self) -> float:
        return self.total_score / self.answer_count


def display_name_for(profile: dict[str, Any] | None) -> str:
    """Profile name, or a placeholder when hidden or not a member."""
    if profile is None:
        return GUEST_NAME
    return profile.get("display_name") or HIDDEN_NAME


def aggregate_user_scores(score_rows: list[dict[str, Any]]) -> dict[str, _UserAggregate]:
    """Group score rows (joined to ``answer``) by the answer's user.

    Rows of anonymous answers are skipped.
    """
    aggregates: dict[str, _UserAggregate] = {}
    for row in score_rows:
        answer = row.get("answer") or {}
        user_id = answer.get("user_id")
        if user_id is None:
            continue
        agg = aggregates.get(user_id)
        if agg is None:
            agg = aggregates[user_id] = _UserAggregate(user_id=user_id)
        agg.total_score += row["score"]
        agg.answer_count += 1
        created = answer.get("created_at")
        if created is not None and (agg.earliest_answer is None or created < agg.earliest_answer):
            agg.earliest_answer = created
    return aggregates


def _overall_sort_key(agg: _UserAggregate) -> tuple:
    earliest = agg.earliest_answer
    return (
        -agg.average_score,
        earliest is None,
        earliest.timestamp() if earliest is not None else 0.0,
        agg.user_id,
    )


def rank_overall(
    aggregates: dict[str, _UserAggregate],
    profiles: dict[str, dict[str, Any]],
    limit: int,
) -> list[RankingUser]:
    """Sort by average descending, take ``limit``, assign contiguous ranks.

    Ties go to the user whose first scored answer is older, then by user id.
    """
    ordered = sorted(aggregates.values(), key=_overall_sort_key)[:limit]
    return [
        RankingUser(
            id=agg.user_id,
            display_name=display_name_for(profiles.get(agg.user_id)),
            total_score=agg.total_score,
            average_score=agg.average_score,
            answer_count=agg.answer_count,
            rank_position=position,
        )
        for position, agg in enumerate(ordered, start=1)
    ]


def rank_question_scores(
    score_rows: list[dict[str, Any]],
    profiles: dict[str, dict[str, Any]],
) -> list[QuestionRankingUser]:
    """Rank already-ordered score rows of one question."""
    rankings: list[QuestionRankingUser] = []
    for position, row in enumerate(score_rows, start=1):
        user_id = (row.get("answer") or {}).get("user_id")
        rankings.append(
            QuestionRankingUser(
                id=user_id,
                display_name=display_name_for(profiles.get(user_id) if user_id else None),
                question_score=row["score"],
                question_answer_count=1,
                total_score=0,
                rank_position=position,
            )
        )
    return rankings


def summarize_profiles(profiles: list[dict[str, Any]], total_answers: int) -> RankingStats:
    """Compute ranking stats from profile rows (``display_name``, ``total_score``)."""
    positive = [p["total_score"] for p in profiles if (p.get("total_score") or 0) > 0]
    average = round_half_up(sum(positive) / len(positive), 2) if positive else 0.0

    top_name: str | None = None
    top_score = 0
    if profiles:
        top = max(profiles, key=lambda p: p.get("total_score") or 0)
        top_name = top.get("display_name") or HIDDEN_NAME
        top_score = top.get("total_score") or 0

    return RankingStats(
        total_users=len(profiles),
        total_answers=total_answers,
        average_score=average,
        top_scorer_name=top_name,
        top_score=top_score,
    )


# ── Service ──────────────────────────────────────────────


class RankingService:
    """Read-only leaderboard queries.

    Async orchestrators:
      - ``get_overall_rankings`` / ``get_question_rankings``
      - ``get_my_overall_rank`` / ``get_my_question_rank``
      - ``get_ranking_stats``
    """

    def __init__(self, gateway: TableGateway, config: RankingConfig | None = None) -> None:
        self._gateway = gateway
        self._config = config or RankingConfig()

    def _check_limit(self, limit: int | None) -> int:
        if limit is None:
            return self._config.default_limit
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise InvalidInputError(f"limit must be a positive integer, got {limit!r}")
        return limit

    async def get_overall_rankings(self, limit: int | None = None) -> list[RankingUser]:
        """Users ranked by average score across all their scored answers."""
        limit = self._check_limit(limit)

        scores = (
            await self._gateway.query(
                "scores",
                columns=("answer_id", "score"),
                joins=[
                    Join(
                        "answers",
                        "answer_id",
                        columns=("user_id", "created_at"),
                        inner=True,
                        alias="answer",
                    ),
                ],
            )
        ).unwrap("fetch scores")
        if not scores:
            return []

        profiles = (
            await self._gateway.query("profiles", columns=("id", "display_name"))
        ).unwrap("fetch profiles")

        aggregates = aggregate_user_scores(scores)
        rankings = rank_overall(aggregates, {p["id"]: p for p in profiles}, limit)
        logger.debug("Ranked %d of %d users", len(rankings), len(aggregates))
        return rankings

    async def get_question_rankings(
        self,
        question_id: int,
        limit: int | None = None,
    ) -> list[QuestionRankingUser]:
        """Score rows of one question, best first."""
        limit = self._check_limit(limit)

        scores = (
            await self._gateway.query(
                "scores",
                columns=("answer_id", "score", "created_at"),
                joins=[
                    Join(
                        "answers",
                        "answer_id",
                        columns=("user_id", "question_id"),
                        inner=True,
                        alias="answer",
                    ),
                ],
                filters=[eq("answer.question_id", question_id)],
                order_by=[Order("score", descending=True), Order("created_at")],
                limit=limit,
            )
        ).unwrap("fetch question scores")
        if not scores:
            return []

        user_ids = sorted({s["answer"]["user_id"] for s in scores if s["answer"]["user_id"]})
        profiles: list[dict[str, Any]] = []
        if user_ids:
            profiles = (
                await self._gateway.query(
                    "profiles",
                    columns=("id", "display_name"),
                    filters=[is_in("id", user_ids)],
                )
            ).unwrap("fetch profiles")

        return rank_question_scores(scores, {p["id"]: p for p in profiles})

    async def get_my_overall_rank(self, user_id: str) -> UserRank:
        """Rank of the user's profile total among all profiles.

        Raises:
            NotFoundError: The user has no profile.
        """
        profile = (
            await self._gateway.query_one(
                "profiles",
                columns=("id", "total_score"),
                filters=[eq("id", user_id)],
            )
        ).unwrap("fetch profile")
        my_score = profile.get("total_score") or 0

        higher = (
            await self._gateway.count("profiles", filters=[gt("total_score", my_score)])
        ).unwrap("count higher profiles")
        total = (await self._gateway.count("profiles")).unwrap("count profiles")

        rank = higher + 1
        total = max(total, 1)
        return UserRank(
            rank_position=rank,
            total_users=total,
            user_score=my_score,
            percentile=percentile(rank, total),
        )

    async def get_my_question_rank(self, user_id: str, question_id: int) -> UserRank:
        """Rank of the user's latest score on a question among all its score rows.

        Raises:
            NotFoundError: The user has no score on this question.
        """
        answer_join = Join(
            "answers",
            "answer_id",
            columns=("user_id", "question_id"),
            inner=True,
            alias="answer",
        )
        mine = (
            await self._gateway.query_one(
                "scores",
                columns=("id", "score", "created_at"),
                joins=[answer_join],
                filters=[eq("answer.user_id", user_id), eq("answer.question_id", question_id)],
                order_by=[Order("created_at", descending=True)],
            )
        ).unwrap("fetch my question score")
        my_score = mine["score"]

        higher = (
            await self._gateway.count(
                "scores",
                joins=[answer_join],
                filters=[eq("answer.question_id", question_id), gt("score", my_score)],
            )
        ).unwrap("count higher scores")
        total = (
            await self._gateway.count(
                "scores",
                joins=[answer_join],
                filters=[eq("answer.question_id", question_id)],
            )
        ).unwrap("count question scores")

        rank = higher + 1
        total = max(total, 1)
        return UserRank(
            rank_position=rank,
            total_users=total,
            user_score=my_score,
            percentile=percentile(rank, total),
        )

    async def get_ranking_stats(self) -> RankingStats:
        """Totals, mean positive profile score and the top scorer."""
        profiles = (
            await self._gateway.query(
                "profiles",
                columns=("id", "display_name", "total_score"),
                order_by=[Order("id")],
            )
        ).unwrap("fetch profiles")
        total_answers = (await self._gateway.count("answers")).unwrap("count answers")
        return summarize_profiles(profiles, total_answers)
