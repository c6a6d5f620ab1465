"""Result records produced by the ranking aggregator.

All records are read-only views computed in memory; nothing here maps to a
table.
"""

from dataclasses import dataclass

# Display names for users without a usable profile name
HIDDEN_NAME = "비공개"
GUEST_NAME = "비회원"


@dataclass
class RankingUser:
    """One row of the overall leaderboard.

    Attributes:
        id: User identifier.
        display_name: Profile name, HIDDEN_NAME or GUEST_NAME.
        total_score: Sum of the user's scores.
        average_score: total_score / answer_count.
        answer_count: Number of score rows counted.
        rank_position: 1-based position.
    """

    id: str
    display_name: str
    total_score: int
    average_score: float
    answer_count: int
    rank_position: int


@dataclass
class QuestionRankingUser:
    """One row of a per-question leaderboard."""

    id: str | None
    display_name: str
    question_score: int
    question_answer_count: int
    total_score: int
    rank_position: int


@dataclass
class UserRank:
    """A user's position within a population."""

    rank_position: int
    total_users: int
    user_score: int
    percentile: float


@dataclass
class RankingStats:
    """Leaderboard summary."""

    total_users: int
    total_answers: int
    average_score: float
    top_scorer_name: str | None
    top_score: int
