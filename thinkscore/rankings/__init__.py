"""Leaderboards computed from scores and profiles.

Components:
- RankingService: Overall/per-question rankings, personal rank, stats
- RankingConfig: Pydantic settings (RANKING_* env vars)
- RankingUser / QuestionRankingUser / UserRank / RankingStats: Result records
"""

from thinkscore.rankings.config import RankingConfig
from thinkscore.rankings.schemas import (
    GUEST_NAME,
    HIDDEN_NAME,
    QuestionRankingUser,
    RankingStats,
    RankingUser,
    UserRank,
)
from thinkscore.rankings.service import RankingService

__all__ = [
    "RankingService",
    "RankingConfig",
    "RankingUser",
    "QuestionRankingUser",
    "UserRank",
    "RankingStats",
    "HIDDEN_NAME",
    "GUEST_NAME",
]
