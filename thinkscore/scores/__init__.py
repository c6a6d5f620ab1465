"""Scores: numeric evaluations attached to answers."""

from thinkscore.scores.repository import ScoreRepository
from thinkscore.scores.schemas import MAX_SCORE, MIN_SCORE, Score, validate_score

__all__ = ["Score", "ScoreRepository", "validate_score", "MIN_SCORE", "MAX_SCORE"]
