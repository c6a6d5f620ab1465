"""Answers submitted to questions."""

from thinkscore.answers.repository import AnswerRepository
from thinkscore.answers.schemas import Answer

__all__ = ["Answer", "AnswerRepository"]
