"""Questions: CRUD, question of the day, seeding and the daily publish job.

Components:
- Question: Dataclass mapping to the questions table
- QuestionRepository: Data access over the table gateway
- run_daily_publish / DailyPublishResult: Once-per-date publish job
- load_seed_file / select_todays_question: Pure helpers
"""

from thinkscore.questions.daily import DailyPublishResult, run_daily_publish
from thinkscore.questions.repository import (
    QuestionRepository,
    load_seed_file,
    select_todays_question,
)
from thinkscore.questions.schemas import VALID_DIFFICULTIES, Question

__all__ = [
    "Question",
    "QuestionRepository",
    "DailyPublishResult",
    "run_daily_publish",
    "load_seed_file",
    "select_todays_question",
    "VALID_DIFFICULTIES",
]
