"""Daily question publish job.

Publishes the question of the day: stamps ``published_at`` and opens its
forum. The job claims a ``job_runs`` row for (job name, run date) before
doing any work, so repeated or concurrent runs for the same date are no-ops.
A failed publish releases the claim so a later run can retry.

Designed for external cron scheduling: ``5 0 * * * thinkscore publish-daily-question``
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from thinkscore.errors import ThinkScoreError
from thinkscore.questions.repository import QuestionRepository
from thinkscore.storage.gateway import TableGateway, eq

logger = logging.getLogger(__name__)

JOB_NAME = "daily_question_publish"
JOB_RUNS_TABLE = "job_runs"


@dataclass
class DailyPublishResult:
    """Summary of a daily publish run."""

    date: date
    question_id: int | None = None
    published: bool = False
    skipped: bool = False
    errors: list[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0


async def run_daily_publish(
    gateway: TableGateway,
    target_date: date | None = None,
) -> DailyPublishResult:
    """
    Publish the question of the day once per date.

    Args:
        gateway: Table gateway over a connected Database (caller manages lifecycle).
        target_date: Date to publish for (default: today UTC).

    Returns:
        DailyPublishResult; ``skipped`` when the date was already claimed.
    """
    target_date = target_date or datetime.now(timezone.utc).date()
    result = DailyPublishResult(date=target_date)
    start_time = time.monotonic()

    # Phase 1: Claim the run
    claim = await gateway.insert(JOB_RUNS_TABLE, {"job_name": JOB_NAME, "run_date": target_date})
    if claim.error is not None:
        if claim.error.code == "conflict":
            logger.info("Daily publish for %s already ran, skipping", target_date)
            result.skipped = True
        else:
            logger.error("Failed to claim daily publish for %s: %s", target_date, claim.error.message)
            result.errors.append(f"claim: {claim.error.message}")
        result.elapsed_seconds = time.monotonic() - start_time
        return result

    # Phase 2: Publish today's question
    questions = QuestionRepository(gateway)
    try:
        question = await questions.get_todays_question(target_date)
        await questions.mark_published(question.id, datetime.now(timezone.utc))
        result.question_id = question.id
        result.published = True
        logger.info("Published question %s for %s", question.id, target_date)
    except ThinkScoreError as e:
        logger.error("Daily publish for %s failed: %s", target_date, e)
        result.errors.append(f"publish: {e}")
        await _release_claim(gateway, target_date, result)

    result.elapsed_seconds = time.monotonic() - start_time
    return result


async def _release_claim(gateway: TableGateway, target_date: date, result: DailyPublishResult) -> None:
    released = await gateway.delete(
        JOB_RUNS_TABLE,
        [eq("job_name", JOB_NAME), eq("run_date", target_date)],
    )
    if released.error is not None:
        logger.error("Failed to release daily publish claim: %s", released.error.message)
        result.errors.append(f"release: {released.error.message}")
