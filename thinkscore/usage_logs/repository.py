"""Usage log repository: lifecycle writes and reporting reads.

Lifecycle writes (``create_pending``, ``mark_success``, ``mark_error``) are
used by the evaluation pipeline. Transitions only touch rows that are still
``pending``, so a row can never be revisited once it has resolved.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from thinkscore.errors import InvalidInputError, UpstreamDataError
from thinkscore.stats import round_half_up
from thinkscore.storage.gateway import Join, Order, TableGateway, eq, gte, lt, lte
from thinkscore.usage_logs.schemas import TERMINAL_STATUSES, VALID_STATUSES, UsageLogEntry, UsageStats

logger = logging.getLogger(__name__)

TABLE = "openai_logs"

_USER_JOINS = (
    Join("questions", "question_id", columns=("id", "title", "content"), alias="question"),
    Join("answers", "answer_id", columns=("id", "content"), alias="answer"),
    Join("profiles", "user_id", columns=("id", "display_name"), alias="profile"),
)

_STATS_COLUMNS = ("status", "tokens_used", "response_time_ms", "score")


def _validate_days(days: Any) -> int:
    # bool is an int subclass; True must not mean "one day"
    if isinstance(days, bool) or not isinstance(days, int) or days < 1:
        raise InvalidInputError(f"days must be a positive integer, got {days!r}")
    return days


def _validate_page(limit: int, offset: int = 0) -> None:
    if limit < 1:
        raise InvalidInputError(f"limit must be >= 1, got {limit}")
    if offset < 0:
        raise InvalidInputError(f"offset must be >= 0, got {offset}")


class UsageLogRepository:
    """Repository for LLM usage log persistence and reporting."""

    def __init__(self, gateway: TableGateway) -> None:
        self._gateway = gateway

    # ── Lifecycle ────────────────────────────────────────

    async def create_pending(
        self,
        prompt: str,
        model: str,
        *,
        user_id: str | None = None,
        question_id: int | None = None,
        answer_id: int | None = None,
    ) -> UsageLogEntry:
        """Insert a ``pending`` row before the LLM call.

        Raises:
            UpstreamDataError: The insert failed.
        """
        result = await self._gateway.insert(
            TABLE,
            {
                "user_id": user_id,
                "question_id": question_id,
                "answer_id": answer_id,
                "prompt": prompt,
                "model": model,
                "status": "pending",
            },
        )
        return _row_to_entry(result.unwrap("create usage log"))

    async def mark_success(
        self,
        log_id: int,
        *,
        response_text: str,
        score: int,
        feedback: str,
        criteria_scores: dict[str, int],
        tokens_used: int | None,
        response_time_ms: int,
    ) -> UsageLogEntry:
        """Transition a pending row to ``success`` with the parsed result."""
        return await self._transition(
            log_id,
            {
                "status": "success",
                "response_text": response_text,
                "score": score,
                "feedback": feedback,
                "criteria_scores": criteria_scores,
                "tokens_used": tokens_used,
                "response_time_ms": response_time_ms,
                "updated_at": datetime.now(timezone.utc),
            },
        )

    async def mark_error(
        self,
        log_id: int,
        *,
        error_message: str,
        response_time_ms: int | None = None,
    ) -> UsageLogEntry:
        """Transition a pending row to ``error``."""
        return await self._transition(
            log_id,
            {
                "status": "error",
                "error_message": error_message,
                "response_time_ms": response_time_ms,
                "updated_at": datetime.now(timezone.utc),
            },
        )

    async def _transition(self, log_id: int, patch: dict[str, Any]) -> UsageLogEntry:
        if patch.get("status") not in TERMINAL_STATUSES:
            raise InvalidInputError(f"Cannot transition usage log to {patch.get('status')!r}")
        result = await self._gateway.update(
            TABLE,
            [eq("id", log_id), eq("status", "pending")],
            patch,
        )
        rows = result.unwrap(f"mark usage log {patch['status']}")
        if not rows:
            raise UpstreamDataError(
                f"Failed to mark usage log {patch['status']}: "
                f"log {log_id} is missing or no longer pending"
            )
        return _row_to_entry(rows[0])

    # ── Reads ────────────────────────────────────────────

    async def list_by_user(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
    ) -> list[UsageLogEntry]:
        """Get a user's logs, newest first, with question/answer/profile summaries."""
        _validate_page(limit, offset)
        result = await self._gateway.query(
            TABLE,
            filters=[eq("user_id", user_id)],
            joins=_USER_JOINS,
            order_by=[Order("created_at", descending=True)],
            limit=limit,
            offset=offset,
        )
        return [_row_to_entry(row) for row in result.unwrap("fetch logs")]

    async def list_by_status(self, status: str, limit: int = 100) -> list[UsageLogEntry]:
        """Get logs in one status, newest first.

        Raises:
            InvalidInputError: Unknown status or limit < 1.
        """
        if status not in VALID_STATUSES:
            raise InvalidInputError(
                f"Invalid status {status!r}. Must be one of: {sorted(VALID_STATUSES)}"
            )
        _validate_page(limit)
        result = await self._gateway.query(
            TABLE,
            filters=[eq("status", status)],
            order_by=[Order("created_at", descending=True)],
            limit=limit,
        )
        return [_row_to_entry(row) for row in result.unwrap("fetch logs by status")]

    async def get_usage_stats(
        self,
        user_id: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> UsageStats:
        """Aggregate usage over an optional user and created_at window (inclusive)."""
        filters = []
        if user_id is not None:
            filters.append(eq("user_id", user_id))
        if start is not None:
            filters.append(gte("created_at", start))
        if end is not None:
            filters.append(lte("created_at", end))

        result = await self._gateway.query(TABLE, columns=_STATS_COLUMNS, filters=filters)
        return summarize_usage(result.unwrap("fetch usage stats"))

    # ── Retention ────────────────────────────────────────

    async def count_older_than(self, days: int) -> int:
        """Count rows a cleanup with the same ``days`` would delete."""
        cutoff = _cutoff(_validate_days(days))
        result = await self._gateway.count(TABLE, filters=[lt("created_at", cutoff)])
        return result.unwrap("count old logs")

    async def cleanup_old_logs(self, days: int) -> int:
        """Delete rows created more than ``days`` days ago.

        Returns:
            Number of rows deleted.

        Raises:
            InvalidInputError: ``days`` is not a positive integer.
        """
        cutoff = _cutoff(_validate_days(days))
        result = await self._gateway.delete(TABLE, [lt("created_at", cutoff)])
        deleted = len(result.unwrap("cleanup logs"))
        logger.info("Deleted %d usage logs older than %s", deleted, cutoff.isoformat())
        return deleted


def summarize_usage(rows: list[dict[str, Any]]) -> UsageStats:
    """Reduce log rows to usage statistics in one pass."""
    stats = UsageStats()
    response_time_total = 0
    response_time_count = 0
    score_total = 0
    score_count = 0

    for row in rows:
        stats.total_calls += 1
        status = row.get("status")
        if status == "success":
            stats.success_calls += 1
        elif status == "error":
            stats.error_calls += 1
        if row.get("tokens_used") is not None:
            stats.total_tokens += int(row["tokens_used"])
        if row.get("response_time_ms") is not None:
            response_time_total += int(row["response_time_ms"])
            response_time_count += 1
        if row.get("score") is not None:
            score_total += int(row["score"])
            score_count += 1

    if response_time_count:
        stats.avg_response_time = int(round_half_up(response_time_total / response_time_count))
    if score_count:
        stats.avg_score = round_half_up(score_total / score_count, 2)
    return stats


def _cutoff(days: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


def _row_to_entry(row: dict[str, Any]) -> UsageLogEntry:
    """Convert a gateway row to a UsageLogEntry."""
    return UsageLogEntry(
        id=row.get("id"),
        user_id=row.get("user_id"),
        question_id=row.get("question_id"),
        answer_id=row.get("answer_id"),
        prompt=row.get("prompt") or "",
        model=row.get("model") or "",
        response_text=row.get("response_text"),
        score=row.get("score"),
        feedback=row.get("feedback"),
        criteria_scores=row.get("criteria_scores"),
        tokens_used=row.get("tokens_used"),
        response_time_ms=row.get("response_time_ms"),
        status=row.get("status") or "pending",
        error_message=row.get("error_message"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        question=row.get("question"),
        answer=row.get("answer"),
        profile=row.get("profile"),
    )
