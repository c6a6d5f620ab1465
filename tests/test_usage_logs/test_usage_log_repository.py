"""Tests for UsageLogRepository and usage statistics."""

import pytest

from thinkscore.errors import InvalidInputError, UpstreamDataError
from thinkscore.storage.gateway import GatewayError, GatewayResult
from thinkscore.usage_logs.repository import TABLE, UsageLogRepository, summarize_usage


def _log_row(**kwargs):
    row = {"id": 1, "prompt": "p", "model": "gpt-5-nano", "status": "pending"}
    row.update(kwargs)
    return row


@pytest.fixture
def repo(mock_gateway) -> UsageLogRepository:
    return UsageLogRepository(mock_gateway)


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_create_pending(self, repo, mock_gateway):
        mock_gateway.insert.return_value = GatewayResult(data=_log_row(id=7, user_id="u1"))

        entry = await repo.create_pending("prompt", "gpt-5-nano", user_id="u1", question_id=3)

        assert entry.id == 7
        assert entry.status == "pending"
        table, record = mock_gateway.insert.call_args.args
        assert table == TABLE == "openai_logs"
        assert record["status"] == "pending"
        assert record["question_id"] == 3
        assert record["answer_id"] is None

    @pytest.mark.asyncio
    async def test_create_pending_failure(self, repo, mock_gateway):
        mock_gateway.insert.return_value = GatewayResult(error=GatewayError("database", "down"))

        with pytest.raises(UpstreamDataError, match="create usage log"):
            await repo.create_pending("prompt", "gpt-5-nano")

    @pytest.mark.asyncio
    async def test_mark_success_only_touches_pending(self, repo, mock_gateway):
        mock_gateway.update.return_value = GatewayResult(data=[_log_row(status="success", score=82)])

        entry = await repo.mark_success(
            1,
            response_text="{}",
            score=82,
            feedback="f",
            criteria_scores={"설득력": 82},
            tokens_used=100,
            response_time_ms=1200,
        )

        assert entry.status == "success"
        table, filters, patch = mock_gateway.update.call_args.args
        assert [(f.column, f.value) for f in filters] == [("id", 1), ("status", "pending")]
        assert patch["status"] == "success"
        assert patch["response_time_ms"] == 1200
        assert "updated_at" in patch

    @pytest.mark.asyncio
    async def test_mark_error(self, repo, mock_gateway):
        mock_gateway.update.return_value = GatewayResult(
            data=[_log_row(status="error", error_message="timeout")]
        )

        entry = await repo.mark_error(1, error_message="timeout", response_time_ms=60000)

        assert entry.status == "error"
        assert entry.error_message == "timeout"

    @pytest.mark.asyncio
    async def test_transition_of_resolved_row_fails(self, repo, mock_gateway):
        mock_gateway.update.return_value = GatewayResult(data=[])

        with pytest.raises(UpstreamDataError, match="no longer pending"):
            await repo.mark_error(1, error_message="late")

    @pytest.mark.asyncio
    async def test_transition_back_to_pending_rejected(self, repo, mock_gateway):
        with pytest.raises(InvalidInputError, match="pending"):
            await repo._transition(1, {"status": "pending"})

        mock_gateway.update.assert_not_called()


class TestReads:
    @pytest.mark.asyncio
    async def test_list_by_user_joins_summaries(self, repo, mock_gateway):
        mock_gateway.query.return_value = GatewayResult(data=[
            _log_row(
                status="success",
                question={"id": 3, "title": "자유", "content": "자유란?"},
                answer=None,
                profile={"id": "u1", "display_name": "철수"},
            ),
        ])

        logs = await repo.list_by_user("u1", limit=10, offset=5)

        assert logs[0].question["title"] == "자유"
        assert logs[0].answer is None
        kwargs = mock_gateway.query.call_args.kwargs
        assert [j.name for j in kwargs["joins"]] == ["question", "answer", "profile"]
        assert kwargs["limit"] == 10
        assert kwargs["offset"] == 5

    @pytest.mark.asyncio
    async def test_list_by_user_rejects_bad_page(self, repo, mock_gateway):
        with pytest.raises(InvalidInputError):
            await repo.list_by_user("u1", limit=0)
        with pytest.raises(InvalidInputError):
            await repo.list_by_user("u1", offset=-1)
        mock_gateway.query.assert_not_called()

    @pytest.mark.asyncio
    async def test_list_by_status(self, repo, mock_gateway):
        mock_gateway.query.return_value = GatewayResult(data=[_log_row(status="error")])

        logs = await repo.list_by_status("error", limit=3)

        assert logs[0].status == "error"
        assert mock_gateway.query.call_args.kwargs["filters"][0].value == "error"

    @pytest.mark.asyncio
    async def test_list_by_unknown_status(self, repo, mock_gateway):
        with pytest.raises(InvalidInputError, match="Invalid status"):
            await repo.list_by_status("timeout")
        mock_gateway.query.assert_not_called()

    @pytest.mark.asyncio
    async def test_usage_stats_window_filters(self, repo, mock_gateway):
        from datetime import datetime, timezone

        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        end = datetime(2026, 1, 31, tzinfo=timezone.utc)
        mock_gateway.query.return_value = GatewayResult(data=[])

        stats = await repo.get_usage_stats("u1", start, end)

        assert stats.total_calls == 0
        filters = mock_gateway.query.call_args.kwargs["filters"]
        assert [(f.column, f.op) for f in filters] == [
            ("user_id", "eq"),
            ("created_at", "gte"),
            ("created_at", "lte"),
        ]

    @pytest.mark.asyncio
    async def test_system_stats_have_no_user_filter(self, repo, mock_gateway):
        mock_gateway.query.return_value = GatewayResult(data=[])

        await repo.get_usage_stats()

        assert mock_gateway.query.call_args.kwargs["filters"] == []


class TestSummarizeUsage:
    def test_aggregates_rows(self):
        stats = summarize_usage([
            {"status": "success", "tokens_used": 100, "response_time_ms": 1000, "score": 80},
            {"status": "success", "tokens_used": 150, "response_time_ms": 1501, "score": 0},
            {"status": "error", "tokens_used": None, "response_time_ms": 60000, "score": None},
            {"status": "pending", "tokens_used": None, "response_time_ms": None, "score": None},
        ])

        assert stats.total_calls == 4
        assert stats.success_calls == 2
        assert stats.error_calls == 1
        assert stats.total_tokens == 250
        assert stats.avg_response_time == 20834
        assert stats.avg_score == 40.0

    def test_empty(self):
        stats = summarize_usage([])
        assert stats.total_calls == 0
        assert stats.avg_response_time == 0
        assert stats.avg_score == 0.0

    def test_avg_score_rounds_half_up(self):
        stats = summarize_usage([
            {"status": "success", "score": 70},
            {"status": "success", "score": 71},
            {"status": "success", "score": 71},
        ])
        assert stats.avg_score == 70.67


class TestRetention:
    @pytest.mark.asyncio
    async def test_cleanup_returns_deleted_count(self, repo, mock_gateway):
        mock_gateway.delete.return_value = GatewayResult(data=[{"id": 1}, {"id": 2}, {"id": 3}])

        assert await repo.cleanup_old_logs(30) == 3
        table, filters = mock_gateway.delete.call_args.args
        assert table == "openai_logs"
        assert filters[0].column == "created_at"
        assert filters[0].op == "lt"

    @pytest.mark.asyncio
    async def test_count_older_than(self, repo, mock_gateway):
        mock_gateway.count.return_value = GatewayResult(data=12)
        assert await repo.count_older_than(90) == 12

    @pytest.mark.asyncio
    @pytest.mark.parametrize("days", [0, -5, True, 1.5, "30"])
    async def test_invalid_days(self, repo, mock_gateway, days):
        with pytest.raises(InvalidInputError):
            await repo.cleanup_old_logs(days)
        mock_gateway.delete.assert_not_called()
