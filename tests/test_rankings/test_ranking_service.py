"""Tests for leaderboard helpers and RankingService."""

from datetime import datetime, timezone

import pytest

from thinkscore.errors import InvalidInputError, NotFoundError, UpstreamDataError
from thinkscore.rankings.schemas import GUEST_NAME, HIDDEN_NAME
from thinkscore.rankings.service import (
    aggregate_user_scores,
    display_name_for,
    rank_overall,
    rank_question_scores,
    summarize_profiles,
)
from thinkscore.storage.gateway import GatewayError, GatewayResult

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
T1 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
T2 = datetime(2026, 3, 3, 9, 0, tzinfo=timezone.utc)


def _score_row(user_id, score, created_at=T0):
    return {"answer_id": 1, "score": score, "answer": {"user_id": user_id, "created_at": created_at}}


# ── Pure helpers ────────────────────────────────────────


class TestDisplayName:
    def test_profile_name(self):
        assert display_name_for({"display_name": "소크라테스"}) == "소크라테스"

    def test_hidden_name(self):
        assert display_name_for({"display_name": None}) == HIDDEN_NAME
        assert display_name_for({"display_name": ""}) == HIDDEN_NAME

    def test_guest_without_profile(self):
        assert display_name_for(None) == GUEST_NAME


class TestAggregation:
    def test_groups_by_user_and_skips_anonymous(self):
        rows = [
            _score_row("a", 80, T1),
            _score_row("a", 60, T0),
            _score_row(None, 90),
            {"answer_id": 2, "score": 40, "answer": None},
        ]

        aggregates = aggregate_user_scores(rows)

        assert set(aggregates) == {"a"}
        agg = aggregates["a"]
        assert agg.total_score == 140
        assert agg.answer_count == 2
        assert agg.average_score == 70.0
        assert agg.earliest_answer == T0

    def test_rank_by_average_with_earliest_tiebreak(self):
        aggregates = aggregate_user_scores([
            _score_row("a", 70, T2),
            _score_row("b", 70, T1),
            _score_row("c", 90, T2),
            _score_row("c", 50, T2),
            _score_row("d", 95, T2),
        ])
        profiles = {"a": {"display_name": "Alice"}, "b": {"display_name": None}}

        rankings = rank_overall(aggregates, profiles, limit=10)

        assert [r.id for r in rankings] == ["d", "b", "a", "c"]
        assert [r.rank_position for r in rankings] == [1, 2, 3, 4]
        assert rankings[1].display_name == HIDDEN_NAME
        assert rankings[2].display_name == "Alice"
        assert rankings[0].display_name == GUEST_NAME
        assert rankings[3].total_score == 140
        assert rankings[3].average_score == 70.0

    def test_rank_respects_limit(self):
        aggregates = aggregate_user_scores([_score_row(u, 50) for u in "abcde"])
        assert len(rank_overall(aggregates, {}, limit=2)) == 2

    def test_question_rankings_keep_row_order(self):
        rows = [
            {"score": 90, "answer": {"user_id": "a"}},
            {"score": 85, "answer": {"user_id": None}},
        ]

        rankings = rank_question_scores(rows, {"a": {"display_name": "Alice"}})

        assert rankings[0].id == "a"
        assert rankings[0].display_name == "Alice"
        assert rankings[0].question_score == 90
        assert rankings[1].id is None
        assert rankings[1].display_name == GUEST_NAME
        assert rankings[1].rank_position == 2

    def test_summarize_profiles(self):
        stats = summarize_profiles(
            [
                {"id": "a", "display_name": "Alice", "total_score": 100},
                {"id": "b", "display_name": None, "total_score": 0},
                {"id": "c", "display_name": "Carol", "total_score": 51},
            ],
            total_answers=12,
        )

        assert stats.total_users == 3
        assert stats.total_answers == 12
        assert stats.average_score == 75.5
        assert stats.top_scorer_name == "Alice"
        assert stats.top_score == 100

    def test_summarize_hidden_top_scorer(self):
        stats = summarize_profiles([{"id": "a", "display_name": None, "total_score": 5}], 1)
        assert stats.top_scorer_name == HIDDEN_NAME

    def test_summarize_empty(self):
        stats = summarize_profiles([], 0)
        assert stats.total_users == 0
        assert stats.average_score == 0.0
        assert stats.top_scorer_name is None
        assert stats.top_score == 0


# ── RankingService ──────────────────────────────────────


class TestOverallRankings:
    @pytest.mark.asyncio
    async def test_ranks_users(self, ranking_service, mock_gateway):
        mock_gateway.query.side_effect = [
            GatewayResult(data=[_score_row("a", 60), _score_row("b", 90)]),
            GatewayResult(data=[{"id": "a", "display_name": "Alice"}]),
        ]

        rankings = await ranking_service.get_overall_rankings(10)

        assert [r.id for r in rankings] == ["b", "a"]
        assert rankings[0].display_name == GUEST_NAME
        assert rankings[1].display_name == "Alice"

    @pytest.mark.asyncio
    async def test_no_scores(self, ranking_service, mock_gateway):
        mock_gateway.query.return_value = GatewayResult(data=[])

        assert await ranking_service.get_overall_rankings() == []
        assert mock_gateway.query.await_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -1, True, "10"])
    async def test_invalid_limit(self, ranking_service, mock_gateway, limit):
        with pytest.raises(InvalidInputError):
            await ranking_service.get_overall_rankings(limit)
        mock_gateway.query.assert_not_called()

    @pytest.mark.asyncio
    async def test_gateway_failure(self, ranking_service, mock_gateway):
        mock_gateway.query.return_value = GatewayResult(error=GatewayError("unavailable", "down"))

        with pytest.raises(UpstreamDataError, match="fetch scores"):
            await ranking_service.get_overall_rankings()


class TestQuestionRankings:
    @pytest.mark.asyncio
    async def test_filters_by_question(self, ranking_service, mock_gateway):
        mock_gateway.query.side_effect = [
            GatewayResult(data=[
                {"score": 95, "answer": {"user_id": "a", "question_id": 7}},
                {"score": 70, "answer": {"user_id": None, "question_id": 7}},
            ]),
            GatewayResult(data=[{"id": "a", "display_name": "Alice"}]),
        ]

        rankings = await ranking_service.get_question_rankings(7, limit=5)

        assert [r.question_score for r in rankings] == [95, 70]
        scores_call = mock_gateway.query.call_args_list[0]
        assert scores_call.kwargs["limit"] == 5
        assert scores_call.kwargs["filters"][0].column == "answer.question_id"
        assert scores_call.kwargs["filters"][0].value == 7
        profiles_call = mock_gateway.query.call_args_list[1]
        assert profiles_call.kwargs["filters"][0].value == ["a"]

    @pytest.mark.asyncio
    async def test_anonymous_only_skips_profile_lookup(self, ranking_service, mock_gateway):
        mock_gateway.query.return_value = GatewayResult(
            data=[{"score": 50, "answer": {"user_id": None, "question_id": 7}}]
        )

        rankings = await ranking_service.get_question_rankings(7)

        assert rankings[0].display_name == GUEST_NAME
        assert mock_gateway.query.await_count == 1


class TestMyRank:
    @pytest.mark.asyncio
    async def test_overall_rank_and_percentile(self, ranking_service, mock_gateway):
        mock_gateway.query_one.return_value = GatewayResult(data={"id": "a", "total_score": 300})
        mock_gateway.count.side_effect = [GatewayResult(data=0), GatewayResult(data=4)]

        rank = await ranking_service.get_my_overall_rank("a")

        assert rank.rank_position == 1
        assert rank.total_users == 4
        assert rank.user_score == 300
        assert rank.percentile == 75.0

    @pytest.mark.asyncio
    async def test_missing_profile(self, ranking_service, mock_gateway):
        mock_gateway.query_one.return_value = GatewayResult(
            error=GatewayError("not_found", "No matching row in profiles")
        )

        with pytest.raises(NotFoundError):
            await ranking_service.get_my_overall_rank("ghost")

    @pytest.mark.asyncio
    async def test_question_rank(self, ranking_service, mock_gateway):
        mock_gateway.query_one.return_value = GatewayResult(data={"id": 1, "score": 70})
        mock_gateway.count.side_effect = [GatewayResult(data=2), GatewayResult(data=5)]

        rank = await ranking_service.get_my_question_rank("a", 7)

        assert rank.rank_position == 3
        assert rank.total_users == 5
        assert rank.user_score == 70
        assert rank.percentile == 40.0

    @pytest.mark.asyncio
    async def test_question_rank_without_score(self, ranking_service, mock_gateway):
        mock_gateway.query_one.return_value = GatewayResult(
            error=GatewayError("not_found", "No matching row in scores")
        )

        with pytest.raises(NotFoundError):
            await ranking_service.get_my_question_rank("a", 7)


class TestRankingStats:
    @pytest.mark.asyncio
    async def test_empty_population(self, ranking_service, mock_gateway):
        mock_gateway.query.return_value = GatewayResult(data=[])
        mock_gateway.count.return_value = GatewayResult(data=0)

        stats = await ranking_service.get_ranking_stats()

        assert stats.total_users == 0
        assert stats.total_answers == 0
        assert stats.average_score == 0.0
        assert stats.top_scorer_name is None
