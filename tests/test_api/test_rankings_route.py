"""Tests for leaderboard endpoints."""

from thinkscore.errors import InvalidInputError, NotFoundError
from thinkscore.rankings.schemas import (
    GUEST_NAME,
    QuestionRankingUser,
    RankingStats,
    RankingUser,
    UserRank,
)


class TestOverall:
    def test_rankings(self, client, mock_ranking_service):
        mock_ranking_service.get_overall_rankings.return_value = [
            RankingUser(id="a", display_name="Alice", total_score=180, average_score=90.0,
                        answer_count=2, rank_position=1),
        ]

        resp = client.get("/rankings/overall?limit=10")

        assert resp.status_code == 200
        data = resp.json()
        assert data["total"] == 1
        assert data["rankings"][0]["average_score"] == 90.0
        mock_ranking_service.get_overall_rankings.assert_awaited_once_with(10)

    def test_limit_out_of_range(self, client, mock_ranking_service):
        resp = client.get("/rankings/overall?limit=0")
        assert resp.status_code == 422
        mock_ranking_service.get_overall_rankings.assert_not_called()


class TestQuestion:
    def test_question_rankings(self, client, mock_ranking_service):
        mock_ranking_service.get_question_rankings.return_value = [
            QuestionRankingUser(id=None, display_name=GUEST_NAME, question_score=77,
                                question_answer_count=1, total_score=0, rank_position=1),
        ]

        resp = client.get("/rankings/question/7")

        assert resp.status_code == 200
        data = resp.json()
        assert data["question_id"] == 7
        assert data["rankings"][0]["id"] is None
        assert data["rankings"][0]["display_name"] == "비회원"


class TestMyRank:
    def test_requires_user(self, client, mock_ranking_service):
        resp = client.get("/rankings/my-rank/overall")
        assert resp.status_code == 401
        mock_ranking_service.get_my_overall_rank.assert_not_called()

    def test_overall(self, client, mock_ranking_service):
        mock_ranking_service.get_my_overall_rank.return_value = UserRank(
            rank_position=1, total_users=4, user_score=300, percentile=75.0
        )

        resp = client.get("/rankings/my-rank/overall", headers={"X-User-ID": "a"})

        assert resp.status_code == 200
        assert resp.json()["percentile"] == 75.0
        mock_ranking_service.get_my_overall_rank.assert_awaited_once_with("a")

    def test_missing_profile(self, client, mock_ranking_service):
        mock_ranking_service.get_my_overall_rank.side_effect = NotFoundError("no profile")

        resp = client.get("/rankings/my-rank/overall", headers={"X-User-ID": "ghost"})

        assert resp.status_code == 404

    def test_question(self, client, mock_ranking_service):
        mock_ranking_service.get_my_question_rank.return_value = UserRank(
            rank_position=3, total_users=5, user_score=70, percentile=40.0
        )

        resp = client.get("/rankings/my-rank/question/7", headers={"X-User-ID": "a"})

        assert resp.status_code == 200
        mock_ranking_service.get_my_question_rank.assert_awaited_once_with("a", 7)


class TestStats:
    def test_stats(self, client, mock_ranking_service):
        mock_ranking_service.get_ranking_stats.return_value = RankingStats(
            total_users=0, total_answers=0, average_score=0.0, top_scorer_name=None, top_score=0
        )

        resp = client.get("/rankings/stats")

        assert resp.status_code == 200
        assert resp.json()["top_scorer_name"] is None

    def test_invalid_input_maps_to_422(self, client, mock_ranking_service):
        mock_ranking_service.get_ranking_stats.side_effect = InvalidInputError("bad")

        resp = client.get("/rankings/stats")

        assert resp.status_code == 422
        assert resp.json() == {"detail": "bad", "error_type": "invalid_input"}
