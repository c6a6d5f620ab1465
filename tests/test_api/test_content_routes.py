"""Tests for question, answer, score and profile endpoints."""

from datetime import datetime, timezone

from thinkscore.answers.schemas import Answer
from thinkscore.errors import InvalidInputError, NotFoundError
from thinkscore.profiles.schemas import Profile
from thinkscore.questions.schemas import Question
from thinkscore.scores.schemas import Score

CREATED = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


# ── Questions ───────────────────────────────────────────


class TestQuestions:
    def test_list_active(self, client, mock_question_repo):
        mock_question_repo.list_active.return_value = [
            Question(id=1, content="자유란?", tags=["윤리"], created_at=CREATED),
        ]

        resp = client.get("/questions")

        assert resp.status_code == 200
        assert resp.json()[0]["tags"] == ["윤리"]

    def test_today(self, client, mock_question_repo):
        mock_question_repo.get_todays_question.return_value = Question(id=2, content="정의란?")

        resp = client.get("/questions/today")

        assert resp.status_code == 200
        assert resp.json()["id"] == 2

    def test_today_without_questions(self, client, mock_question_repo):
        mock_question_repo.get_todays_question.side_effect = NotFoundError("No active questions found")

        resp = client.get("/questions/today")

        assert resp.status_code == 404
        assert resp.json()["detail"] == "No active questions found"

    def test_random(self, client, mock_question_repo):
        mock_question_repo.get_random_question.return_value = Question(id=5, content="q")
        assert client.get("/questions/random").json()["id"] == 5

    def test_create(self, client, mock_question_repo):
        mock_question_repo.create.return_value = Question(id=9, content="새 질문", difficulty="hard")

        resp = client.post("/questions", json={"content": "새 질문", "difficulty": "hard"})

        assert resp.status_code == 201
        data = mock_question_repo.create.call_args.args[0]
        assert data["content"] == "새 질문"
        assert data["is_active"] is True

    def test_update_sends_only_set_fields(self, client, mock_question_repo):
        mock_question_repo.update.return_value = Question(id=9, content="c", title="새 제목")

        resp = client.put("/questions/9", json={"title": "새 제목"})

        assert resp.status_code == 200
        mock_question_repo.update.assert_awaited_once_with(9, {"title": "새 제목"})

    def test_update_invalid(self, client, mock_question_repo):
        mock_question_repo.update.side_effect = InvalidInputError("Invalid difficulty 'x'")

        resp = client.put("/questions/9", json={"difficulty": "x"})

        assert resp.status_code == 422


# ── Answers ─────────────────────────────────────────────


class TestAnswers:
    def test_create_owned_by_caller(self, client, mock_answer_repo):
        mock_answer_repo.create.return_value = Answer(id=4, question_id=1, content="답", user_id="user-1")

        resp = client.post(
            "/answers", json={"question_id": 1, "content": "답"}, headers={"X-User-ID": "user-1"}
        )

        assert resp.status_code == 201
        mock_answer_repo.create.assert_awaited_once_with(1, "답", user_id="user-1")

    def test_get_with_scores(self, client, mock_answer_repo):
        mock_answer_repo.get.return_value = Answer(
            id=4, question_id=1, content="답", scores=[{"id": 1, "score": 80}]
        )

        resp = client.get("/answers/4")

        assert resp.status_code == 200
        assert resp.json()["scores"] == [{"id": 1, "score": 80}]

    def test_by_question(self, client, mock_answer_repo):
        mock_answer_repo.list_by_question.return_value = []
        assert client.get("/answers/question/1").json() == []


# ── Scores ──────────────────────────────────────────────


class TestScores:
    def test_create_records_scorer(self, client, mock_score_repo):
        mock_score_repo.create.return_value = Score(answer_id=4, score=70, id=1, scorer_id="judge")

        resp = client.post(
            "/scores", json={"answer_id": 4, "score": 70}, headers={"X-User-ID": "judge"}
        )

        assert resp.status_code == 201
        assert mock_score_repo.create.call_args.kwargs["scorer_id"] == "judge"

    def test_out_of_range_score(self, client, mock_score_repo):
        resp = client.post("/scores", json={"answer_id": 4, "score": 101})
        assert resp.status_code == 422
        mock_score_repo.create.assert_not_called()

    def test_missing_score(self, client, mock_score_repo):
        mock_score_repo.get.side_effect = NotFoundError("Failed to fetch score: no row")
        assert client.get("/scores/404").status_code == 404


# ── Profiles ────────────────────────────────────────────


class TestProfiles:
    def test_get(self, client, mock_profile_repo):
        mock_profile_repo.get.return_value = Profile(id="user-1", display_name="철수", total_score=120)

        resp = client.get("/profiles/user-1")

        assert resp.status_code == 200
        assert resp.json()["total_score"] == 120

    def test_missing(self, client, mock_profile_repo):
        mock_profile_repo.get.side_effect = NotFoundError("Failed to fetch profile: no row")
        assert client.get("/profiles/ghost").status_code == 404

    def test_create(self, client, mock_profile_repo):
        mock_profile_repo.create.return_value = Profile(id="user-2", display_name="영희")

        resp = client.post("/profiles", json={"id": "user-2", "display_name": "영희"})

        assert resp.status_code == 201
        mock_profile_repo.create.assert_awaited_once_with("user-2", display_name="영희", email=None)

    def test_rename(self, client, mock_profile_repo):
        mock_profile_repo.update.return_value = Profile(id="user-1", display_name="새 이름")

        resp = client.patch("/profiles/user-1", json={"display_name": "새 이름"})

        assert resp.status_code == 200
        mock_profile_repo.update.assert_awaited_once_with("user-1", "새 이름")
