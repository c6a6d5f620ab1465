"""Tests for the answer evaluation endpoint."""

from thinkscore.errors import EvaluationFailedError, NotFoundError, UpstreamDataError
from thinkscore.evaluation.schemas import EvaluationOutcome, EvaluationResult
from thinkscore.questions.schemas import Question

CRITERIA = {"논리적 사고": 85, "창의적 사고": 78, "일관성": 82}


def _outcome(**kwargs) -> EvaluationOutcome:
    return EvaluationOutcome(
        result=EvaluationResult(score=82, feedback="강점: 명확함. 개선점: 반론.", criteria_scores=CRITERIA),
        log_id=kwargs.pop("log_id", 11),
        **kwargs,
    )


class TestEvaluate:
    def test_returns_wire_shape(self, client, mock_evaluation_service):
        mock_evaluation_service.evaluate.return_value = _outcome()

        resp = client.post(
            "/evaluations",
            json={"question": "자유란?", "answer": "스스로 정한 법칙을 따르는 것."},
            headers={"X-User-ID": "user-1"},
        )

        assert resp.status_code == 200
        data = resp.json()
        assert data["score"] == 82
        assert data["criteriaScores"] == CRITERIA
        assert data["log_id"] == 11
        assert data["short_circuited"] is False
        assert "latency_ms" in data

        request = mock_evaluation_service.evaluate.call_args.args[0]
        assert request.user_id == "user-1"
        assert request.question == "자유란?"

    def test_anonymous_request(self, client, mock_evaluation_service):
        mock_evaluation_service.evaluate.return_value = _outcome()

        client.post("/evaluations", json={"question": "q", "answer": "a"})

        assert mock_evaluation_service.evaluate.call_args.args[0].user_id is None

    def test_score_warning_is_reported(self, client, mock_evaluation_service):
        mock_evaluation_service.evaluate.return_value = _outcome(score_warning="Failed to create score")

        resp = client.post("/evaluations", json={"question": "q", "answer": "a", "answer_id": 5})

        assert resp.status_code == 200
        assert resp.json()["score_warning"] == "Failed to create score"

    def test_loads_question_by_id(self, client, mock_evaluation_service, mock_question_repo):
        mock_question_repo.get.return_value = Question(
            id=3, content="정의란 무엇인가?", evaluation_criteria=["설득력"]
        )
        mock_evaluation_service.evaluate.return_value = _outcome()

        resp = client.post("/evaluations", json={"question_id": 3, "answer": "a"})

        assert resp.status_code == 200
        request = mock_evaluation_service.evaluate.call_args.args[0]
        assert request.question == "정의란 무엇인가?"
        assert request.criteria == ["설득력"]
        assert request.question_id == 3

    def test_explicit_criteria_override_question(self, client, mock_evaluation_service, mock_question_repo):
        mock_question_repo.get.return_value = Question(id=3, content="q", evaluation_criteria=["설득력"])
        mock_evaluation_service.evaluate.return_value = _outcome()

        client.post("/evaluations", json={"question_id": 3, "answer": "a", "criteria": ["명료성"]})

        assert mock_evaluation_service.evaluate.call_args.args[0].criteria == ["명료성"]

    def test_unknown_question(self, client, mock_question_repo):
        mock_question_repo.get.side_effect = NotFoundError("Failed to fetch question: no row")

        resp = client.post("/evaluations", json={"question_id": 404, "answer": "a"})

        assert resp.status_code == 404
        assert resp.json()["error_type"] == "not_found"

    def test_question_or_id_required(self, client, mock_evaluation_service):
        resp = client.post("/evaluations", json={"answer": "a"})

        assert resp.status_code == 422
        assert resp.json()["error_type"] == "invalid_input"
        mock_evaluation_service.evaluate.assert_not_called()

    def test_missing_answer_fails_validation(self, client):
        resp = client.post("/evaluations", json={"question": "q"})
        assert resp.status_code == 422

    def test_evaluation_failure_is_generic(self, client, mock_evaluation_service):
        mock_evaluation_service.evaluate.side_effect = EvaluationFailedError()

        resp = client.post("/evaluations", json={"question": "q", "answer": "a"})

        assert resp.status_code == 502
        data = resp.json()
        assert data["error_type"] == "evaluation_failed"
        assert data["detail"] == "답변 평가 중 오류가 발생했습니다."

    def test_storage_failure(self, client, mock_evaluation_service):
        mock_evaluation_service.evaluate.side_effect = UpstreamDataError("Failed to create usage log: down")

        resp = client.post("/evaluations", json={"question": "q", "answer": "a"})

        assert resp.status_code == 502
        assert resp.json()["error_type"] == "upstream"

    def test_unexpected_error_is_500(self, client, mock_evaluation_service):
        mock_evaluation_service.evaluate.side_effect = RuntimeError("bug")

        resp = client.post("/evaluations", json={"question": "q", "answer": "a"})

        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to evaluate answer"
