"""Tests for prompt construction and result parsing."""

import pytest

from thinkscore.evaluation.prompts import (
    AXIS_WEIGHTS,
    DEFAULT_AXES,
    build_prompt,
    known_axes,
)
from thinkscore.evaluation.schemas import EvaluationParseError, parse_evaluation


class TestBuildPrompt:
    def test_default_rubric(self):
        prompt = build_prompt("자유란 무엇인가?", "자유는 스스로 정한 법칙을 따르는 것이다.")

        assert "자유란 무엇인가?" in prompt
        assert "자유는 스스로 정한 법칙을 따르는 것이다." in prompt
        for axis in DEFAULT_AXES:
            assert f'"{axis}": 점수' in prompt
        assert "(40%)" in prompt
        assert '"criteriaScores": {' in prompt

    def test_weights_sum_to_one(self):
        assert sum(AXIS_WEIGHTS.values()) == pytest.approx(1.0)

    def test_empty_criteria_uses_default_rubric(self):
        assert build_prompt("q", "a", []) == build_prompt("q", "a", None)

    def test_custom_axes_listed_in_order(self):
        prompt = build_prompt("q", "a", ["윤리적 판단", "설득력"])

        assert "2가지 기준" in prompt
        assert "1. **윤리적 판단**" in prompt
        assert "2. **설득력**" in prompt
        assert prompt.index('"윤리적 판단": 점수') < prompt.index('"설득력": 점수')
        assert "(40%)" not in prompt

    def test_braces_in_text_are_literal(self):
        prompt = build_prompt("집합 {x | x > 0} 은?", "답은 {answer} 이다")
        assert "{x | x > 0}" in prompt
        assert "답은 {answer} 이다" in prompt

    def test_known_axes(self):
        assert known_axes(None) == list(DEFAULT_AXES)
        assert known_axes(["설득력"]) == ["설득력"]


class TestParseEvaluation:
    def test_valid_output(self):
        result = parse_evaluation(
            '{"score": 70, "feedback": "좋다. 더 좋게.", "criteriaScores": {"설득력": 70}}'
        )
        assert result.score == 70
        assert result.criteria_scores == {"설득력": 70}
        assert result.to_wire()["criteriaScores"] == {"설득력": 70}

    def test_surrounding_whitespace_is_ignored(self):
        result = parse_evaluation('\n {"score": 1, "feedback": "f", "criteriaScores": {}} \n')
        assert result.score == 1

    @pytest.mark.parametrize("text", [
        None,
        "",
        "   ",
        "not json",
        '{"score": 80, "feedback": "f"}',
        '{"score": 101, "feedback": "f", "criteriaScores": {}}',
        '{"score": -1, "feedback": "f", "criteriaScores": {}}',
        '{"score": 80.0, "feedback": "f", "criteriaScores": {}}',
        '{"score": "80", "feedback": "f", "criteriaScores": {}}',
        '{"score": 80, "feedback": "f", "criteriaScores": {"설득력": 120}}',
    ])
    def test_rejects_malformed_output(self, text):
        with pytest.raises(EvaluationParseError):
            parse_evaluation(text)
