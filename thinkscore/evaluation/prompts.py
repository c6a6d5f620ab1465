"""Prompt templates for answer evaluation.

Contains:
- The default three-axis rubric (logical reasoning, creativity, consistency)
- The custom-axis template used when a question carries its own criteria
- The fixed feedback returned for answers rejected by the pre-check

Templates are ``str.format`` strings; literal JSON braces are doubled.
"""

# ── Default rubric ─────────────────────────────────────────

LOGIC_AXIS = "논리적 사고"
CREATIVITY_AXIS = "창의적 사고"
CONSISTENCY_AXIS = "일관성"

DEFAULT_AXES: tuple[str, ...] = (LOGIC_AXIS, CREATIVITY_AXIS, CONSISTENCY_AXIS)

AXIS_WEIGHTS: dict[str, float] = {
    LOGIC_AXIS: 0.4,
    CREATIVITY_AXIS: 0.3,
    CONSISTENCY_AXIS: 0.3,
}

DEFAULT_RUBRIC_PROMPT = """\
다음 철학적 질문에 대한 답변을 3가지 기준으로 평가하세요.

**질문**: {question}

**답변**: {answer}

**평가 기준**:
1. **논리적 사고** (40%): 논리 구조, 인과관계, 반박에 대한 처리
2. **창의적 사고** (30%): 새로운 관점, 독창적 접근, 적절한 비유
3. **일관성** (30%): 자기모순 부재, 결론과 논증의 정합성

**채점 방식**:
- 각 기준마다 0-100점 (정수)
- 총점 = round(논리적 사고 × 0.4 + 창의적 사고 × 0.3 + 일관성 × 0.3)
- 길이보다는 질을 중시하여 평가 (장황함이나 중복은 감점)

**피드백 형식**: 정확히 2문장 (첫 번째 문장=강점, 두 번째 문장=개선점)

**응답 형식** (JSON만):
{{
  "score": 총점,
  "feedback": "강점: [구체적 강점]. 개선점: [구체적 개선사항].",
  "criteriaScores": {{
    "논리적 사고": 점수,
    "창의적 사고": 점수,
    "일관성": 점수
  }}
}}
"""

# ── Custom axes ────────────────────────────────────────────

CUSTOM_AXES_PROMPT = """\
다음 철학적 질문에 대한 답변을 아래 {count}가지 기준으로 평가하세요.

**질문**: {question}

**답변**: {answer}

**평가 기준**:
{axes_list}

**채점 방식**:
- 각 기준마다 0-100점 (정수)
- 총점 = round(모든 기준 점수의 평균)
- 길이보다는 질을 중시하여 평가 (장황함이나 중복은 감점)
- criteriaScores의 키는 위 기준 이름을 그대로 사용하세요.
- 기준 이름을 그대로 적용하기 어렵다면 가장 가까운 기준으로 판단하여 점수를 매기세요.

**피드백 형식**: 정확히 2문장 (첫 번째 문장=강점, 두 번째 문장=개선점)

**응답 형식** (JSON만):
{{
  "score": 총점,
  "feedback": "강점: [구체적 강점]. 개선점: [구체적 개선사항].",
  "criteriaScores": {{
{axes_keys}
  }}
}}
"""

# ── Pre-check rejection ────────────────────────────────────

GAMING_FEEDBACK = (
    "강점: 평가할 수 있는 논증이 확인되지 않았습니다. "
    "개선점: 목록 기호나 이모지 없이 자신의 생각을 문장으로 서술해 주세요."
)


def build_prompt(question: str, answer: str, criteria: list[str] | None = None) -> str:
    """Render the evaluation prompt.

    Args:
        question: Question text, embedded literally.
        answer: Answer text, embedded literally.
        criteria: Caller-supplied axis labels. ``None`` or empty selects the
            default weighted rubric.

    Returns:
        The full prompt string.
    """
    if not criteria:
        return DEFAULT_RUBRIC_PROMPT.format(question=question, answer=answer)

    axes_list = "\n".join(f"{i}. **{name}**" for i, name in enumerate(criteria, start=1))
    axes_keys = ",\n".join(f'    "{name}": 점수' for name in criteria)
    return CUSTOM_AXES_PROMPT.format(
        count=len(criteria),
        question=question,
        answer=answer,
        axes_list=axes_list,
        axes_keys=axes_keys,
    )


def known_axes(criteria: list[str] | None) -> list[str]:
    """Axis labels a result is expected to carry."""
    return list(criteria) if criteria else list(DEFAULT_AXES)
