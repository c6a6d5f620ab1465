"""
Request and response models for the ThinkScore API.
"""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Response model for errors."""

    detail: str = Field(
        ...,
        description="Error message",
    )
    error_type: str = Field(
        default="error",
        description="Error type",
    )


class ComponentHealth(BaseModel):
    """Health of a single dependency."""

    status: str = Field(..., description="healthy or unhealthy")
    latency_ms: float | None = Field(default=None, description="Check latency in milliseconds")
    details: dict = Field(default_factory=dict, description="Failure details")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(
        ...,
        description="Overall service status: healthy or unhealthy",
    )
    components: dict[str, ComponentHealth] = Field(
        default_factory=dict,
        description="Per-dependency health",
    )
    llm_configured: bool = Field(
        default=False,
        description="Whether an OpenAI API key is configured",
    )
    version: str = Field(default="0.1.0", description="Service version")


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Evaluation models


class EvaluateRequest(BaseModel):
    """Request model for evaluating an answer."""

    question: str | None = Field(
        default=None,
        min_length=1,
        description="Question text; looked up from question_id when omitted",
    )
    answer: str = Field(
        ...,
        min_length=1,
        description="Answer text to evaluate",
    )
    criteria: list[str] | None = Field(
        default=None,
        description="Evaluation axes; defaults to the question's criteria or the standard rubric",
    )
    question_id: int | None = Field(default=None, description="Question reference")
    answer_id: int | None = Field(
        default=None,
        description="Answer reference; an AI score row is stored for it",
    )


class EvaluateResponse(BaseModel):
    """Response model for an answer evaluation."""

    model_config = ConfigDict(populate_by_name=True)

    score: int = Field(..., ge=0, le=100, description="Total score 0-100")
    feedback: str = Field(..., description="Two-sentence feedback")
    criteria_scores: dict[str, int] = Field(
        ...,
        alias="criteriaScores",
        description="Axis label -> sub-score",
    )
    log_id: int | None = Field(default=None, description="Usage log row for this attempt")
    short_circuited: bool = Field(
        default=False,
        description="True when the answer was rejected without an LLM call",
    )
    score_id: int | None = Field(default=None, description="Stored AI score row")
    score_warning: str | None = Field(
        default=None,
        description="Why the AI score row could not be stored",
    )
    latency_ms: float = Field(..., description="Processing latency in milliseconds")


# Ranking models


class RankingUserItem(_FromAttributes):
    id: str
    display_name: str
    total_score: int
    average_score: float
    answer_count: int
    rank_position: int


class QuestionRankingUserItem(_FromAttributes):
    id: str | None
    display_name: str
    question_score: int
    question_answer_count: int
    total_score: int
    rank_position: int


class UserRankResponse(_FromAttributes):
    rank_position: int = Field(..., description="1-based rank")
    total_users: int = Field(..., description="Population size")
    user_score: int = Field(..., description="The user's score")
    percentile: float = Field(..., description="Share of the population ranked below, in percent")


class RankingStatsResponse(_FromAttributes):
    total_users: int
    total_answers: int
    average_score: float
    top_scorer_name: str | None
    top_score: int


class OverallRankingsResponse(BaseModel):
    rankings: list[RankingUserItem] = Field(..., description="Leaderboard rows, best first")
    total: int = Field(..., description="Number of rows returned")


class QuestionRankingsResponse(BaseModel):
    question_id: int
    rankings: list[QuestionRankingUserItem] = Field(..., description="Leaderboard rows, best first")
    total: int = Field(..., description="Number of rows returned")


# Usage log models


class UsageLogItem(_FromAttributes):
    """Single usage log row."""

    id: int
    user_id: str | None = None
    question_id: int | None = None
    answer_id: int | None = None
    prompt: str
    model: str
    response_text: str | None = None
    score: int | None = None
    feedback: str | None = None
    criteria_scores: dict[str, int] | None = None
    tokens_used: int | None = None
    response_time_ms: int | None = None
    status: str
    error_message: str | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
    question: dict | None = None
    answer: dict | None = None
    profile: dict | None = None


class UsageLogListResponse(BaseModel):
    logs: list[UsageLogItem] = Field(..., description="Log rows, newest first")
    total: int = Field(..., description="Number of rows returned")


class UsageStatsResponse(_FromAttributes):
    total_calls: int
    success_calls: int
    error_calls: int
    total_tokens: int
    avg_response_time: int = Field(..., description="Mean response time in ms")
    avg_score: float = Field(..., description="Mean score over scored rows")


class CleanupResponse(BaseModel):
    message: str
    deleted_count: int


# Question models


class QuestionCreateRequest(BaseModel):
    title: str | None = Field(default=None, max_length=500)
    content: str = Field(..., min_length=1, description="Question prompt text")
    description: str | None = None
    category: str | None = None
    difficulty: str | None = Field(default=None, description="easy, medium or hard")
    tags: list[str] = Field(default_factory=list)
    evaluation_criteria: list[str] | None = None
    is_active: bool = True


class QuestionUpdateRequest(BaseModel):
    title: str | None = None
    content: str | None = Field(default=None, min_length=1)
    description: str | None = None
    category: str | None = None
    difficulty: str | None = None
    tags: list[str] | None = None
    evaluation_criteria: list[str] | None = None
    is_active: bool | None = None


class QuestionItem(_FromAttributes):
    id: int
    title: str | None = None
    content: str
    description: str | None = None
    category: str | None = None
    difficulty: str | None = None
    tags: list[str] = Field(default_factory=list)
    evaluation_criteria: list[str] | None = None
    is_active: bool
    forum_enabled: bool
    published_at: dt.datetime | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


# Answer / score / profile models


class AnswerCreateRequest(BaseModel):
    question_id: int
    content: str = Field(..., min_length=1)


class AnswerItem(_FromAttributes):
    id: int
    user_id: str | None = None
    question_id: int
    content: str
    created_at: dt.datetime | None = None
    question: dict | None = None
    profile: dict | None = None
    scores: list[dict] = Field(default_factory=list)


class ScoreCreateRequest(BaseModel):
    answer_id: int
    score: int = Field(..., ge=0, le=100)
    reason: str | None = None
    is_ai_score: bool = False


class ScoreItem(_FromAttributes):
    id: int
    answer_id: int
    score: int = Field(..., ge=0, le=100)
    reason: str | None = None
    is_ai_score: bool
    scorer_id: str | None = None
    created_at: dt.datetime | None = None
    answer: dict | None = None


class ProfileCreateRequest(BaseModel):
    id: str = Field(..., min_length=1, description="Account identifier")
    display_name: str | None = Field(default=None, max_length=100)
    email: str | None = None


class ProfileUpdateRequest(BaseModel):
    display_name: str | None = Field(default=None, max_length=100)


class ProfileItem(_FromAttributes):
    id: str
    display_name: str | None = None
    email: str | None = None
    total_score: int = 0
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


# Forum models


class PostCreateRequest(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    category: str | None = Field(default=None, description="Defaults to the forum default category")
    question_id: int | None = Field(default=None, description="Forum-enabled question")


class PostUpdateRequest(BaseModel):
    title: str | None = None
    content: str | None = None
    category: str | None = None


class CommentCreateRequest(BaseModel):
    post_id: int
    content: str = Field(..., min_length=1)


class CommentItem(_FromAttributes):
    id: int
    post_id: int
    author_id: str
    content: str
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
    author: dict | None = None


class PostItem(_FromAttributes):
    id: int
    title: str
    content: str
    author_id: str
    category: str
    question_id: int | None = None
    views_count: int = 0
    likes_count: int = 0
    is_pinned: bool = False
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
    author: dict | None = None
    comments_count: int = 0
    comments: list[CommentItem] = Field(default_factory=list)


class LikeResponse(BaseModel):
    liked: bool


class DeleteResponse(BaseModel):
    success: bool = True
