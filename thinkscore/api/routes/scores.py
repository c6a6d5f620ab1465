"""Score endpoints."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, status

from thinkscore.api.auth import get_optional_user_id, verify_api_key
from thinkscore.api.dependencies import get_score_repository
from thinkscore.api.errors import not_found, server_error
from thinkscore.api.models import ScoreCreateRequest, ScoreItem
from thinkscore.errors import ThinkScoreError
from thinkscore.scores.repository import ScoreRepository

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/scores")

_ERRORS = not_found("Score not found")


@router.get("/answer/{answer_id}", response_model=list[ScoreItem], responses=_ERRORS, summary="Scores of an answer")
async def list_answer_scores(
    answer_id: int = Path(..., description="Answer identifier"),
    api_key: str = Depends(verify_api_key),
    repo: ScoreRepository = Depends(get_score_repository),
) -> list[ScoreItem]:
    try:
        return [ScoreItem.model_validate(s) for s in await repo.list_by_answer(answer_id)]
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("list_answer_scores", e)


@router.get("/user/{user_id}", response_model=list[ScoreItem], responses=_ERRORS, summary="Scores of a user")
async def list_user_scores(
    user_id: str = Path(..., description="User identifier"),
    api_key: str = Depends(verify_api_key),
    repo: ScoreRepository = Depends(get_score_repository),
) -> list[ScoreItem]:
    try:
        return [ScoreItem.model_validate(s) for s in await repo.list_by_user(user_id)]
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("list_user_scores", e)


@router.get("/{score_id}", response_model=ScoreItem, responses=_ERRORS, summary="Get score")
async def get_score(
    score_id: int = Path(..., description="Score identifier"),
    api_key: str = Depends(verify_api_key),
    repo: ScoreRepository = Depends(get_score_repository),
) -> ScoreItem:
    try:
        return ScoreItem.model_validate(await repo.get(score_id))
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("get_score", e)


@router.post(
    "",
    response_model=ScoreItem,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Record a score",
    description="The X-User-ID user, when present, is recorded as the scorer.",
)
async def create_score(
    request: ScoreCreateRequest,
    api_key: str = Depends(verify_api_key),
    user_id: str | None = Depends(get_optional_user_id),
    repo: ScoreRepository = Depends(get_score_repository),
) -> ScoreItem:
    try:
        created = await repo.create(
            request.answer_id,
            request.score,
            reason=request.reason,
            is_ai_score=request.is_ai_score,
            scorer_id=user_id,
        )
        logger.info("Score created", score_id=created.id, answer_id=created.answer_id, score=created.score)
        return ScoreItem.model_validate(created)
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("create_score", e)
