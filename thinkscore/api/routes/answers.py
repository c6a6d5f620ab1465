"""Answer endpoints."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, status

from thinkscore.answers.repository import AnswerRepository
from thinkscore.api.auth import get_optional_user_id, verify_api_key
from thinkscore.api.dependencies import get_answer_repository
from thinkscore.api.errors import not_found, server_error
from thinkscore.api.models import AnswerCreateRequest, AnswerItem
from thinkscore.errors import ThinkScoreError

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/answers")

_ERRORS = not_found("Answer not found")


@router.get("/user/{user_id}", response_model=list[AnswerItem], responses=_ERRORS, summary="Answers by user")
async def list_user_answers(
    user_id: str = Path(..., description="User identifier"),
    api_key: str = Depends(verify_api_key),
    repo: AnswerRepository = Depends(get_answer_repository),
) -> list[AnswerItem]:
    try:
        return [AnswerItem.model_validate(a) for a in await repo.list_by_user(user_id)]
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("list_user_answers", e)


@router.get(
    "/question/{question_id}",
    response_model=list[AnswerItem],
    responses=_ERRORS,
    summary="Answers to a question",
)
async def list_question_answers(
    question_id: int = Path(..., description="Question identifier"),
    api_key: str = Depends(verify_api_key),
    repo: AnswerRepository = Depends(get_answer_repository),
) -> list[AnswerItem]:
    try:
        return [AnswerItem.model_validate(a) for a in await repo.list_by_question(question_id)]
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("list_question_answers", e)


@router.get("/{answer_id}", response_model=AnswerItem, responses=_ERRORS, summary="Get answer")
async def get_answer(
    answer_id: int = Path(..., description="Answer identifier"),
    api_key: str = Depends(verify_api_key),
    repo: AnswerRepository = Depends(get_answer_repository),
) -> AnswerItem:
    try:
        return AnswerItem.model_validate(await repo.get(answer_id))
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("get_answer", e)


@router.post(
    "",
    response_model=AnswerItem,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Submit answer",
    description="The answer is owned by the X-User-ID user, or anonymous without one.",
)
async def create_answer(
    request: AnswerCreateRequest,
    api_key: str = Depends(verify_api_key),
    user_id: str | None = Depends(get_optional_user_id),
    repo: AnswerRepository = Depends(get_answer_repository),
) -> AnswerItem:
    try:
        created = await repo.create(request.question_id, request.content, user_id=user_id)
        logger.info("Answer created", answer_id=created.id, question_id=created.question_id)
        return AnswerItem.model_validate(created)
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("create_answer", e)
