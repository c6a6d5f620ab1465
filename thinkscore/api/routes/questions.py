"""Question endpoints."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, status

from thinkscore.api.auth import verify_api_key
from thinkscore.api.dependencies import get_question_repository
from thinkscore.api.errors import not_found, server_error
from thinkscore.api.models import (
    QuestionCreateRequest,
    QuestionItem,
    QuestionUpdateRequest,
)
from thinkscore.errors import ThinkScoreError
from thinkscore.questions.repository import QuestionRepository

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/questions")

_ERRORS = not_found("Question not found")


@router.get("", response_model=list[QuestionItem], responses=_ERRORS, summary="Active questions")
async def list_questions(
    api_key: str = Depends(verify_api_key),
    repo: QuestionRepository = Depends(get_question_repository),
) -> list[QuestionItem]:
    try:
        return [QuestionItem.model_validate(q) for q in await repo.list_active()]
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("list_questions", e)


@router.get("/today", response_model=QuestionItem, responses=_ERRORS, summary="Question of the day")
async def get_todays_question(
    api_key: str = Depends(verify_api_key),
    repo: QuestionRepository = Depends(get_question_repository),
) -> QuestionItem:
    try:
        return QuestionItem.model_validate(await repo.get_todays_question())
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("get_todays_question", e)


@router.get("/random", response_model=QuestionItem, responses=_ERRORS, summary="Random question")
async def get_random_question(
    api_key: str = Depends(verify_api_key),
    repo: QuestionRepository = Depends(get_question_repository),
) -> QuestionItem:
    try:
        return QuestionItem.model_validate(await repo.get_random_question())
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("get_random_question", e)


@router.get("/{question_id}", response_model=QuestionItem, responses=_ERRORS, summary="Get question")
async def get_question(
    question_id: int = Path(..., description="Question identifier"),
    api_key: str = Depends(verify_api_key),
    repo: QuestionRepository = Depends(get_question_repository),
) -> QuestionItem:
    try:
        return QuestionItem.model_validate(await repo.get(question_id))
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("get_question", e)


@router.post(
    "",
    response_model=QuestionItem,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Create question",
)
async def create_question(
    request: QuestionCreateRequest,
    api_key: str = Depends(verify_api_key),
    repo: QuestionRepository = Depends(get_question_repository),
) -> QuestionItem:
    try:
        created = await repo.create(request.model_dump())
        logger.info("Question created", question_id=created.id)
        return QuestionItem.model_validate(created)
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("create_question", e)


@router.put("/{question_id}", response_model=QuestionItem, responses=_ERRORS, summary="Update question")
async def update_question(
    request: QuestionUpdateRequest,
    question_id: int = Path(..., description="Question identifier"),
    api_key: str = Depends(verify_api_key),
    repo: QuestionRepository = Depends(get_question_repository),
) -> QuestionItem:
    try:
        updated = await repo.update(question_id, request.model_dump(exclude_unset=True))
        logger.info("Question updated", question_id=question_id)
        return QuestionItem.model_validate(updated)
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("update_question", e)
