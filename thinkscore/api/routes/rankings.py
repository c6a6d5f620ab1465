"""Leaderboard endpoints."""

import time

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, Query

from thinkscore.api.auth import get_current_user_id, verify_api_key
from thinkscore.api.dependencies import get_ranking_service
from thinkscore.api.errors import ERROR_RESPONSES, not_found, server_error
from thinkscore.api.models import (
    OverallRankingsResponse,
    QuestionRankingsResponse,
    QuestionRankingUserItem,
    RankingStatsResponse,
    RankingUserItem,
    UserRankResponse,
)
from thinkscore.errors import ThinkScoreError
from thinkscore.rankings.config import RankingConfig
from thinkscore.rankings.service import RankingService

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/rankings")

_config = RankingConfig()

_ERRORS = ERROR_RESPONSES


@router.get(
    "/overall",
    response_model=OverallRankingsResponse,
    responses=_ERRORS,
    summary="Overall leaderboard",
    description="Users ranked by average score over all their scored answers.",
)
async def get_overall_rankings(
    limit: int = Query(default=_config.default_limit, ge=1, le=_config.max_limit),
    api_key: str = Depends(verify_api_key),
    service: RankingService = Depends(get_ranking_service),
) -> OverallRankingsResponse:
    start_time = time.perf_counter()
    try:
        rankings = await service.get_overall_rankings(limit)
        logger.info(
            "Overall rankings fetched",
            count=len(rankings),
            latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return OverallRankingsResponse(
            rankings=[RankingUserItem.model_validate(r) for r in rankings],
            total=len(rankings),
        )
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("get_overall_rankings", e)


@router.get(
    "/question/{question_id}",
    response_model=QuestionRankingsResponse,
    responses=_ERRORS,
    summary="Question leaderboard",
    description="Score rows of one question, best first.",
)
async def get_question_rankings(
    question_id: int = Path(..., description="Question identifier"),
    limit: int = Query(default=_config.default_limit, ge=1, le=_config.max_limit),
    api_key: str = Depends(verify_api_key),
    service: RankingService = Depends(get_ranking_service),
) -> QuestionRankingsResponse:
    try:
        rankings = await service.get_question_rankings(question_id, limit)
        return QuestionRankingsResponse(
            question_id=question_id,
            rankings=[QuestionRankingUserItem.model_validate(r) for r in rankings],
            total=len(rankings),
        )
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("get_question_rankings", e)


@router.get(
    "/my-rank/overall",
    response_model=UserRankResponse,
    responses=not_found("Profile not found"),
    summary="My overall rank",
)
async def get_my_overall_rank(
    api_key: str = Depends(verify_api_key),
    user_id: str = Depends(get_current_user_id),
    service: RankingService = Depends(get_ranking_service),
) -> UserRankResponse:
    try:
        return UserRankResponse.model_validate(await service.get_my_overall_rank(user_id))
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("get_my_overall_rank", e)


@router.get(
    "/my-rank/question/{question_id}",
    response_model=UserRankResponse,
    responses=not_found("No score on this question"),
    summary="My rank on a question",
)
async def get_my_question_rank(
    question_id: int = Path(..., description="Question identifier"),
    api_key: str = Depends(verify_api_key),
    user_id: str = Depends(get_current_user_id),
    service: RankingService = Depends(get_ranking_service),
) -> UserRankResponse:
    try:
        return UserRankResponse.model_validate(
            await service.get_my_question_rank(user_id, question_id)
        )
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("get_my_question_rank", e)


@router.get(
    "/stats",
    response_model=RankingStatsResponse,
    responses=_ERRORS,
    summary="Leaderboard statistics",
)
async def get_ranking_stats(
    api_key: str = Depends(verify_api_key),
    service: RankingService = Depends(get_ranking_service),
) -> RankingStatsResponse:
    try:
        return RankingStatsResponse.model_validate(await service.get_ranking_stats())
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("get_ranking_stats", e)
