"""LLM usage log endpoints."""

import datetime as dt

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, Query

from thinkscore.api.auth import get_current_user_id, verify_api_key
from thinkscore.api.dependencies import get_usage_log_repository
from thinkscore.api.errors import ERROR_RESPONSES, server_error
from thinkscore.api.models import (
    CleanupResponse,
    UsageLogItem,
    UsageLogListResponse,
    UsageStatsResponse,
)
from thinkscore.errors import ThinkScoreError
from thinkscore.usage_logs.config import UsageLogConfig
from thinkscore.usage_logs.repository import UsageLogRepository

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/usage-logs")

_config = UsageLogConfig()

_ERRORS = ERROR_RESPONSES


@router.get(
    "/my-logs",
    response_model=UsageLogListResponse,
    responses=_ERRORS,
    summary="My usage logs",
    description="The caller's evaluation attempts, newest first.",
)
async def get_my_logs(
    limit: int = Query(default=_config.default_page_size, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    api_key: str = Depends(verify_api_key),
    user_id: str = Depends(get_current_user_id),
    repo: UsageLogRepository = Depends(get_usage_log_repository),
) -> UsageLogListResponse:
    try:
        logs = await repo.list_by_user(user_id, limit=limit, offset=offset)
        return UsageLogListResponse(
            logs=[UsageLogItem.model_validate(log) for log in logs],
            total=len(logs),
        )
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("get_my_logs", e)


@router.get(
    "/my-stats",
    response_model=UsageStatsResponse,
    responses=_ERRORS,
    summary="My usage statistics",
)
async def get_my_stats(
    start_date: dt.datetime | None = Query(default=None, description="Inclusive lower bound"),
    end_date: dt.datetime | None = Query(default=None, description="Inclusive upper bound"),
    api_key: str = Depends(verify_api_key),
    user_id: str = Depends(get_current_user_id),
    repo: UsageLogRepository = Depends(get_usage_log_repository),
) -> UsageStatsResponse:
    try:
        stats = await repo.get_usage_stats(user_id, start_date, end_date)
        return UsageStatsResponse.model_validate(stats)
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("get_my_stats", e)


@router.get(
    "/system-stats",
    response_model=UsageStatsResponse,
    responses=_ERRORS,
    summary="System-wide usage statistics",
)
async def get_system_stats(
    start_date: dt.datetime | None = Query(default=None, description="Inclusive lower bound"),
    end_date: dt.datetime | None = Query(default=None, description="Inclusive upper bound"),
    api_key: str = Depends(verify_api_key),
    repo: UsageLogRepository = Depends(get_usage_log_repository),
) -> UsageStatsResponse:
    try:
        stats = await repo.get_usage_stats(None, start_date, end_date)
        return UsageStatsResponse.model_validate(stats)
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("get_system_stats", e)


@router.get(
    "/errors",
    response_model=UsageLogListResponse,
    responses=_ERRORS,
    summary="Failed evaluations",
)
async def get_error_logs(
    limit: int = Query(default=_config.default_status_limit, ge=1, le=1000),
    api_key: str = Depends(verify_api_key),
    repo: UsageLogRepository = Depends(get_usage_log_repository),
) -> UsageLogListResponse:
    try:
        logs = await repo.list_by_status("error", limit=limit)
        return UsageLogListResponse(
            logs=[UsageLogItem.model_validate(log) for log in logs],
            total=len(logs),
        )
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("get_error_logs", e)


@router.delete(
    "/cleanup/{days}",
    response_model=CleanupResponse,
    responses=_ERRORS,
    summary="Delete old usage logs",
)
async def cleanup_old_logs(
    days: int = Path(..., description="Delete logs older than this many days (>= 1)"),
    api_key: str = Depends(verify_api_key),
    repo: UsageLogRepository = Depends(get_usage_log_repository),
) -> CleanupResponse:
    try:
        deleted = await repo.cleanup_old_logs(days)
        logger.info("Usage logs cleaned up", days=days, deleted_count=deleted)
        return CleanupResponse(
            message=f"Successfully deleted {deleted} log entries older than {days} days",
            deleted_count=deleted,
        )
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("cleanup_logs", e)
