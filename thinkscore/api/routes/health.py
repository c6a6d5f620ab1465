"""
Health check endpoint.
"""

import time

import structlog
from fastapi import APIRouter, Depends

from thinkscore.api.dependencies import get_database
from thinkscore.api.models import ComponentHealth, HealthResponse
from thinkscore.evaluation.config import EvaluationConfig
from thinkscore.storage.database import Database

router = APIRouter()
logger = structlog.get_logger(__name__)


async def _check_database(db: Database) -> ComponentHealth:
    """Check database connectivity and measure latency."""
    start = time.perf_counter()
    healthy = await db.health_check()
    latency_ms = (time.perf_counter() - start) * 1000
    return ComponentHealth(
        status="healthy" if healthy else "unhealthy",
        latency_ms=round(latency_ms, 2),
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Check the health of the service and its database.",
)
async def health_check(
    db: Database = Depends(get_database),
) -> HealthResponse:
    """
    Check service health.

    Status logic:
    - unhealthy: database is down
    - healthy: database reachable
    """
    db_health = await _check_database(db)
    if db_health.status == "unhealthy":
        logger.warning("Health check failed", component="database")

    return HealthResponse(
        status=db_health.status,
        components={"database": db_health},
        llm_configured=EvaluationConfig().openai_api_key is not None,
        version="0.1.0",
    )
