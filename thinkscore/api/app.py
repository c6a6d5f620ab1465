"""
FastAPI application factory.
"""

import time
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from thinkscore.api.dependencies import cleanup_dependencies
from thinkscore.api.routes import answers, evaluations, forum, health, profiles, questions, rankings, scores, usage_logs
from thinkscore.config.settings import get_settings
from thinkscore.errors import (
    EvaluationFailedError,
    InvalidInputError,
    NotFoundError,
    ThinkScoreError,
    UpstreamDataError,
)
from thinkscore.observability.logging import bind_context, clear_context

logger = structlog.get_logger(__name__)

# Domain error -> (status code, error_type)
ERROR_STATUS: dict[type[ThinkScoreError], tuple[int, str]] = {
    InvalidInputError: (422, "invalid_input"),
    NotFoundError: (404, "not_found"),
    UpstreamDataError: (502, "upstream"),
    EvaluationFailedError: (502, "evaluation_failed"),
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("ThinkScore API starting up")

    yield

    logger.info("ThinkScore API shutting down")
    await cleanup_dependencies()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    openapi_tags = [
        {"name": "health", "description": "Service health checks"},
        {"name": "evaluations", "description": "LLM answer evaluation"},
        {"name": "rankings", "description": "Leaderboards and personal rank"},
        {"name": "usage-logs", "description": "LLM usage logs and statistics"},
        {"name": "questions", "description": "Questions and the question of the day"},
        {"name": "answers", "description": "Submitted answers"},
        {"name": "scores", "description": "Answer scores"},
        {"name": "profiles", "description": "User profiles"},
        {"name": "forum", "description": "Forum posts, comments and likes"},
    ]

    app = FastAPI(
        title="ThinkScore API",
        description="""
Backend for a philosophical Q&A service: answers are scored by an LLM on
logical reasoning, creativity and consistency, and ranked on leaderboards.

## Authentication

Requires `X-API-KEY` header for all requests except `/health`.
Routes acting on behalf of a user read the `X-User-ID` header.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=openapi_tags,
    )

    # Add CORS middleware (origins from CORS_ORIGINS env var, comma-separated)
    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Request logging and correlation ID middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        # Correlation ID: use incoming header or generate a new one
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or str(uuid.uuid4())
        )

        # Bind to structlog contextvars for automatic log correlation
        bind_context(request_id=request_id)

        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time

            # Add correlation ID to response headers
            response.headers["X-Request-ID"] = request_id

            logger.info(
                "HTTP request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
            return response
        finally:
            clear_context()

    # Domain errors
    @app.exception_handler(ThinkScoreError)
    async def domain_exception_handler(request: Request, exc: ThinkScoreError):
        status_code, error_type = 500, "internal"
        for error_cls, mapped in ERROR_STATUS.items():
            if isinstance(exc, error_cls):
                status_code, error_type = mapped
                break
        if status_code >= 500:
            logger.error("Request failed", error_type=error_type, error=str(exc))
        else:
            logger.info("Request rejected", error_type=error_type, error=str(exc))
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "error_type": error_type},
        )

    # Exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error_type": "internal"},
        )

    # Include routers
    app.include_router(health.router, tags=["health"])
    app.include_router(evaluations.router, tags=["evaluations"])
    app.include_router(rankings.router, tags=["rankings"])
    app.include_router(usage_logs.router, tags=["usage-logs"])
    app.include_router(questions.router, tags=["questions"])
    app.include_router(answers.router, tags=["answers"])
    app.include_router(scores.router, tags=["scores"])
    app.include_router(profiles.router, tags=["profiles"])
    app.include_router(forum.router, tags=["forum"])

    # Root endpoint
    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "service": "ThinkScore API",
            "version": "0.1.0",
            "docs": "/docs",
        }

    return app
