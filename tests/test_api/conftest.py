"""Shared fixtures for API tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from thinkscore.api.app import create_app
from thinkscore.api.auth import verify_api_key
from thinkscore.api.dependencies import (
    get_answer_repository,
    get_database,
    get_evaluation_service,
    get_forum_repository,
    get_profile_repository,
    get_question_repository,
    get_ranking_service,
    get_score_repository,
    get_usage_log_repository,
)

USER_HEADERS = {"X-User-ID": "user-1"}


@pytest.fixture
def mock_evaluation_service():
    service = AsyncMock()
    service.evaluate = AsyncMock()
    return service


@pytest.fixture
def mock_ranking_service():
    return AsyncMock()


@pytest.fixture
def mock_usage_log_repo():
    return AsyncMock()


@pytest.fixture
def mock_question_repo():
    return AsyncMock()


@pytest.fixture
def mock_answer_repo():
    return AsyncMock()


@pytest.fixture
def mock_score_repo():
    return AsyncMock()


@pytest.fixture
def mock_profile_repo():
    return AsyncMock()


@pytest.fixture
def mock_forum_repo():
    return AsyncMock()


@pytest.fixture
def mock_database():
    db = MagicMock()
    db.health_check = AsyncMock(return_value=True)
    return db


@pytest.fixture
def app(
    mock_evaluation_service,
    mock_ranking_service,
    mock_usage_log_repo,
    mock_question_repo,
    mock_answer_repo,
    mock_score_repo,
    mock_profile_repo,
    mock_forum_repo,
    mock_database,
):
    """Application with every storage-backed dependency replaced."""
    app = create_app()
    app.dependency_overrides[get_evaluation_service] = lambda: mock_evaluation_service
    app.dependency_overrides[get_ranking_service] = lambda: mock_ranking_service
    app.dependency_overrides[get_usage_log_repository] = lambda: mock_usage_log_repo
    app.dependency_overrides[get_question_repository] = lambda: mock_question_repo
    app.dependency_overrides[get_answer_repository] = lambda: mock_answer_repo
    app.dependency_overrides[get_score_repository] = lambda: mock_score_repo
    app.dependency_overrides[get_profile_repository] = lambda: mock_profile_repo
    app.dependency_overrides[get_forum_repository] = lambda: mock_forum_repo
    app.dependency_overrides[get_database] = lambda: mock_database
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """FastAPI TestClient with API key verification bypassed."""
    app.dependency_overrides[verify_api_key] = lambda: "test-key"
    with TestClient(app) as c:
        yield c
