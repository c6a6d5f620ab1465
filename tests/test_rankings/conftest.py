"""Fixtures for ranking tests."""

from unittest.mock import AsyncMock

import pytest

from thinkscore.rankings.config import RankingConfig
from thinkscore.rankings.service import RankingService


@pytest.fixture
def mock_gateway():
    gateway = AsyncMock()
    gateway.query = AsyncMock()
    gateway.query_one = AsyncMock()
    gateway.count = AsyncMock()
    return gateway


@pytest.fixture
def ranking_service(mock_gateway) -> RankingService:
    return RankingService(mock_gateway, RankingConfig(default_limit=50, max_limit=500))
