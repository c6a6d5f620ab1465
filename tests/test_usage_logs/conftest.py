"""Fixtures for repository tests."""

from unittest.mock import AsyncMock

import pytest


@pytest.fixture
def mock_gateway():
    """TableGateway double; tests set GatewayResult return values per call."""
    gateway = AsyncMock()
    gateway.query = AsyncMock()
    gateway.query_one = AsyncMock()
    gateway.count = AsyncMock()
    gateway.insert = AsyncMock()
    gateway.insert_many = AsyncMock()
    gateway.update = AsyncMock()
    gateway.delete = AsyncMock()
    return gateway
