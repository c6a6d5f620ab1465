"""Fixtures for storage tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from thinkscore.storage.gateway import TableGateway


@pytest.fixture
def mock_db():
    """Database double; ``fetch`` and ``fetchval`` are the only calls the gateway makes."""
    db = MagicMock()
    db.fetch = AsyncMock(return_value=[])
    db.fetchval = AsyncMock(return_value=0)
    return db


@pytest.fixture
def gateway(mock_db) -> TableGateway:
    return TableGateway(mock_db)
