"""Fixtures for CLI tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def mock_db():
    """Database double with an async lifecycle."""
    db = MagicMock()
    db.connect = AsyncMock()
    db.close = AsyncMock()
    db.health_check = AsyncMock(return_value=True)
    return db
