"""Shared pytest fixtures for neosession tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from neosession.config.models import Neo4jConfig
from neosession.session.builder import SessionBuilder


@pytest.fixture
def neo4j_config() -> Neo4jConfig:
    return Neo4jConfig(
        uri="bolt://localhost:7687",
        username="neo4j",
        password="testpass",
        database="movies",
    )


@pytest.fixture
def builder() -> SessionBuilder:
    return SessionBuilder("bolt://localhost:7687").with_auth("neo4j", "testpass")


@pytest.fixture
def mock_result() -> MagicMock:
    """A driver result whose fetch methods are awaitable."""
    result = MagicMock()
    result.single = AsyncMock(return_value={"ok": 1})
    result.data = AsyncMock(return_value=[{"name": "a"}, {"name": "b"}])
    result.consume = AsyncMock()
    return result


@pytest.fixture
def mock_driver(mock_result: MagicMock) -> MagicMock:
    """Create a mock Neo4j async driver.

    The real driver's .session() is synchronous and returns an AsyncSession,
    so the driver is a MagicMock and the session an AsyncMock.
    """
    driver = MagicMock()
    driver.close = AsyncMock()
    driver.verify_connectivity = AsyncMock()

    session = AsyncMock()
    session.run = AsyncMock(return_value=mock_result)
    driver.session.return_value = session

    tx = AsyncMock()
    tx.run = AsyncMock(return_value=mock_result)
    session.begin_transaction = AsyncMock(return_value=tx)
    return driver
