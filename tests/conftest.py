"""
Pytest Configuration and Fixtures for Rankboard Tests
=====================================================

Purpose
-------
Centralized test fixtures for the Rankboard test suite.

Responsibilities
----------------
- Testcontainers setup for Redis (integration tests)
- RankingStore connected to the container, with per-test cleanup
- Mocked RankingStore / StoreBatch for unit tests

Architecture Notes
------------------
- Unit tests use mocks (fast, isolated)
- Integration tests use testcontainers (real Redis); they are skipped when
  Docker is not available
- Fixtures follow scope hierarchy: session > function
"""

from __future__ import annotations

import os
import uuid
from typing import AsyncGenerator, Generator, List

import pytest
import pytest_asyncio

from rankboard.core.config.config import Config
from rankboard.core.logging.logger import get_logger
from rankboard.core.redis.batch import StoreBatch
from rankboard.core.redis.store import RankingStore

logger = get_logger(__name__)

# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_configure(config):
    """Configure pytest environment."""
    os.environ["ENVIRONMENT"] = "testing"
    os.environ["LOG_LEVEL"] = "DEBUG"
    Config.reload()


# ============================================================================
# TESTCONTAINERS FIXTURES (Integration Tests)
# ============================================================================


@pytest.fixture(scope="session")
def redis_container() -> Generator["RedisContainer", None, None]:
    """
    Start Redis testcontainer for integration tests.

    Scope: session (container persists across all tests)
    """
    from testcontainers.redis import RedisContainer

    logger.info("Starting Redis testcontainer...")
    container = RedisContainer(image="redis:7-alpine")
    try:
        container.start()
    except Exception as exc:
        pytest.skip(f"Docker is not available for Redis testcontainer: {exc}")

    logger.info(
        "Redis testcontainer started: %s:%s",
        container.get_container_host_ip(),
        container.get_exposed_port(6379),
    )

    yield container

    logger.info("Stopping Redis testcontainer...")
    container.stop()


@pytest.fixture(scope="session")
def redis_url(redis_container) -> str:
    host = redis_container.get_container_host_ip()
    port = redis_container.get_exposed_port(6379)
    return f"redis://{host}:{port}/0"


@pytest_asyncio.fixture
async def store(redis_url: str) -> AsyncGenerator[RankingStore, None]:
    """
    RankingStore connected to the Redis testcontainer.

    Scope: function (fresh client per test, database flushed afterwards)
    """
    ranking_store = RankingStore.from_url(redis_url)
    await ranking_store.connect()

    yield ranking_store

    await ranking_store.client.flushdb()
    await ranking_store.close()


@pytest.fixture
def leaderboard_name() -> str:
    """Unique leaderboard key per test."""
    return f"test-board:{uuid.uuid4().hex[:8]}"


# ============================================================================
# MOCK FIXTURES (Unit Tests)
# ============================================================================


@pytest.fixture
def mock_batch(mocker):
    """
    Mock StoreBatch usable as ``async with store.transaction() as batch``.

    Queued commands are recorded in ``mock_batch.calls_made``.
    """
    batch = mocker.MagicMock(spec=StoreBatch)
    calls_made: List[str] = []

    def _recorder(name):
        def _record(*args):
            calls_made.append(name)
            return batch

        return _record

    for command in (
        "add",
        "remove",
        "cardinality",
        "count_in_range",
        "rank_ascending",
        "rank_descending",
        "score",
        "delete_collection",
    ):
        getattr(batch, command).side_effect = _recorder(command)

    batch.execute = mocker.AsyncMock(return_value=[])
    batch.__aenter__ = mocker.AsyncMock(return_value=batch)
    batch.__aexit__ = mocker.AsyncMock(return_value=None)
    batch.calls_made = calls_made
    return batch


@pytest.fixture
def mock_store(mocker, mock_batch):
    """
    Mock RankingStore for unit tests.

    Async primitives are AsyncMocks; ``transaction()`` returns ``mock_batch``.
    """
    ranking_store = mocker.create_autospec(RankingStore, instance=True)
    ranking_store.transaction.return_value = mock_batch
    return ranking_store
