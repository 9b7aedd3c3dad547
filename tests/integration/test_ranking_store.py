"""
Integration Tests for RankingStore
==================================

Verify the sorted-set primitives and MULTI/EXEC batches against real Redis.
"""

import pytest

from rankboard.core.exceptions import StoreConnectionError
from rankboard.core.redis.store import RankingStore

pytestmark = pytest.mark.integration


class TestPrimitives:
    async def test_indices_are_zero_based(self, store, leaderboard_name):
        await store.add(leaderboard_name, "low", 1)
        await store.add(leaderboard_name, "high", 2)

        assert await store.rank_ascending(leaderboard_name, "low") == 0
        assert await store.rank_descending(leaderboard_name, "low") == 1
        assert await store.rank_ascending(leaderboard_name, "ghost") is None

    async def test_equal_scores_order_by_member(self, store, leaderboard_name):
        for member in ("carol", "alice", "bob"):
            await store.add(leaderboard_name, member, 5)

        rows = await store.range_ascending(leaderboard_name, 0, -1)

        assert [member for member, _ in rows] == ["alice", "bob", "carol"]

    async def test_score_is_float(self, store, leaderboard_name):
        await store.add(leaderboard_name, "alice", 3)

        score = await store.score(leaderboard_name, "alice")

        assert isinstance(score, float)
        assert score == 3.0

    async def test_delete_collection(self, store, leaderboard_name):
        await store.add(leaderboard_name, "alice", 3)

        assert await store.delete_collection(leaderboard_name) == 1
        assert await store.cardinality(leaderboard_name) == 0


class TestTransaction:
    async def test_results_in_queue_order(self, store, leaderboard_name):
        await store.add(leaderboard_name, "alice", 7)

        async with store.transaction() as batch:
            batch.score(leaderboard_name, "alice")
            batch.rank_descending(leaderboard_name, "alice")
            batch.cardinality(leaderboard_name)
            results = await batch.execute()

        assert results == [7.0, 0, 1]

    async def test_writes_apply_atomically(self, store, leaderboard_name):
        async with store.transaction() as batch:
            batch.add(leaderboard_name, "alice", 1)
            batch.add(leaderboard_name, "bob", 2)
            batch.remove(leaderboard_name, "alice")
            await batch.execute()

        assert await store.cardinality(leaderboard_name) == 1


async def test_connect_to_unreachable_store_fails():
    unreachable = RankingStore.from_url("redis://127.0.0.1:1/0", socket_timeout=1)

    with pytest.raises(StoreConnectionError):
        await unreachable.connect()

    await unreachable.close()
