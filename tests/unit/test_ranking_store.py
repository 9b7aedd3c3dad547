"""
Unit tests for RankingStore and StoreBatch.

Each adapter call must map onto exactly one sorted-set command; these tests
pin that mapping against a mocked redis-py client.
"""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from rankboard.core.exceptions import StoreConnectionError
from rankboard.core.redis.batch import StoreBatch
from rankboard.core.redis.store import RankingStore

pytestmark = pytest.mark.unit


@pytest.fixture
def client(mocker):
    redis_client = mocker.MagicMock()
    for command in (
        "ping",
        "zadd",
        "zrem",
        "zcard",
        "zcount",
        "zrank",
        "zrevrank",
        "zscore",
        "zrange",
        "zrevrange",
        "delete",
        "aclose",
    ):
        setattr(redis_client, command, mocker.AsyncMock())
    return redis_client


@pytest.fixture
def store(client):
    return RankingStore(client)


class TestPrimitives:
    async def test_add_uses_zadd_mapping(self, store, client):
        client.zadd.return_value = 1

        assert await store.add("board", "alice", 3.5) == 1
        client.zadd.assert_awaited_once_with("board", {"alice": 3.5})

    async def test_remove(self, store, client):
        client.zrem.return_value = 0

        assert await store.remove("board", "ghost") == 0
        client.zrem.assert_awaited_once_with("board", "ghost")

    async def test_cardinality(self, store, client):
        client.zcard.return_value = 4

        assert await store.cardinality("board") == 4

    async def test_count_in_range(self, store, client):
        client.zcount.return_value = 2

        assert await store.count_in_range("board", 1, 9) == 2
        client.zcount.assert_awaited_once_with("board", 1, 9)

    async def test_rank_directions(self, store, client):
        client.zrank.return_value = 0
        client.zrevrank.return_value = None

        assert await store.rank_ascending("board", "alice") == 0
        assert await store.rank_descending("board", "ghost") is None
        client.zrank.assert_awaited_once_with("board", "alice")
        client.zrevrank.assert_awaited_once_with("board", "ghost")

    async def test_score(self, store, client):
        client.zscore.return_value = 12.0

        assert await store.score("board", "alice") == 12.0

    async def test_ranges_return_member_score_pairs(self, store, client):
        client.zrange.return_value = [("a", 1), ("b", 2.5)]
        client.zrevrange.return_value = [("b", 2.5)]

        assert await store.range_ascending("board", 0, 1) == [("a", 1.0), ("b", 2.5)]
        assert await store.range_descending("board", 0, 0) == [("b", 2.5)]
        client.zrange.assert_awaited_once_with("board", 0, 1, withscores=True)
        client.zrevrange.assert_awaited_once_with("board", 0, 0, withscores=True)

    async def test_delete_collection(self, store, client):
        client.delete.return_value = 1

        assert await store.delete_collection("board") == 1
        client.delete.assert_awaited_once_with("board")

    async def test_errors_are_not_wrapped(self, store, client):
        client.zcard.side_effect = RedisConnectionError("down")

        with pytest.raises(RedisConnectionError):
            await store.cardinality("board")

    def test_transaction_uses_multi_exec_pipeline(self, store, client):
        batch = store.transaction()

        assert isinstance(batch, StoreBatch)
        client.pipeline.assert_called_once_with(transaction=True)


class TestLifecycle:
    async def test_connect_pings(self, store, client):
        await store.connect()

        client.ping.assert_awaited_once()

    async def test_connect_failure_raises_store_connection_error(self, store, client):
        client.ping.side_effect = RedisConnectionError("refused")

        with pytest.raises(StoreConnectionError) as exc_info:
            await store.connect()

        assert exc_info.value.is_retryable is True
        assert exc_info.value.details["error_type"] == "ConnectionError"

    async def test_async_context_manager_closes(self, store, client):
        async with store as connected:
            assert connected is store

        client.aclose.assert_awaited_once()

    def test_from_url_decodes_responses(self, mocker):
        from_url = mocker.patch("rankboard.core.redis.store.AsyncRedis.from_url")

        RankingStore.from_url("redis://example:6380/1", socket_timeout=2)

        from_url.assert_called_once_with(
            "redis://example:6380/1",
            socket_timeout=2,
            decode_responses=True,
            encoding="utf-8",
        )

    def test_from_url_overrides_disabled_decoding_with_warning(self, mocker, caplog):
        from_url = mocker.patch("rankboard.core.redis.store.AsyncRedis.from_url")

        with caplog.at_level("WARNING", logger="rankboard.core.redis.store"):
            RankingStore.from_url("redis://example:6380/1", decode_responses=False)

        assert from_url.call_args.kwargs["decode_responses"] is True
        assert "decode_responses=False" in caplog.text


class TestStoreBatch:
    @pytest.fixture
    def pipeline(self, mocker):
        pipe = mocker.MagicMock()
        pipe.execute = mocker.AsyncMock(return_value=[5.0, 1])
        pipe.reset = mocker.AsyncMock()
        return pipe

    async def test_commands_execute_in_queue_order(self, pipeline):
        batch = StoreBatch(pipeline)

        async with batch:
            batch.score("board", "alice").rank_descending("board", "alice")
            results = await batch.execute()

        assert batch.commands == ["ZSCORE", "ZREVRANK"]
        assert results == [5.0, 1]
        pipeline.zscore.assert_called_once_with("board", "alice")
        pipeline.zrevrank.assert_called_once_with("board", "alice")
        pipeline.reset.assert_awaited_once()

    async def test_empty_batch_skips_roundtrip(self, pipeline):
        batch = StoreBatch(pipeline)

        assert await batch.execute() == []
        pipeline.execute.assert_not_awaited()

    async def test_batch_executes_once(self, pipeline):
        batch = StoreBatch(pipeline)
        batch.cardinality("board")
        await batch.execute()

        with pytest.raises(RuntimeError):
            await batch.execute()
        with pytest.raises(RuntimeError):
            batch.cardinality("board")

    async def test_batch_error_propagates(self, pipeline):
        pipeline.execute.side_effect = RedisConnectionError("down")
        batch = StoreBatch(pipeline)
        batch.add("board", "alice", 1.0)

        with pytest.raises(RedisConnectionError):
            await batch.execute()
        pipeline.zadd.assert_called_once_with("board", {"alice": 1.0})
