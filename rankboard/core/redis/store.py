"""
RankingStore: Redis sorted-set adapter for Rankboard

Purpose
-------
Translate leaderboard storage needs into Redis sorted-set primitives
against a named collection (one Redis key per leaderboard).

Responsibilities
----------------
- Own the async Redis client (connection pool) and its lifecycle
- Proxy each operation to exactly one sorted-set primitive
- Hand out atomic batches (MULTI/EXEC) for cross-consistent reads
- Log operations at DEBUG with latency

Non-Responsibilities
--------------------
- Leaderboard semantics (1-based ranks, sort order, paging)
- Interpreting store failures: redis-py exceptions propagate unmodified

Configuration Keys
------------------
- REDIS_URL              : str (default "redis://localhost:6379/0")
- REDIS_SOCKET_TIMEOUT   : int (default 5)
- REDIS_MAX_CONNECTIONS  : int (default 50)

Architecture Notes
------------------
- Uses the redis-py asyncio client with ``decode_responses=True`` so members
  come back as ``str``
- All indices returned by the store are 0-based
- Range queries use inclusive ``start``/``stop`` indices, as Redis does
"""

from __future__ import annotations

import time
from typing import Any, Awaitable, List, Optional, Tuple

from redis.asyncio.client import Redis as AsyncRedis  # type: ignore[misc]
from redis.exceptions import RedisError

from rankboard.core.config.config import Config
from rankboard.core.exceptions import StoreConnectionError
from rankboard.core.logging.logger import get_logger
from rankboard.core.redis.batch import StoreBatch

logger = get_logger(__name__)


class RankingStore:
    """
    Async adapter over a Redis sorted-set store.

    Example
    -------
    >>> store = RankingStore.from_url("redis://localhost:6379/0")
    >>> await store.connect()
    >>> await store.add("scores", "alice", 42.0)
    >>> await store.rank_descending("scores", "alice")
    0
    >>> await store.close()
    """

    def __init__(self, client: AsyncRedis) -> None:
        self._client = client

    # ═══════════════════════════════════════════════════════════════════════
    # LIFECYCLE MANAGEMENT
    # ═══════════════════════════════════════════════════════════════════════

    @classmethod
    def from_url(cls, url: str, **options: Any) -> "RankingStore":
        """
        Build a store from a Redis URL.

        Extra keyword options are passed to ``Redis.from_url``; responses are
        always decoded to ``str``, so ``decode_responses=False`` is overridden
        with a warning.
        """
        if options.get("decode_responses") is False:
            logger.warning(
                "Ignoring decode_responses=False; ranking store decodes responses",
                extra={"url_scheme": url.split(":", 1)[0]},
            )
        options["decode_responses"] = True
        options.setdefault("encoding", "utf-8")
        client: AsyncRedis = AsyncRedis.from_url(url, **options)
        return cls(client)

    @classmethod
    def from_config(cls) -> "RankingStore":
        """Build a store from the static ``Config`` values."""
        return cls.from_url(
            Config.REDIS_URL,
            socket_timeout=Config.REDIS_SOCKET_TIMEOUT,
            max_connections=Config.REDIS_MAX_CONNECTIONS,
        )

    @property
    def client(self) -> AsyncRedis:
        return self._client

    async def connect(self) -> None:
        """
        Verify the store is reachable.

        Raises
        ------
        StoreConnectionError
            If the PING fails.
        """
        start_time = time.monotonic()
        try:
            await self._client.ping()  # type: ignore[misc]
        except RedisError as exc:
            logger.critical(
                "Failed to connect to ranking store",
                extra={
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            )
            raise StoreConnectionError("connect", exc) from exc

        logger.info(
            "Ranking store connected",
            extra={
                "latency_ms": round((time.monotonic() - start_time) * 1000, 2),
            },
        )

    async def close(self) -> None:
        await self._client.aclose()
        logger.debug("Ranking store closed")

    async def __aenter__(self) -> "RankingStore":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ═══════════════════════════════════════════════════════════════════════
    # SORTED-SET PRIMITIVES
    # ═══════════════════════════════════════════════════════════════════════

    async def add(self, collection: str, member: str, score: float) -> int:
        """ZADD: upsert ``member`` with ``score``. Returns 1 if newly added, else 0."""
        added = await self._timed(
            "ZADD", collection, self._client.zadd(collection, {member: score})
        )
        return int(added)

    async def remove(self, collection: str, member: str) -> int:
        """ZREM: returns the number of members removed (0 or 1)."""
        removed = await self._timed(
            "ZREM", collection, self._client.zrem(collection, member)
        )
        return int(removed)

    async def cardinality(self, collection: str) -> int:
        return int(
            await self._timed("ZCARD", collection, self._client.zcard(collection))
        )

    async def count_in_range(
        self, collection: str, min_score: float, max_score: float
    ) -> int:
        """ZCOUNT with inclusive bounds."""
        count = await self._timed(
            "ZCOUNT",
            collection,
            self._client.zcount(collection, min_score, max_score),
        )
        return int(count)

    async def rank_ascending(self, collection: str, member: str) -> Optional[int]:
        """ZRANK: 0-based index in ascending score order, or None if absent."""
        return await self._timed(
            "ZRANK", collection, self._client.zrank(collection, member)
        )

    async def rank_descending(self, collection: str, member: str) -> Optional[int]:
        """ZREVRANK: 0-based index in descending score order, or None if absent."""
        return await self._timed(
            "ZREVRANK", collection, self._client.zrevrank(collection, member)
        )

    async def score(self, collection: str, member: str) -> Optional[float]:
        return await self._timed(
            "ZSCORE", collection, self._client.zscore(collection, member)
        )

    async def range_ascending(
        self, collection: str, start: int, stop: int
    ) -> List[Tuple[str, float]]:
        """ZRANGE WITHSCORES over inclusive 0-based indices."""
        rows = await self._timed(
            "ZRANGE",
            collection,
            self._client.zrange(collection, start, stop, withscores=True),
        )
        return [(member, float(score)) for member, score in rows]

    async def range_descending(
        self, collection: str, start: int, stop: int
    ) -> List[Tuple[str, float]]:
        """ZREVRANGE WITHSCORES over inclusive 0-based indices."""
        rows = await self._timed(
            "ZREVRANGE",
            collection,
            self._client.zrevrange(collection, start, stop, withscores=True),
        )
        return [(member, float(score)) for member, score in rows]

    async def delete_collection(self, collection: str) -> int:
        """DEL: returns the number of keys removed (0 or 1)."""
        return int(await self._timed("DEL", collection, self._client.delete(collection)))

    def transaction(self) -> StoreBatch:
        """Start an atomic MULTI/EXEC batch."""
        return StoreBatch(self._client.pipeline(transaction=True))

    # ═══════════════════════════════════════════════════════════════════════
    # INTERNALS
    # ═══════════════════════════════════════════════════════════════════════

    @staticmethod
    async def _timed(command: str, collection: str, call: Awaitable[Any]) -> Any:
        start_time = time.monotonic()
        result = await call
        logger.debug(
            "Store command completed",
            extra={
                "command": command,
                "collection": collection,
                "latency_ms": round((time.monotonic() - start_time) * 1000, 2),
            },
        )
        return result
