"""
Atomic sorted-set batches for Rankboard

Purpose
-------
Queue several sorted-set primitives and execute them as a single
MULTI/EXEC transaction so that every read in the batch observes the same
logical instant.

Responsibilities
----------------
- Expose the RankingStore primitives in queued (non-awaited) form
- Execute the queue in one roundtrip and return results in call order
- Surface a batch-level failure as a single exception
- Log batch size and latency

Non-Responsibilities
--------------------
- No interpretation of results (handled by the leaderboard engine)
- No retry logic

Architecture Notes
------------------
- Wraps a redis-py asyncio ``Pipeline`` created with ``transaction=True``
- Usable as an async context manager; the pipeline is reset on exit
- A batch executes at most once
"""

from __future__ import annotations

import time
from typing import Any, List

from redis.asyncio.client import Pipeline

from rankboard.core.logging.logger import get_logger

logger = get_logger(__name__)


class StoreBatch:
    """
    A queued set of sorted-set commands executed atomically.

    Example
    -------
    >>> async with store.transaction() as batch:
    >>>     batch.score("scores", "alice")
    >>>     batch.rank_descending("scores", "alice")
    >>>     score, index = await batch.execute()
    """

    def __init__(self, pipeline: Pipeline) -> None:
        self._pipeline = pipeline
        self._queued: List[str] = []
        self._executed = False

    def __len__(self) -> int:
        return len(self._queued)

    @property
    def commands(self) -> List[str]:
        """Names of the queued commands, in call order."""
        return list(self._queued)

    def _queue(self, command: str) -> "StoreBatch":
        if self._executed:
            raise RuntimeError("StoreBatch has already been executed")
        self._queued.append(command)
        return self

    # ═══════════════════════════════════════════════════════════════════════
    # QUEUED PRIMITIVES
    # ═══════════════════════════════════════════════════════════════════════

    def add(self, collection: str, member: str, score: float) -> "StoreBatch":
        self._pipeline.zadd(collection, {member: score})
        return self._queue("ZADD")

    def remove(self, collection: str, member: str) -> "StoreBatch":
        self._pipeline.zrem(collection, member)
        return self._queue("ZREM")

    def cardinality(self, collection: str) -> "StoreBatch":
        self._pipeline.zcard(collection)
        return self._queue("ZCARD")

    def count_in_range(
        self, collection: str, min_score: float, max_score: float
    ) -> "StoreBatch":
        self._pipeline.zcount(collection, min_score, max_score)
        return self._queue("ZCOUNT")

    def rank_ascending(self, collection: str, member: str) -> "StoreBatch":
        self._pipeline.zrank(collection, member)
        return self._queue("ZRANK")

    def rank_descending(self, collection: str, member: str) -> "StoreBatch":
        self._pipeline.zrevrank(collection, member)
        return self._queue("ZREVRANK")

    def score(self, collection: str, member: str) -> "StoreBatch":
        self._pipeline.zscore(collection, member)
        return self._queue("ZSCORE")

    def delete_collection(self, collection: str) -> "StoreBatch":
        self._pipeline.delete(collection)
        return self._queue("DEL")

    # ═══════════════════════════════════════════════════════════════════════
    # EXECUTION
    # ═══════════════════════════════════════════════════════════════════════

    async def execute(self) -> List[Any]:
        """
        Execute all queued commands as one MULTI/EXEC unit.

        Returns
        -------
        List[Any]
            Per-command results in the order the commands were queued.

        Raises
        ------
        redis.exceptions.RedisError
            If the transaction as a whole, or any command in it, fails.
        """
        if self._executed:
            raise RuntimeError("StoreBatch has already been executed")
        self._executed = True

        if not self._queued:
            return []

        start_time = time.monotonic()

        try:
            results = await self._pipeline.execute()
        except Exception as exc:
            logger.error(
                "Store batch failed",
                extra={
                    "commands": self._queued,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            )
            raise

        latency_ms = (time.monotonic() - start_time) * 1000
        logger.debug(
            "Store batch completed",
            extra={
                "command_count": len(self._queued),
                "latency_ms": round(latency_ms, 2),
            },
        )
        return list(results)

    async def reset(self) -> None:
        await self._pipeline.reset()

    async def __aenter__(self) -> "StoreBatch":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.reset()
