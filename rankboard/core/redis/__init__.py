"""
Redis infrastructure for Rankboard.

Exports
-------
RankingStore - Sorted-set adapter with connection lifecycle
StoreBatch   - Atomic MULTI/EXEC batch of sorted-set primitives

Example Usage
-------------
>>> store = RankingStore.from_config()
>>> await store.connect()
>>> async with store.transaction() as batch:
>>>     batch.score("scores", "alice")
>>>     batch.rank_ascending("scores", "alice")
>>>     score, index = await batch.execute()
>>> await store.close()
"""

from __future__ import annotations

from rankboard.core.redis.batch import StoreBatch
from rankboard.core.redis.store import RankingStore

__all__ = [
    "RankingStore",
    "StoreBatch",
]
