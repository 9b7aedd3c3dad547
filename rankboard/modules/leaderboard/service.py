"""
Leaderboard Service
===================

Purpose
-------
Ranking queries (rank, score, page, top-N) over one named leaderboard backed
by a Redis sorted set.

Domain
------
- Map sort order onto the store's direction-fixed rank/range primitives
- Convert 0-based store indices into 1-based ranks
- Compute page counts and page numbers by ceiling division
- Read rank and score together in one atomic batch

Rank direction
--------------
Rank 1 is always the best member under the configured sort order:

- ASCENDING  -> ZRANK / ZRANGE       (lowest score first)
- DESCENDING -> ZREVRANK / ZREVRANGE (highest score first)

Every rank-derived query (get_rank_for, get_rank_with_score_for,
get_page_for, get_top, get_page) goes through the same two helpers, so
ranks and pages can never disagree about direction.

Error policy
------------
- Store failures propagate from mutations, counts and rank/page/window queries.
- An absent member is ``None`` (rank, score) or ``0`` (page), never an error.
- ``lookup_score`` / ``lookup_rank_with_score`` report FOUND / NOT_FOUND /
  FAILED explicitly. ``get_score_for`` / ``get_rank_with_score_for`` return
  ``None`` for both absence and failure, logging the failure.
"""

from __future__ import annotations

import math
from typing import List, Optional, Union

from redis.exceptions import RedisError

from rankboard.core.config.config import Config
from rankboard.core.logging.logger import get_logger
from rankboard.core.redis.batch import StoreBatch
from rankboard.core.redis.store import RankingStore
from rankboard.modules.leaderboard.models import (
    LeaderboardEntry,
    Lookup,
    RankWithScore,
    SortOrder,
)
from rankboard.modules.shared.exceptions import ValidationError

logger = get_logger(__name__)


class Leaderboard:
    """
    A named leaderboard with fixed sort order and a settable page size.

    Public Methods
    --------------
    - delete_leaderboard() -> Remove the whole leaderboard
    - rank_member() / remove_member() -> Upsert or drop a member
    - member_count() / member_count_in_range() -> Cardinality queries
    - page_count() -> Number of pages
    - get_rank_for() / get_score_for() / get_rank_with_score_for() -> Member reads
    - lookup_score() / lookup_rank_with_score() -> Member reads with explicit status
    - get_page_for() -> Page containing a member
    - get_top() / get_page() -> Ranked windows

    Example:
        >>> store = RankingStore.from_config()
        >>> board = Leaderboard("highscores", store, sort_order=SortOrder.DESCENDING)
        >>> await board.rank_member("alice", 120)
        >>> await board.get_rank_for("alice")
        1
    """

    DEFAULT_PAGE_SIZE: int = 50
    DEFAULT_SORT_ORDER: SortOrder = SortOrder.ASCENDING

    def __init__(
        self,
        name: str,
        store: RankingStore,
        page_size: Optional[int] = None,
        sort_order: Optional[Union[SortOrder, str]] = None,
    ) -> None:
        """
        Args:
            name: Leaderboard name (the Redis key)
            store: Ranking store the leaderboard lives in
            page_size: Default page size; non-positive or missing uses 50
            sort_order: SortOrder or its name; missing uses ascending

        Raises:
            ValidationError: If page_size is not an integer
        """
        self._name = name
        self._store = store
        self._page_size = self._normalize_page_size(page_size)
        self._sort_order = (
            SortOrder.parse(sort_order)
            if sort_order is not None
            else self.DEFAULT_SORT_ORDER
        )

    @classmethod
    def from_config(
        cls, name: str, store: Optional[RankingStore] = None
    ) -> "Leaderboard":
        """Build a leaderboard using page size, sort order and Redis URL from Config."""
        return cls(
            name,
            store if store is not None else RankingStore.from_config(),
            page_size=Config.LEADERBOARD_PAGE_SIZE,
            sort_order=Config.LEADERBOARD_SORT_ORDER,
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(name={self._name!r}, "
            f"page_size={self._page_size!r}, sort_order={self._sort_order.value!r})"
        )

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def name(self) -> str:
        return self._name

    @property
    def store(self) -> RankingStore:
        return self._store

    @property
    def sort_order(self) -> SortOrder:
        return self._sort_order

    @property
    def page_size(self) -> int:
        return self._page_size

    @page_size.setter
    def page_size(self, value: int) -> None:
        self._page_size = self._normalize_page_size(value)

    # ========================================================================
    # PUBLIC API - Write Operations
    # ========================================================================

    async def delete_leaderboard(self) -> int:
        """
        Delete the whole leaderboard.

        Returns:
            1 if the leaderboard existed, 0 if it was already absent.
        """
        removed = await self._store.delete_collection(self._name)
        logger.info(
            "Leaderboard deleted",
            extra={"leaderboard": self._name, "removed": removed},
        )
        return removed

    async def rank_member(self, member: str, score: float) -> int:
        """
        Set ``member``'s score, creating the member if needed.

        Returns:
            1 if the member was added, 0 if an existing score was overwritten.
        """
        return await self._store.add(self._name, member, score)

    async def remove_member(self, member: str) -> int:
        """Returns 1 if the member was removed, 0 if it was not present."""
        return await self._store.remove(self._name, member)

    # ========================================================================
    # PUBLIC API - Counts
    # ========================================================================

    async def member_count(self) -> int:
        return await self._store.cardinality(self._name)

    async def member_count_in_range(self, min_score: float, max_score: float) -> int:
        """
        Count members with ``min_score <= score <= max_score``.

        Inverted bounds are not an error; the store reports 0.
        """
        return await self._store.count_in_range(self._name, min_score, max_score)

    async def page_count(self, page_size: Optional[int] = None) -> int:
        """
        Number of pages needed to show every member.

        An empty leaderboard has 0 pages.
        """
        size = self._effective_page_size(page_size)
        count = await self._store.cardinality(self._name)
        return math.ceil(count / size)

    # ========================================================================
    # PUBLIC API - Member Reads
    # ========================================================================

    async def get_rank_for(self, member: str) -> Optional[int]:
        """1-based rank of ``member``, or None if it is not on the leaderboard."""
        index = await self._rank_index(member)
        return None if index is None else index + 1

    async def lookup_score(self, member: str) -> Lookup[float]:
        try:
            score = await self._store.score(self._name, member)
        except RedisError as exc:
            self._log_lookup_failure("lookup_score", member, exc)
            return Lookup.failed(exc)

        if score is None:
            return Lookup.not_found()
        return Lookup.found(float(score))

    async def get_score_for(self, member: str) -> Optional[float]:
        """Score of ``member``, or None if absent or the store failed."""
        return (await self.lookup_score(member)).value

    async def lookup_rank_with_score(self, member: str) -> Lookup[RankWithScore]:
        """
        Read score and rank in one MULTI/EXEC batch.

        Both values come from the same logical instant, so a concurrent
        writer can never produce a pair that did not coexist.
        """
        try:
            async with self._store.transaction() as batch:
                batch.score(self._name, member)
                self._queue_rank(batch, member)
                score, index = await batch.execute()
        except RedisError as exc:
            self._log_lookup_failure("lookup_rank_with_score", member, exc)
            return Lookup.failed(exc)

        if score is None or index is None:
            return Lookup.not_found()
        return Lookup.found(RankWithScore(rank=int(index) + 1, score=float(score)))

    async def get_rank_with_score_for(self, member: str) -> Optional[RankWithScore]:
        """Rank and score of ``member``, or None if absent or the store failed."""
        return (await self.lookup_rank_with_score(member)).value

    async def get_page_for(self, member: str, page_size: Optional[int] = None) -> int:
        """
        1-based page containing ``member``.

        An absent member is on page 0, which is distinct from the first page.
        """
        size = self._effective_page_size(page_size)
        index = await self._rank_index(member)
        rank = 0 if index is None else index + 1
        return math.ceil(rank / size)

    # ========================================================================
    # PUBLIC API - Ranked Windows
    # ========================================================================

    async def get_top(self, count: int, offset: int = 0) -> List[LeaderboardEntry]:
        """
        Up to ``count`` members starting at 0-based ``offset``, best first.

        Args:
            count: Maximum number of entries; ``count <= 0`` returns []
            offset: Number of ranked members to skip

        Raises:
            ValidationError: If offset is negative
        """
        if offset < 0:
            raise ValidationError("offset", "Offset cannot be negative")
        if count <= 0:
            return []

        start = offset
        stop = offset + count - 1
        if self._sort_order is SortOrder.DESCENDING:
            rows = await self._store.range_descending(self._name, start, stop)
        else:
            rows = await self._store.range_ascending(self._name, start, stop)

        return [
            LeaderboardEntry(member=member, score=score, rank=start + position + 1)
            for position, (member, score) in enumerate(rows)
        ]

    async def get_page(
        self, page: int, page_size: Optional[int] = None
    ) -> List[LeaderboardEntry]:
        """
        Entries on the 1-based ``page``. Pages past the end are empty.

        Raises:
            ValidationError: If page is less than 1
        """
        if page < 1:
            raise ValidationError("page", "Page must be 1 or greater")
        size = self._effective_page_size(page_size)
        return await self.get_top(size, offset=(page - 1) * size)

    # ========================================================================
    # PRIVATE HELPERS
    # ========================================================================

    async def _rank_index(self, member: str) -> Optional[int]:
        if self._sort_order is SortOrder.DESCENDING:
            return await self._store.rank_descending(self._name, member)
        return await self._store.rank_ascending(self._name, member)

    def _queue_rank(self, batch: StoreBatch, member: str) -> None:
        if self._sort_order is SortOrder.DESCENDING:
            batch.rank_descending(self._name, member)
        else:
            batch.rank_ascending(self._name, member)

    def _effective_page_size(self, page_size: Optional[int]) -> int:
        if page_size is None:
            return self._page_size
        return self._normalize_page_size(page_size)

    def _normalize_page_size(self, page_size: Optional[int]) -> int:
        if page_size is None:
            return self.DEFAULT_PAGE_SIZE
        if isinstance(page_size, bool) or not isinstance(page_size, int):
            raise ValidationError(
                "page_size", f"Page size must be an integer, got {page_size!r}"
            )
        if page_size < 1:
            logger.warning(
                "Invalid page size, using default",
                extra={
                    "leaderboard": self._name,
                    "page_size": page_size,
                    "default_page_size": self.DEFAULT_PAGE_SIZE,
                },
            )
            return self.DEFAULT_PAGE_SIZE
        return page_size

    def _log_lookup_failure(
        self, operation: str, member: str, error: Exception
    ) -> None:
        logger.warning(
            f"Store failure during {operation}",
            extra={
                "operation": operation,
                "leaderboard": self._name,
                "member": member,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )
