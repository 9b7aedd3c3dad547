"""
Rankboard: leaderboards on Redis sorted sets.

>>> from rankboard import Leaderboard, RankingStore, SortOrder
>>> store = RankingStore.from_url("redis://localhost:6379/0")
>>> board = Leaderboard("highscores", store, sort_order=SortOrder.DESCENDING)
"""

from rankboard.core.redis import RankingStore, StoreBatch
from rankboard.modules.leaderboard import (
    Leaderboard,
    LeaderboardEntry,
    Lookup,
    LookupStatus,
    RankWithScore,
    SortOrder,
)

__version__ = "0.1.0"

__all__ = [
    "Leaderboard",
    "LeaderboardEntry",
    "Lookup",
    "LookupStatus",
    "RankWithScore",
    "RankingStore",
    "SortOrder",
    "StoreBatch",
]
