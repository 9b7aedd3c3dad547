"""
Leaderboard Module
==================

Domain: ranking queries over a Redis sorted set

Services:
- Leaderboard: rank, score, page and top-N queries for one named leaderboard
"""

from .models import LeaderboardEntry, Lookup, LookupStatus, RankWithScore, SortOrder
from .service import Leaderboard

__all__ = [
    "Leaderboard",
    "LeaderboardEntry",
    "Lookup",
    "LookupStatus",
    "RankWithScore",
    "SortOrder",
]
