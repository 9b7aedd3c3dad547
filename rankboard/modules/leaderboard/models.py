"""
Leaderboard value types.

- SortOrder: which end of the score range is rank 1
- RankWithScore: a rank/score pair read at one logical instant
- LeaderboardEntry: one row of a ranked window
- Lookup / LookupStatus: explicit found / not-found / failed result
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, Tuple, TypeVar, Union

T = TypeVar("T")


class SortOrder(Enum):
    """Ascending: lowest score is rank 1. Descending: highest score is rank 1."""

    ASCENDING = "ascending"
    DESCENDING = "descending"

    @classmethod
    def parse(cls, value: Union[str, "SortOrder"]) -> "SortOrder":
        """
        Parse a sort order from its name or a short alias.

        >>> SortOrder.parse("desc")
        <SortOrder.DESCENDING: 'descending'>
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        aliases = {
            "asc": cls.ASCENDING,
            "ascending": cls.ASCENDING,
            "desc": cls.DESCENDING,
            "descending": cls.DESCENDING,
        }
        try:
            return aliases[normalized]
        except KeyError:
            raise ValueError(
                f"{value!r} is not one of [asc, ascending, desc, descending]"
            ) from None


@dataclass(frozen=True, slots=True)
class RankWithScore:
    rank: int
    score: float


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    """A member in a ranked window, with its 1-based rank."""

    member: str
    score: float
    rank: int

    def as_tuple(self) -> Tuple[str, float]:
        return (self.member, self.score)


class LookupStatus(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class Lookup(Generic[T]):
    """
    Result of a read that separates absence from store failure.

    ``value`` is set only when ``status`` is FOUND; ``error`` only when FAILED.
    """

    status: LookupStatus
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @classmethod
    def found(cls, value: T) -> "Lookup[T]":
        return cls(LookupStatus.FOUND, value=value)

    @classmethod
    def not_found(cls) -> "Lookup[T]":
        return cls(LookupStatus.NOT_FOUND)

    @classmethod
    def failed(cls, error: BaseException) -> "Lookup[T]":
        return cls(LookupStatus.FAILED, error=error)

    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @property
    def is_failed(self) -> bool:
        return self.status is LookupStatus.FAILED
