"""Shared domain building blocks for Rankboard modules."""

from .exceptions import RankboardDomainException, ValidationError

__all__ = [
    "RankboardDomainException",
    "ValidationError",
]
