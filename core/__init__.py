"""Matching engine core. The engine itself lives in core.matching_engine."""

from .exceptions import (
    MatchingError,
    ProviderUnavailableError,
    DimensionMismatchError,
    InvalidWeightError,
    UserNotFoundError,
    RankingTimeoutError,
)

__all__ = [
    "MatchingError",
    "ProviderUnavailableError",
    "DimensionMismatchError",
    "InvalidWeightError",
    "UserNotFoundError",
    "RankingTimeoutError",
]
