"""Exceptions raised by the matching engine and its collaborators."""

from typing import Optional

from schemas.matching import MatchingResponse


class MatchingError(Exception):
    """Base class for matching engine errors."""


class ProviderUnavailableError(MatchingError, RuntimeError):
    """The embedding provider failed to initialize or to respond."""


class DimensionMismatchError(MatchingError, ValueError):
    """Two embedding vectors of different length were compared."""

    def __init__(self, len_a: int, len_b: int):
        super().__init__(f"Vectors must have the same length ({len_a} != {len_b})")
        self.len_a = len_a
        self.len_b = len_b


class InvalidWeightError(MatchingError, ValueError):
    """A matching configuration was rejected before scoring."""


class UserNotFoundError(MatchingError, LookupError):
    """A requested user profile does not exist."""

    def __init__(self, user_id: str):
        super().__init__(f"User with id {user_id} does not exist")
        self.user_id = user_id


class RankingTimeoutError(MatchingError, TimeoutError):
    """A ranking pass exceeded its deadline.

    ``partial`` holds the response built from the candidates that finished
    in time (filtered, sorted and truncated like a normal response).
    """

    def __init__(self, timeout: float, partial: Optional[MatchingResponse] = None):
        super().__init__(f"Ranking did not finish within {timeout:.2f}s")
        self.timeout = timeout
        self.partial = partial
