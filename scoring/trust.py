"""Combined trust score for a pair of users."""

import math

from schemas.matching import TrustFactors, TrustScoreResult
from schemas.profile import UserProfile

LOW_TRUST_THRESHOLD = 0.3
HIGH_TRUST_THRESHOLD = 0.8
LOW_TRUST_PENALTY = 0.7
HIGH_TRUST_BONUS = 1.1


def normalize_trust_score(score: float) -> float:
    """Clamp a raw trust rating into [0, 1]. Non-finite ratings count as 0."""
    if not math.isfinite(score):
        return 0.0
    return max(0.0, min(1.0, score))


class TrustService:
    """Combines the individual trust ratings of two users."""

    def calculate_trust_score(self, user_a: UserProfile, user_b: UserProfile) -> TrustScoreResult:
        """
        Calculate combined trust score for a user pair.

        The average of both clamped ratings, reduced when either user is
        below 0.3 and boosted when both are above 0.8.
        """
        user_a_trust = normalize_trust_score(user_a.trust_score)
        user_b_trust = normalize_trust_score(user_b.trust_score)

        average_trust = (user_a_trust + user_b_trust) / 2
        final_score = average_trust

        if user_a_trust < LOW_TRUST_THRESHOLD or user_b_trust < LOW_TRUST_THRESHOLD:
            final_score = average_trust * LOW_TRUST_PENALTY
        elif user_a_trust > HIGH_TRUST_THRESHOLD and user_b_trust > HIGH_TRUST_THRESHOLD:
            final_score = min(1.0, average_trust * HIGH_TRUST_BONUS)

        return TrustScoreResult(
            score=normalize_trust_score(final_score),
            factors=TrustFactors(
                user_a_trust=user_a_trust,
                user_b_trust=user_b_trust,
                average_trust=average_trust,
            ),
        )

    def meets_trust_threshold(
        self,
        user_a: UserProfile,
        user_b: UserProfile,
        min_trust: float = 0.3
    ) -> bool:
        """Check if the combined trust of a pair reaches a minimum."""
        return self.calculate_trust_score(user_a, user_b).score >= min_trust
