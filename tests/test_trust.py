"""Tests for TrustService."""

import pytest

from schemas.profile import UserProfile
from scoring.trust import TrustService, normalize_trust_score


def make_user(user_id: str, trust: float) -> UserProfile:
    return UserProfile(id=user_id, trust_score=trust)


class TestTrustService:
    """Test combined trust scoring."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = TrustService()

    def test_mid_range_is_plain_average(self):
        result = self.service.calculate_trust_score(make_user("a", 0.5), make_user("b", 0.7))

        assert result.score == pytest.approx(0.6)
        assert result.factors.average_trust == pytest.approx(0.6)

    def test_high_trust_bonus(self):
        """Both above 0.8 boosts the average by 10%, capped at 1."""
        result = self.service.calculate_trust_score(make_user("a", 0.9), make_user("b", 0.9))

        assert result.score == pytest.approx(0.99)
        assert result.factors.average_trust <= result.score <= 1.0

    def test_high_trust_bonus_capped(self):
        result = self.service.calculate_trust_score(make_user("a", 1.0), make_user("b", 0.95))

        assert result.score == 1.0

    def test_low_trust_penalty(self):
        """Both at 0.1 gives exactly average * 0.7."""
        result = self.service.calculate_trust_score(make_user("a", 0.1), make_user("b", 0.1))

        assert result.score == pytest.approx(0.1 * 0.7)

    def test_one_low_trust_user_penalizes_pair(self):
        result = self.service.calculate_trust_score(make_user("a", 0.2), make_user("b", 1.0))

        assert result.score == pytest.approx(0.6 * 0.7)

    def test_thresholds_are_strict(self):
        """Exactly 0.3 is not penalized and exactly 0.8 is not boosted."""
        low = self.service.calculate_trust_score(make_user("a", 0.3), make_user("b", 0.3))
        high = self.service.calculate_trust_score(make_user("a", 0.8), make_user("b", 0.8))

        assert low.score == pytest.approx(0.3)
        assert high.score == pytest.approx(0.8)

    def test_raw_ratings_are_clamped(self):
        """Out-of-range ratings are clamped before use."""
        result = self.service.calculate_trust_score(make_user("a", 5.0), make_user("b", -2.0))

        assert result.factors.user_a_trust == 1.0
        assert result.factors.user_b_trust == 0.0
        assert result.score == pytest.approx(0.5 * 0.7)

    def test_normalize_trust_score(self):
        assert normalize_trust_score(1.5) == 1.0
        assert normalize_trust_score(-0.1) == 0.0
        assert normalize_trust_score(0.42) == 0.42

    def test_meets_trust_threshold(self):
        assert self.service.meets_trust_threshold(make_user("a", 0.5), make_user("b", 0.5))
        assert not self.service.meets_trust_threshold(make_user("a", 0.1), make_user("b", 0.1))
        assert self.service.meets_trust_threshold(make_user("a", 0.1), make_user("b", 0.1), min_trust=0.05)

    def test_non_finite_rating_counts_as_untrusted(self):
        """A corrupt NaN or infinite rating is never treated as full trust."""
        assert normalize_trust_score(float("nan")) == 0.0
        assert normalize_trust_score(float("inf")) == 0.0

        result = self.service.calculate_trust_score(make_user("a", float("nan")), make_user("b", 0.9))

        assert result.factors.user_a_trust == 0.0
        assert result.score == pytest.approx(0.45 * 0.7)
