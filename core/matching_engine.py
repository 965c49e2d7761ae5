"""
Core matching engine.

Implements the hybrid formula-based matching algorithm:

    total = w1 * semantic(A's offers -> B's wants)
          + w2 * semantic(B's offers -> A's wants)
          + w3 * language similarity
          + w4 * trust score

clamped to [0, 1]. Candidates are scored concurrently, then filtered by a
minimum score, sorted (stable, descending) and truncated.
"""

import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Optional, Union

from schemas.matching import (
    MatchingConfig,
    MatchingResponse,
    MatchingWeights,
    MatchResult,
    MatchScore,
)
from schemas.profile import Skill, SkillLevel, UserProfile
from scoring.language import LanguageService
from scoring.semantic import SemanticSimilarityService
from scoring.trust import TrustService
from .exceptions import DimensionMismatchError, InvalidWeightError, RankingTimeoutError

logger = logging.getLogger(__name__)

LEVEL_WEIGHTS = {
    SkillLevel.BEGINNER: 0.5,
    SkillLevel.INTERMEDIATE: 0.75,
    SkillLevel.ADVANCED: 0.9,
    SkillLevel.EXPERT: 1.0,
}
DEFAULT_LEVEL_WEIGHT = 0.5

# Share of the directional score taken from the average vs. the single best match
AVERAGE_SHARE = 0.7
MAX_SHARE = 0.3


def get_level_weight(level: Union[SkillLevel, str]) -> float:
    """Weight multiplier for an offer's proficiency (higher level = more valuable)."""
    try:
        return LEVEL_WEIGHTS[SkillLevel(level)]
    except ValueError:
        return DEFAULT_LEVEL_WEIGHT


def validate_weights(weights: MatchingWeights):
    """Reject negative or non-finite weights."""
    for name, value in zip(("w1", "w2", "w3", "w4"), weights.as_tuple()):
        if not math.isfinite(value) or value < 0:
            raise InvalidWeightError(f"Weight {name} must be a finite non-negative number, got {value}")


def validate_config(config: MatchingConfig):
    """Reject a matching config before any scoring begins."""
    validate_weights(config.weights)
    if config.max_results < 0:
        raise InvalidWeightError(f"max_results must be non-negative, got {config.max_results}")
    if not math.isfinite(config.min_match_score):
        raise InvalidWeightError(f"min_match_score must be finite, got {config.min_match_score}")


def _remaining(deadline: Optional[float]) -> Optional[float]:
    if deadline is None:
        return None
    return max(0.0, deadline - time.perf_counter())


class MatchingEngine:
    """Scores user pairs and ranks candidates for a query user."""

    def __init__(
        self,
        semantic_service: SemanticSimilarityService,
        language_service: Optional[LanguageService] = None,
        trust_service: Optional[TrustService] = None,
        max_workers: int = 8,
        timeout: Optional[float] = None
    ):
        """
        Initialize matching engine.

        Args:
            semantic_service: Skill similarity component
            language_service: Language component (default: LanguageService())
            trust_service: Trust component (default: TrustService())
            max_workers: Upper bound on candidates scored concurrently
            timeout: Default deadline in seconds for find_matches (None = no deadline)
        """
        self.semantic_service = semantic_service
        self.language_service = language_service or LanguageService()
        self.trust_service = trust_service or TrustService()
        self.max_workers = max(1, max_workers)
        self.timeout = timeout

    def semantic_directional(self, source_offers: list[Skill], target_wants: list[Skill]) -> float:
        """
        One-way semantic score of a user's offers against another user's wants.

        Each offer is paired with its best matching want and weighted by the
        offer's level. The result blends the average of these values with the
        best one.

        Returns:
            Score in [0, 1]; 0 if either list is empty
        """
        if not source_offers or not target_wants:
            return 0.0

        scores = []
        for offer in source_offers:
            best_match = self.semantic_service.find_best_match(offer, target_wants)
            if best_match is not None:
                scores.append(best_match.similarity * get_level_weight(offer.level))

        if not scores:
            return 0.0

        average = sum(scores) / len(scores)
        return AVERAGE_SHARE * average + MAX_SHARE * max(scores)

    def calculate_semantic_score_a_to_b(self, user_a: UserProfile, user_b: UserProfile) -> float:
        """Semantic similarity of A's offers to B's wants."""
        return self.semantic_directional(user_a.offers, user_b.wants)

    def calculate_semantic_score_b_to_a(self, user_a: UserProfile, user_b: UserProfile) -> float:
        """Semantic similarity of B's offers to A's wants (the reverse direction)."""
        return self.calculate_semantic_score_a_to_b(user_b, user_a)

    def _combine(
        self,
        user_a: UserProfile,
        user_b: UserProfile,
        semantic_a_to_b: float,
        semantic_b_to_a: float,
        weights: MatchingWeights
    ) -> MatchScore:
        language_result = self.language_service.calculate_language_similarity(user_a, user_b)
        trust_result = self.trust_service.calculate_trust_score(user_a, user_b)

        total_score = (
            weights.w1 * semantic_a_to_b
            + weights.w2 * semantic_b_to_a
            + weights.w3 * language_result.score
            + weights.w4 * trust_result.score
        )

        return MatchScore(
            total_score=max(0.0, min(1.0, total_score)),
            semantic_score_a_to_b=semantic_a_to_b,
            semantic_score_b_to_a=semantic_b_to_a,
            language_score=language_result.score,
            trust_score=trust_result.score,
            breakdown=weights,
        )

    def calculate_match_score(
        self,
        user_a: UserProfile,
        user_b: UserProfile,
        weights: Optional[MatchingWeights] = None
    ) -> MatchScore:
        """
        Calculate the composite match score of two users.

        Args:
            user_a: First user
            user_b: Second user
            weights: Sub-score weights (default: 0.35, 0.35, 0.15, 0.15)

        Returns:
            MatchScore with total and sub-scores

        Raises:
            InvalidWeightError: If a weight is negative
            DimensionMismatchError: If the provider returned inconsistent vectors
        """
        weights = weights or MatchingWeights()
        validate_weights(weights)

        semantic_a_to_b = self.calculate_semantic_score_a_to_b(user_a, user_b)
        semantic_b_to_a = self.calculate_semantic_score_b_to_a(user_a, user_b)

        return self._combine(user_a, user_b, semantic_a_to_b, semantic_b_to_a, weights)

    score = calculate_match_score

    def _score_candidate(
        self,
        user: UserProfile,
        candidate: UserProfile,
        weights: MatchingWeights
    ) -> tuple[MatchScore, list[str]]:
        """Score one candidate, isolating dimension mismatches per direction."""
        diagnostics = []

        try:
            semantic_a_to_b = self.calculate_semantic_score_a_to_b(user, candidate)
        except DimensionMismatchError as e:
            logger.error(f"Candidate {candidate.id}: forward direction unscored: {e}")
            diagnostics.append(f"{candidate.id}: forward direction unscored: {e}")
            semantic_a_to_b = 0.0

        try:
            semantic_b_to_a = self.calculate_semantic_score_b_to_a(user, candidate)
        except DimensionMismatchError as e:
            logger.error(f"Candidate {candidate.id}: reverse direction unscored: {e}")
            diagnostics.append(f"{candidate.id}: reverse direction unscored: {e}")
            semantic_b_to_a = 0.0

        return self._combine(user, candidate, semantic_a_to_b, semantic_b_to_a, weights), diagnostics

    def _passes(self, match_score: MatchScore, config: MatchingConfig) -> bool:
        if match_score.total_score < config.min_match_score:
            return False
        if config.enable_bidirectional_matching:
            return (
                match_score.semantic_score_a_to_b >= config.min_match_score
                and match_score.semantic_score_b_to_a >= config.min_match_score
            )
        return True

    def find_matches(
        self,
        user: UserProfile,
        candidates: list[UserProfile],
        config: Optional[MatchingConfig] = None,
        timeout: Optional[float] = None
    ) -> MatchingResponse:
        """
        Rank candidates for a user.

        Args:
            user: Query user
            candidates: Candidate users; their order breaks score ties
            config: Weights, threshold, result cap and bidirectional gate
            timeout: Deadline in seconds, overriding the engine default

        Returns:
            MatchingResponse sorted by total score, highest first

        Raises:
            InvalidWeightError: If the config is rejected (before any scoring)
            RankingTimeoutError: If the deadline passes; carries the partial response
        """
        start_time = time.perf_counter()
        config = config or MatchingConfig()
        validate_config(config)
        timeout = self.timeout if timeout is None else timeout

        # Skip self
        pool = [candidate for candidate in candidates if candidate.id != user.id]
        if not pool:
            return MatchingResponse(
                total_candidates=0,
                processing_time_ms=(time.perf_counter() - start_time) * 1000,
            )

        deadline = None if timeout is None else start_time + timeout

        scores: list[Optional[MatchScore]] = [None] * len(pool)
        diagnostics: list[list[str]] = [[] for _ in pool]
        futures = {}
        done, not_done = set(), set()

        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(pool)),
            thread_name_prefix="matching"
        )
        try:
            # Provider warm-up counts against the deadline
            warm_up = executor.submit(self.semantic_service.initialize)
            _, not_done = wait([warm_up], timeout=_remaining(deadline))
            if not not_done:
                warm_up.result()
                futures = {
                    executor.submit(self._score_candidate, user, candidate, config.weights): index
                    for index, candidate in enumerate(pool)
                }
                done, not_done = wait(futures, timeout=_remaining(deadline))
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        for future in done:
            index = futures[future]
            try:
                scores[index], diagnostics[index] = future.result()
            except Exception as e:
                logger.error(f"Failed to score candidate {pool[index].id}: {e}")
                diagnostics[index] = [f"{pool[index].id}: {e}"]

        # Indexed by candidate position, so completion order never leaks into the result
        matches = [
            MatchResult(user_a=user, user_b=pool[index], match_score=match_score)
            for index, match_score in enumerate(scores)
            if match_score is not None and self._passes(match_score, config)
        ]
        matches.sort(key=lambda match: match.match_score.total_score, reverse=True)
        limited_matches = matches[:config.max_results]

        processing_time = (time.perf_counter() - start_time) * 1000
        response = MatchingResponse(
            matches=limited_matches,
            total_candidates=len(pool),
            processing_time_ms=processing_time,
            timed_out=bool(not_done),
            errors=[message for messages in diagnostics for message in messages],
        )

        if not_done:
            logger.warning(
                f"Ranking timed out after {timeout}s with {len(pool) - len(done)}/{len(pool)} candidates unscored"
            )
            raise RankingTimeoutError(timeout, partial=response)

        logger.info(f"Found {len(limited_matches)} matches in {processing_time:.0f}ms")
        return response

    rank = find_matches

    def validate_bidirectional_match(
        self,
        user_a: UserProfile,
        user_b: UserProfile,
        min_score: float = 0.3
    ) -> bool:
        """Check that both directional semantic scores reach min_score."""
        score_a_to_b = self.calculate_semantic_score_a_to_b(user_a, user_b)
        score_b_to_a = self.calculate_semantic_score_b_to_a(user_a, user_b)

        return score_a_to_b >= min_score and score_b_to_a >= min_score
