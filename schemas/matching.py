"""Matching request, score and result schemas."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from .profile import Skill, UserProfile


class MatchingWeights(BaseModel):
    """Weights of the four sub-scores. Not normalized."""
    w1: float = Field(0.35, description="Semantic similarity: A's offers to B's wants")
    w2: float = Field(0.35, description="Semantic similarity: B's offers to A's wants")
    w3: float = Field(0.15, description="Language compatibility")
    w4: float = Field(0.15, description="Trust")

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.w1, self.w2, self.w3, self.w4)


DEFAULT_WEIGHTS = MatchingWeights()


class MatchingConfig(BaseModel):
    """Per-request ranking configuration."""
    weights: MatchingWeights = Field(default_factory=MatchingWeights)
    min_match_score: float = Field(0.3, description="Minimum total score to keep a candidate")
    max_results: int = Field(50, description="Maximum number of matches returned")
    enable_bidirectional_matching: bool = Field(
        False,
        description="Also require both directional semantic scores to reach min_match_score"
    )


class SemanticSimilarityResult(BaseModel):
    """Similarity between two skills."""
    score: float = Field(ge=0.0, le=1.0)
    method: str = Field("embedding", description="embedding or fallback")
    explanation: Optional[str] = None


class BestMatch(BaseModel):
    """Best scoring candidate skill for a target skill."""
    skill: Skill
    similarity: float = Field(ge=0.0, le=1.0)


class LanguageSimilarityResult(BaseModel):
    """Language compatibility of two users."""
    score: float = Field(ge=0.0, le=1.0)
    common_languages: list[str] = Field(default_factory=list)
    total_languages: int = 0


class TrustFactors(BaseModel):
    """Inputs behind a combined trust score."""
    user_a_trust: float
    user_b_trust: float
    average_trust: float


class TrustScoreResult(BaseModel):
    """Combined trust of two users."""
    score: float = Field(ge=0.0, le=1.0)
    factors: TrustFactors


class MatchScore(BaseModel):
    """Composite score of one user pair."""
    total_score: float = Field(ge=0.0, le=1.0)
    semantic_score_a_to_b: float
    semantic_score_b_to_a: float
    language_score: float
    trust_score: float
    breakdown: MatchingWeights


class MatchResult(BaseModel):
    """A ranked candidate for a query user."""
    user_a: UserProfile
    user_b: UserProfile
    match_score: MatchScore
    matched_at: datetime = Field(default_factory=datetime.now)


class MatchingResponse(BaseModel):
    """Outcome of one ranking pass."""
    matches: list[MatchResult] = Field(default_factory=list)
    total_candidates: int = 0
    processing_time_ms: float = 0.0
    timed_out: bool = False
    errors: list[str] = Field(default_factory=list, description="Per-candidate diagnostics")
