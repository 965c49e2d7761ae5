"""Pydantic schemas for the skill exchange matching engine."""

from .profile import Skill, SkillLevel, UserProfile
from .matching import (
    DEFAULT_WEIGHTS,
    BestMatch,
    LanguageSimilarityResult,
    MatchingConfig,
    MatchingResponse,
    MatchingWeights,
    MatchResult,
    MatchScore,
    SemanticSimilarityResult,
    TrustFactors,
    TrustScoreResult,
)

__all__ = [
    "Skill",
    "SkillLevel",
    "UserProfile",
    "DEFAULT_WEIGHTS",
    "BestMatch",
    "LanguageSimilarityResult",
    "MatchingConfig",
    "MatchingResponse",
    "MatchingWeights",
    "MatchResult",
    "MatchScore",
    "SemanticSimilarityResult",
    "TrustFactors",
    "TrustScoreResult",
]
