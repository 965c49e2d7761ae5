"""Semantic similarity between skills using embeddings, with a lexical fallback."""

import logging
import threading
from collections import OrderedDict
from typing import Optional

import numpy as np

from core.exceptions import DimensionMismatchError, ProviderUnavailableError
from embeddings.base_provider import BaseEmbeddingProvider
from schemas.matching import BestMatch, SemanticSimilarityResult
from schemas.profile import Skill

logger = logging.getLogger(__name__)


def cosine_similarity(vec_a: np.ndarray, vec_b: np.ndarray) -> float:
    """
    Cosine similarity of two vectors, in [-1, 1].

    Returns 0 when either vector has zero norm.

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    vec_a = np.asarray(vec_a, dtype=float).ravel()
    vec_b = np.asarray(vec_b, dtype=float).ravel()
    if vec_a.shape[0] != vec_b.shape[0]:
        raise DimensionMismatchError(vec_a.shape[0], vec_b.shape[0])

    denominator = np.linalg.norm(vec_a) * np.linalg.norm(vec_b)
    if denominator == 0:
        return 0.0

    return float(np.dot(vec_a, vec_b) / denominator)


def skill_to_text(skill: Skill) -> str:
    """Text representation of a skill for embedding."""
    parts = [skill.name]

    if skill.description:
        parts.append(skill.description)

    if skill.category:
        parts.append(skill.category)

    level = skill.level.value if hasattr(skill.level, "value") else str(skill.level)
    parts.append(level)

    return " ".join(parts).lower()


def lexical_similarity(skill_a: Skill, skill_b: Skill) -> float:
    """Name-based similarity used when embeddings are unavailable. Never raises."""
    name_a = (skill_a.name or "").lower()
    name_b = (skill_b.name or "").lower()

    if name_a == name_b:
        return 1.0

    if name_a in name_b or name_b in name_a:
        return 0.7

    words_a = name_a.split()
    words_b = name_b.split()
    common_words = [word for word in words_a if word in words_b]

    if common_words:
        return len(common_words) / max(len(words_a), len(words_b)) * 0.5

    return 0.0


class SemanticSimilarityService:
    """
    Scores how close two skills are.

    Uses cosine similarity of embeddings from the injected provider. When the
    provider is missing or fails, falls back to lexical name matching.
    Successful embeddings are memoized per text in a bounded LRU cache.
    """

    def __init__(
        self,
        provider: Optional[BaseEmbeddingProvider] = None,
        cache_size: int = 4096
    ):
        """
        Initialize semantic similarity service.

        Args:
            provider: Embedding provider. If None, only the lexical fallback is used.
            cache_size: Maximum number of memoized embeddings (0 disables the cache)
        """
        self.provider = provider
        self.cache_size = cache_size
        self._cache: "OrderedDict[str, np.ndarray]" = OrderedDict()
        self._cache_lock = threading.Lock()
        self._fallback_logged = False

    def _get_embedding(self, text: str) -> np.ndarray:
        """Embed text through the cache. Raises ProviderUnavailableError."""
        if self.provider is None:
            raise ProviderUnavailableError("No embedding provider configured")

        with self._cache_lock:
            cached = self._cache.get(text)
            if cached is not None:
                self._cache.move_to_end(text)
                return cached

        vector = self.provider.embed(text)

        if self.cache_size > 0:
            with self._cache_lock:
                self._cache[text] = vector
                self._cache.move_to_end(text)
                while len(self._cache) > self.cache_size:
                    self._cache.popitem(last=False)

        return vector

    def initialize(self) -> bool:
        """
        Initialize the embedding provider ahead of scoring.

        Returns:
            True if embeddings are available, False if scoring will use the
            lexical fallback
        """
        if self.provider is None:
            return False

        try:
            self.provider.initialize()
        except ProviderUnavailableError as e:
            logger.warning(f"Embedding provider unavailable, using lexical fallback: {e}")
            self._fallback_logged = True
            return False

        return True

    def calculate_skill_similarity(self, skill_a: Skill, skill_b: Skill) -> SemanticSimilarityResult:
        """
        Calculate semantic similarity between two skills.

        Args:
            skill_a: First skill
            skill_b: Second skill

        Returns:
            SemanticSimilarityResult with a score in [0, 1]

        Raises:
            DimensionMismatchError: If the provider returned vectors of different length
        """
        text_a = skill_to_text(skill_a)
        text_b = skill_to_text(skill_b)

        try:
            embedding_a = self._get_embedding(text_a)
            embedding_b = self._get_embedding(text_b)
        except ProviderUnavailableError as e:
            if not self._fallback_logged:
                logger.warning(f"Embeddings unavailable, using lexical fallback: {e}")
                self._fallback_logged = True
            else:
                logger.debug(f"Lexical fallback for \"{skill_a.name}\" / \"{skill_b.name}\": {e}")
            return SemanticSimilarityResult(
                score=lexical_similarity(skill_a, skill_b),
                method="fallback",
                explanation=f"Name match between \"{skill_a.name}\" and \"{skill_b.name}\""
            )

        similarity = cosine_similarity(embedding_a, embedding_b)

        # Map cosine range [-1, 1] onto [0, 1]
        normalized_score = min(1.0, max(0.0, (similarity + 1) / 2))

        return SemanticSimilarityResult(
            score=normalized_score,
            method="embedding",
            explanation=f"Semantic similarity between \"{skill_a.name}\" and \"{skill_b.name}\""
        )

    def calculate_similarity(self, skill_a: Skill, skill_b: Skill) -> float:
        """Similarity score only."""
        return self.calculate_skill_similarity(skill_a, skill_b).score

    def find_best_match(self, target_skill: Skill, candidate_skills: list[Skill]) -> Optional[BestMatch]:
        """
        Find the candidate skill closest to the target.

        Args:
            target_skill: Skill to match
            candidate_skills: Skills to search; order decides ties

        Returns:
            BestMatch with the strictly highest score (first seen wins ties),
            or None if there are no candidates
        """
        best_match: Optional[BestMatch] = None

        for candidate in candidate_skills:
            score = self.calculate_similarity(target_skill, candidate)
            if best_match is None or score > best_match.similarity:
                best_match = BestMatch(skill=candidate, similarity=score)

        return best_match

    def clear_cache(self):
        """Drop all memoized embeddings."""
        with self._cache_lock:
            self._cache.clear()
