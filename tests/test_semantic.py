"""Tests for SemanticSimilarityService."""

import numpy as np
import pytest

from core.exceptions import DimensionMismatchError, ProviderUnavailableError
from embeddings.base_provider import BaseEmbeddingProvider
from embeddings.hashing_provider import HashingEmbeddingProvider
from schemas.profile import Skill, SkillLevel
from scoring.semantic import (
    SemanticSimilarityService,
    cosine_similarity,
    lexical_similarity,
    skill_to_text,
)


class VectorTableProvider(BaseEmbeddingProvider):
    """Returns fixed vectors per text and counts embed calls."""

    def __init__(self, table: dict, default=None):
        super().__init__()
        self.table = table
        self.default = default
        self.calls = []

    def _load(self):
        pass

    def _embed(self, text):
        self.calls.append(text)
        if text in self.table:
            return self.table[text]
        return self.default

    def get_provider_name(self):
        return "table"

    def get_model_name(self):
        return "table"


class FailingProvider(BaseEmbeddingProvider):
    """Provider whose model never loads."""

    def _load(self):
        raise RuntimeError("model download failed")

    def _embed(self, text):
        raise AssertionError("should never be called")

    def get_provider_name(self):
        return "failing"

    def get_model_name(self):
        return "failing"


class RateLimitedProvider(BaseEmbeddingProvider):
    """Provider that loads but rejects every request."""

    def _load(self):
        pass

    def _embed(self, text):
        raise RuntimeError("rate limited")

    def get_provider_name(self):
        return "rate_limited"

    def get_model_name(self):
        return "rate_limited"


class TestCosineSimilarity:
    """Test cosine similarity helper."""

    def test_identical_vectors(self):
        """Identical vectors have similarity 1."""
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_opposite_vectors(self):
        """Opposite vectors have similarity -1."""
        assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)

    def test_orthogonal_vectors(self):
        """Orthogonal vectors have similarity 0."""
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_zero_norm_returns_zero(self):
        """A zero vector never divides by zero."""
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0
        assert cosine_similarity([0.0, 0.0], [0.0, 0.0]) == 0.0

    def test_dimension_mismatch_raises(self):
        """Vectors of different length are a fatal input error."""
        with pytest.raises(DimensionMismatchError):
            cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])


class TestSkillText:
    """Test text representation of skills."""

    def test_full_skill(self):
        """Name, description, category and level are joined and lower-cased."""
        skill = Skill(
            name="Python",
            description="Data Analysis",
            category="Programming",
            level=SkillLevel.ADVANCED,
        )
        assert skill_to_text(skill) == "python data analysis programming advanced"

    def test_name_and_level_only(self):
        """Missing optional fields are skipped."""
        skill = Skill(name="Guitar", level=SkillLevel.BEGINNER)
        assert skill_to_text(skill) == "guitar beginner"


class TestLexicalSimilarity:
    """Test the lexical fallback heuristic."""

    def test_exact_match_case_insensitive(self):
        assert lexical_similarity(Skill(name="JavaScript"), Skill(name="javascript")) == 1.0

    def test_substring_match(self):
        assert lexical_similarity(Skill(name="Java"), Skill(name="JavaScript")) == 0.7
        assert lexical_similarity(Skill(name="JavaScript"), Skill(name="Java")) == 0.7

    def test_common_words(self):
        """Shared words score their share of the longer name, halved."""
        score = lexical_similarity(Skill(name="machine learning"), Skill(name="deep learning basics"))
        assert score == pytest.approx(1 / 3 * 0.5)

    def test_no_overlap(self):
        assert lexical_similarity(Skill(name="Guitar"), Skill(name="Spanish")) == 0.0


class TestSemanticSimilarityService:
    """Test semantic similarity with embeddings and fallback."""

    def setup_method(self):
        """Set up test fixtures."""
        self.python = Skill(name="Python", level=SkillLevel.EXPERT)
        self.python_text = skill_to_text(self.python)

    def test_no_provider_uses_fallback(self):
        """Without a provider every comparison uses the lexical fallback."""
        service = SemanticSimilarityService(provider=None)
        result = service.calculate_skill_similarity(self.python, Skill(name="python"))

        assert result.score == 1.0
        assert result.method == "fallback"
        assert service.initialize() is False

    def test_failing_provider_uses_fallback(self):
        """A provider that cannot load degrades to the fallback, never raises."""
        service = SemanticSimilarityService(provider=FailingProvider())

        assert service.initialize() is False
        result = service.calculate_skill_similarity(Skill(name="Java"), Skill(name="JavaScript"))
        assert result.score == 0.7
        assert result.method == "fallback"

    def test_embedding_identical_text(self):
        """Identical skills embed identically and score 1."""
        service = SemanticSimilarityService(provider=HashingEmbeddingProvider(dimensions=64))
        result = service.calculate_skill_similarity(self.python, self.python)

        assert result.method == "embedding"
        assert result.score == pytest.approx(1.0)

    def test_cosine_mapped_to_unit_interval(self):
        """Cosine -1, 0 and 1 map to 0, 0.5 and 1."""
        guitar = Skill(name="Guitar", level=SkillLevel.EXPERT)
        drums = Skill(name="Drums", level=SkillLevel.EXPERT)
        provider = VectorTableProvider({
            self.python_text: np.array([1.0, 0.0]),
            skill_to_text(guitar): np.array([-1.0, 0.0]),
            skill_to_text(drums): np.array([0.0, 1.0]),
        })
        service = SemanticSimilarityService(provider=provider)

        assert service.calculate_similarity(self.python, self.python) == pytest.approx(1.0)
        assert service.calculate_similarity(self.python, guitar) == pytest.approx(0.0)
        assert service.calculate_similarity(self.python, drums) == pytest.approx(0.5)

    def test_dimension_mismatch_propagates(self):
        """Inconsistent vector lengths are not hidden by the fallback."""
        other = Skill(name="Other", level=SkillLevel.EXPERT)
        provider = VectorTableProvider({
            self.python_text: np.array([1.0, 0.0]),
            skill_to_text(other): np.array([1.0, 0.0, 0.0]),
        })
        service = SemanticSimilarityService(provider=provider)

        with pytest.raises(DimensionMismatchError):
            service.calculate_skill_similarity(self.python, other)

    def test_embeddings_are_cached(self):
        """Each distinct text is embedded once."""
        provider = VectorTableProvider({}, default=np.array([1.0, 1.0]))
        service = SemanticSimilarityService(provider=provider)

        for _ in range(3):
            service.calculate_similarity(self.python, self.python)

        assert provider.calls == [self.python_text]

    def test_cache_is_bounded(self):
        """The oldest entries are evicted beyond cache_size."""
        provider = VectorTableProvider({}, default=np.array([1.0, 1.0]))
        service = SemanticSimilarityService(provider=provider, cache_size=1)

        a = Skill(name="A")
        b = Skill(name="B")
        service.calculate_similarity(a, b)
        service.calculate_similarity(a, b)

        # Cache of one entry cannot hold both texts, so they keep being re-embedded
        assert len(provider.calls) == 4

    def test_embed_failure_after_init_uses_fallback(self):
        """A provider error on an individual request degrades to the fallback."""
        service = SemanticSimilarityService(provider=RateLimitedProvider())

        result = service.calculate_skill_similarity(Skill(name="Guitar"), Skill(name="guitar"))
        assert result.method == "fallback"
        assert result.score == 1.0

    def test_find_best_match_empty(self):
        """No candidates gives no match."""
        service = SemanticSimilarityService(provider=None)
        assert service.find_best_match(self.python, []) is None

    def test_find_best_match_highest_score(self):
        """The highest scoring candidate wins."""
        service = SemanticSimilarityService(provider=None)
        candidates = [Skill(name="Guitar"), Skill(name="Python Basics"), Skill(name="python")]

        best = service.find_best_match(self.python, candidates)

        assert best.skill.name == "python"
        assert best.similarity == 1.0

    def test_find_best_match_first_seen_wins_ties(self):
        """On equal scores the earlier candidate is kept."""
        service = SemanticSimilarityService(provider=None)
        first = Skill(name="Python", description="first")
        second = Skill(name="PYTHON", description="second")

        best = service.find_best_match(self.python, [first, second])

        assert best.skill.description == "first"

    def test_provider_unavailable_error_is_runtime_error(self):
        """ProviderUnavailableError can be handled as a RuntimeError."""
        assert issubclass(ProviderUnavailableError, RuntimeError)
