"""Language compatibility between two users."""

from typing import Optional

from schemas.matching import LanguageSimilarityResult
from schemas.profile import UserProfile


def normalize_language(language: str) -> str:
    """Normalize a declared language code for comparison."""
    return language.strip().lower()


class LanguageService:
    """Scores how well two users can communicate based on shared languages."""

    def calculate_language_similarity(
        self,
        user_a: UserProfile,
        user_b: UserProfile
    ) -> LanguageSimilarityResult:
        """
        Calculate language similarity between two users.

        A shared language gives a base of 0.5, plus half the ratio of common
        to distinct languages. Sharing the primary (first declared) language
        adds 0.2. The score is capped at 1.0.

        Args:
            user_a: First user
            user_b: Second user

        Returns:
            LanguageSimilarityResult with score, common languages and the
            number of distinct languages across both users
        """
        # dict.fromkeys keeps declaration order while deduplicating
        languages_a = list(dict.fromkeys(normalize_language(lang) for lang in user_a.languages))
        languages_b = set(normalize_language(lang) for lang in user_b.languages)

        common_languages = [lang for lang in languages_a if lang in languages_b]
        total_languages = len(set(languages_a) | languages_b)

        score = 0.0
        if common_languages:
            score = 0.5 + (len(common_languages) / total_languages) * 0.5
            score = min(1.0, score)

        # Uses the same normalization as the common set, so a primary match
        # always implies common_languages is non-empty.
        primary_a = self.get_primary_language(user_a)
        primary_b = self.get_primary_language(user_b)
        if primary_a is not None and primary_b is not None:
            if normalize_language(primary_a) == normalize_language(primary_b):
                score = min(1.0, score + 0.2)

        return LanguageSimilarityResult(
            score=score,
            common_languages=common_languages,
            total_languages=total_languages,
        )

    def can_communicate(self, user_a: UserProfile, user_b: UserProfile) -> bool:
        """Check if two users share at least one language."""
        return len(self.calculate_language_similarity(user_a, user_b).common_languages) > 0

    def get_primary_language(self, user: UserProfile) -> Optional[str]:
        """Get the first declared language of a user."""
        return user.languages[0] if user.languages else None
