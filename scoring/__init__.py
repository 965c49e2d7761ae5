"""Sub-score components: semantic, language and trust."""

from .semantic import SemanticSimilarityService
from .language import LanguageService
from .trust import TrustService

__all__ = ["SemanticSimilarityService", "LanguageService", "TrustService"]
