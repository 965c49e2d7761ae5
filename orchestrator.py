"""Matching service: wires settings, embeddings, scoring components and the profile store."""

import logging
from datetime import datetime
from typing import Optional, Dict, Any

from config.settings import Settings

# Embeddings
from embeddings.base_provider import BaseEmbeddingProvider
from embeddings.factory import create_embedding_provider, EmbeddingBackend

# Scoring components
from scoring.semantic import SemanticSimilarityService
from scoring.language import LanguageService
from scoring.trust import TrustService

# Engine
from core.matching_engine import MatchingEngine
from core.exceptions import UserNotFoundError

# Profile store
from repository.user_repository import UserRepository
from repository.sqlite_store import SQLiteUserRepository

from schemas.matching import MatchingConfig, MatchingResponse, MatchingWeights, MatchScore

logger = logging.getLogger(__name__)


class MatchingService:
    """Entry point for finding and scoring matches between stored users."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        repository: Optional[UserRepository] = None,
        provider: Optional[BaseEmbeddingProvider] = None
    ):
        """
        Initialize matching service.

        Args:
            settings: Application settings
            repository: Profile store (default: SQLite at settings.db_path)
            provider: Embedding provider (default: built from settings.embedding_backend)
        """
        self.settings = settings or Settings()

        self.repository = repository or SQLiteUserRepository(db_path=self.settings.db_path)
        logger.info(f"Using profile store: {type(self.repository).__name__}")

        self.provider = provider or create_embedding_provider(
            backend=EmbeddingBackend(self.settings.embedding_backend),
            api_key=self.settings.openai_api_key,
            model=self.settings.embedding_model,
            dimensions=self.settings.hashing_dimensions,
        )

        self.semantic_service = SemanticSimilarityService(
            provider=self.provider,
            cache_size=self.settings.embedding_cache_size
        )
        self.engine = MatchingEngine(
            semantic_service=self.semantic_service,
            language_service=LanguageService(),
            trust_service=TrustService(),
            max_workers=self.settings.max_workers,
            timeout=self.settings.match_timeout_seconds,
        )

    def initialize(self) -> bool:
        """
        Warm up the embedding provider once at startup.

        Returns:
            True if embeddings are available. On False the service keeps
            running on the lexical fallback.
        """
        logger.info("Initializing matching service...")
        ready = self.semantic_service.initialize()
        if ready:
            logger.info("Matching service initialized successfully")
        return ready

    def _get_user(self, user_id: str):
        user = self.repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def find_matches(
        self,
        user_id: str,
        config: Optional[MatchingConfig] = None
    ) -> MatchingResponse:
        """
        Find matches for a stored user among all other stored users.

        Args:
            user_id: Query user ID
            config: Matching config (default: built from settings)

        Returns:
            MatchingResponse

        Raises:
            ValueError: If user_id is empty
            UserNotFoundError: If the user does not exist
        """
        if not user_id:
            raise ValueError("userId is required")

        user = self._get_user(user_id)
        candidates = self.repository.get_all_except(user_id)

        if not candidates:
            logger.info(f"No candidates available for matching user {user_id}")
            return MatchingResponse(matches=[], total_candidates=0, processing_time_ms=0.0)

        matching_config = config or self.settings.build_matching_config()
        return self.engine.find_matches(user, candidates, matching_config)

    def score_users(
        self,
        user_id_a: str,
        user_id_b: str,
        weights: Optional[MatchingWeights] = None
    ) -> MatchScore:
        """
        Calculate match score between two stored users.

        Raises:
            ValueError: If either ID is empty
            UserNotFoundError: If either user does not exist
        """
        if not user_id_a or not user_id_b:
            raise ValueError("Both userIdA and userIdB are required")

        user_a = self._get_user(user_id_a)
        user_b = self._get_user(user_id_b)

        return self.engine.calculate_match_score(user_a, user_b, weights)

    def health(self) -> Dict[str, Any]:
        """Health check payload."""
        return {
            "status": "healthy",
            "service": "matching-engine",
            "embedding_provider": self.provider.get_provider_name(),
            "embedding_model": self.provider.get_model_name(),
            "provider_ready": self.provider.is_ready(),
            "timestamp": datetime.now().isoformat(),
        }
