"""Application settings."""

import os
from typing import Optional
from pydantic import BaseModel

from schemas.matching import MatchingConfig, MatchingWeights


class Settings(BaseModel):
    """Application configuration settings."""

    # Embedding provider settings
    embedding_backend: str = "sentence_transformers"  # "sentence_transformers", "openai" or "hashing"
    embedding_model: Optional[str] = None  # Override default model of the backend
    hashing_dimensions: int = 384
    embedding_cache_size: int = 4096

    # API Keys
    openai_api_key: Optional[str] = None

    # Profile store
    db_path: str = "data/users.db"

    # Ranking settings
    max_workers: int = 8
    match_timeout_seconds: float = 30.0
    default_min_match_score: float = 0.3
    default_max_results: int = 50

    # Logging
    verbose: bool = False

    def __init__(self, **data):
        # Auto-load from environment if not provided
        if data.get("openai_api_key") is None:
            data["openai_api_key"] = os.environ.get("OPENAI_API_KEY")

        if data.get("embedding_backend") is None:
            data["embedding_backend"] = os.environ.get(
                "MATCHING_EMBEDDING_BACKEND", "sentence_transformers"
            )

        if data.get("db_path") is None:
            data["db_path"] = os.environ.get("MATCHING_DB_PATH", "data/users.db")

        super().__init__(**data)

    def build_matching_config(
        self,
        weights: Optional[MatchingWeights] = None,
        min_match_score: Optional[float] = None,
        max_results: Optional[int] = None,
        enable_bidirectional_matching: bool = False
    ) -> MatchingConfig:
        """Build a per-request matching config, filling gaps with the settings' defaults."""
        return MatchingConfig(
            weights=weights or MatchingWeights(),
            min_match_score=(
                self.default_min_match_score if min_match_score is None else min_match_score
            ),
            max_results=self.default_max_results if max_results is None else max_results,
            enable_bidirectional_matching=enable_bidirectional_matching,
        )
