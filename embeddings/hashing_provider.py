"""Deterministic hashing embedding provider for development and testing."""

import hashlib

import numpy as np

from .base_provider import BaseEmbeddingProvider


class HashingEmbeddingProvider(BaseEmbeddingProvider):
    """
    Embeds text by summing one seeded random vector per token.

    The same input always produces the same vector, texts sharing tokens
    point in similar directions, and no model or network is needed.
    An empty text maps to the zero vector.
    """

    def __init__(self, dimensions: int = 384):
        super().__init__()
        self.dimensions = dimensions

    def _load(self) -> None:
        if self.dimensions <= 0:
            raise ValueError(f"dimensions must be positive, got {self.dimensions}")

    def _token_vector(self, token: str) -> np.ndarray:
        digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
        rng = np.random.default_rng(int(digest[:16], 16))
        return rng.standard_normal(self.dimensions)

    def _embed(self, text: str) -> np.ndarray:
        vector = np.zeros(self.dimensions)
        for token in text.lower().split():
            vector += self._token_vector(token)

        norm = np.linalg.norm(vector)
        if norm == 0:
            return vector
        return vector / norm

    def get_provider_name(self) -> str:
        """Get the provider name."""
        return "hashing"

    def get_model_name(self) -> str:
        """Get the model name."""
        return f"sha256-{self.dimensions}d"
