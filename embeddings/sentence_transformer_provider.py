"""Local sentence-transformers embedding provider."""

from typing import Optional

import numpy as np
from sentence_transformers import SentenceTransformer

from .base_provider import BaseEmbeddingProvider


class SentenceTransformerProvider(BaseEmbeddingProvider):
    """Embeds text with a local sentence-transformers model (no API needed)."""

    DEFAULT_MODEL = "sentence-transformers/all-MiniLM-L6-v2"

    def __init__(self, model: Optional[str] = None, device: Optional[str] = None):
        """
        Initialize sentence-transformers provider.

        Args:
            model: Model name or path (default: all-MiniLM-L6-v2)
            device: Optional torch device, e.g. "cpu" or "cuda"
        """
        super().__init__()
        self.model_name = model or self.DEFAULT_MODEL
        self.device = device
        self.model: Optional[SentenceTransformer] = None

    def _load(self) -> None:
        self.model = SentenceTransformer(self.model_name, device=self.device)

    def _embed(self, text: str) -> np.ndarray:
        # Mean pooling is part of the model pipeline; vectors come back unit length
        return self.model.encode(text, normalize_embeddings=True)

    def get_provider_name(self) -> str:
        """Get the provider name."""
        return "sentence_transformers"

    def get_model_name(self) -> str:
        """Get the model name."""
        return self.model_name
