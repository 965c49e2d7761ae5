"""OpenAI embedding provider implementation."""

import os
import logging
from typing import Optional

import numpy as np
from openai import OpenAI

from core.exceptions import ProviderUnavailableError
from .base_provider import BaseEmbeddingProvider

logger = logging.getLogger(__name__)


class OpenAIEmbeddingProvider(BaseEmbeddingProvider):
    """OpenAI embeddings API provider."""

    DEFAULT_MODEL = "text-embedding-3-small"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: float = 10.0
    ):
        """
        Initialize OpenAI embedding provider.

        Args:
            api_key: OpenAI API key (falls back to OPENAI_API_KEY env var)
            model: Model to use (default: text-embedding-3-small)
            timeout: Request timeout in seconds
        """
        super().__init__()
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.model = model or self.DEFAULT_MODEL
        self.timeout = timeout
        self.client: Optional[OpenAI] = None

    def _load(self) -> None:
        if not self.api_key:
            logger.warning("No OpenAI API key provided. Embeddings will be disabled.")
            raise ProviderUnavailableError("OpenAI client not initialized. Check API key.")
        self.client = OpenAI(api_key=self.api_key, timeout=self.timeout)

    def _embed(self, text: str) -> np.ndarray:
        try:
            response = self.client.embeddings.create(model=self.model, input=text)
        except Exception as e:
            logger.error(f"Error embedding text: {e}")
            raise
        return np.array(response.data[0].embedding)

    def get_provider_name(self) -> str:
        """Get the provider name."""
        return "openai"

    def get_model_name(self) -> str:
        """Get the model name."""
        return self.model
