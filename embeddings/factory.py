"""Embedding provider factory."""

from enum import Enum
from typing import Optional

from .base_provider import BaseEmbeddingProvider


class EmbeddingBackend(str, Enum):
    """Supported embedding backends."""
    SENTENCE_TRANSFORMERS = "sentence_transformers"
    OPENAI = "openai"
    HASHING = "hashing"


def create_embedding_provider(
    backend: EmbeddingBackend,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    dimensions: int = 384
) -> BaseEmbeddingProvider:
    """
    Create an embedding provider for the specified backend.

    Backend modules are imported on demand so that the hashing backend
    does not pull in torch or the OpenAI client.

    Args:
        backend: Embedding backend
        api_key: API key for the backend (openai only)
        model: Optional model override
        dimensions: Vector size (hashing only)

    Returns:
        Configured, not yet initialized provider

    Raises:
        ValueError: If backend is not supported
    """
    backend = EmbeddingBackend(backend)

    if backend == EmbeddingBackend.SENTENCE_TRANSFORMERS:
        from .sentence_transformer_provider import SentenceTransformerProvider
        return SentenceTransformerProvider(model=model)
    elif backend == EmbeddingBackend.OPENAI:
        from .openai_provider import OpenAIEmbeddingProvider
        return OpenAIEmbeddingProvider(api_key=api_key, model=model)
    elif backend == EmbeddingBackend.HASHING:
        from .hashing_provider import HashingEmbeddingProvider
        return HashingEmbeddingProvider(dimensions=dimensions)
    else:
        raise ValueError(f"Unsupported embedding backend: {backend}")
