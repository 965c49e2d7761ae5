"""Embedding provider abstraction layer."""

from .base_provider import BaseEmbeddingProvider
from .hashing_provider import HashingEmbeddingProvider
from .factory import create_embedding_provider, EmbeddingBackend

__all__ = [
    "BaseEmbeddingProvider",
    "HashingEmbeddingProvider",
    "create_embedding_provider",
    "EmbeddingBackend",
]
