"""Base embedding provider interface."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from core.exceptions import ProviderUnavailableError

logger = logging.getLogger(__name__)


class BaseEmbeddingProvider(ABC):
    """
    Abstract base class for embedding providers.

    Subclasses implement ``_load`` (one-time resource loading) and ``_embed``.
    Initialization is single-flight: concurrent first callers wait on the same
    lock and the provider only reports ready once loading has completed.
    """

    def __init__(self):
        self._ready = False
        self._init_error: Optional[Exception] = None
        self._init_lock = threading.Lock()

    @abstractmethod
    def _load(self) -> None:
        """Load the underlying model or client."""
        pass

    @abstractmethod
    def _embed(self, text: str) -> np.ndarray:
        """Embed a single text with the loaded backend."""
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Get the name of the embedding provider."""
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """Get the name of the model being used."""
        pass

    def is_ready(self) -> bool:
        """Check if the provider finished initializing."""
        return self._ready

    def initialize(self) -> None:
        """
        Initialize the provider once.

        Raises:
            ProviderUnavailableError: If loading fails, now or on an earlier
                call. The failure is remembered until reset() is called.
        """
        if self._ready:
            return

        with self._init_lock:
            if self._ready:
                return

            if self._init_error is not None:
                raise ProviderUnavailableError(
                    f"{self.get_provider_name()} embeddings unavailable: {self._init_error}"
                )

            logger.info(f"Initializing {self.get_provider_name()} embeddings ({self.get_model_name()})...")
            try:
                self._load()
            except ProviderUnavailableError as e:
                self._init_error = e
                raise
            except Exception as e:
                self._init_error = e
                logger.error(f"Failed to initialize {self.get_provider_name()} embeddings: {e}")
                raise ProviderUnavailableError(
                    f"{self.get_provider_name()} embedding initialization failed: {e}"
                ) from e

            self._ready = True
            logger.info(f"{self.get_provider_name()} embeddings initialized")

    def reset(self) -> None:
        """Forget a failed initialization so the next call loads again."""
        with self._init_lock:
            self._init_error = None

    def embed(self, text: str) -> np.ndarray:
        """
        Embed a text, initializing the provider on first use.

        Args:
            text: Text to embed

        Returns:
            Embedding vector

        Raises:
            ProviderUnavailableError: If the provider cannot produce a vector
        """
        self.initialize()

        try:
            return np.asarray(self._embed(text), dtype=float)
        except ProviderUnavailableError:
            raise
        except Exception as e:
            raise ProviderUnavailableError(
                f"{self.get_provider_name()} embedding request failed: {e}"
            ) from e
