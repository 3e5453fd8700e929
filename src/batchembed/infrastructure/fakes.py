"""
Fake implementations for testing.

Provides in-memory embedding providers for use in unit tests and
offline runs without network access.
"""

from __future__ import annotations

import hashlib
import math
from collections.abc import Callable
from typing import Optional

from batchembed.infrastructure.embedding import EmbeddingProviderInterface


class LocalEmbeddingProvider(EmbeddingProviderInterface):
    """
    Local embedding provider for testing.

    Returns deterministic pseudo-random vectors based on text hash.
    No API calls required.
    """

    def __init__(self, dimension: int = 384):
        """
        Initialize local embedding provider.

        Args:
            dimension: Dimension of embedding vectors to generate
        """
        self._dimension = dimension
        self.calls: list[list[str]] = []
        self.closed = False

    async def embed(
        self, model: str, texts: list[str], input_type: Optional[str] = None
    ) -> list[list[float]]:
        """
        Generate deterministic embeddings for texts.

        Uses SHA-256 hash of text to generate reproducible vectors.
        Same text always produces same embedding.
        """
        self.calls.append(list(texts))
        return [self.text_to_vector(text) for text in texts]

    async def close(self) -> None:
        self.closed = True

    def text_to_vector(self, text: str) -> list[float]:
        """Convert text to a deterministic unit vector."""
        vector: list[float] = []
        hash_bytes = hashlib.sha256(text.encode("utf-8")).digest()

        while len(vector) < self._dimension:
            for byte in hash_bytes:
                if len(vector) >= self._dimension:
                    break
                # Convert byte to float in range [-1, 1]
                vector.append((byte / 127.5) - 1.0)

            if len(vector) < self._dimension:
                hash_bytes = hashlib.sha256(hash_bytes).digest()

        norm = math.sqrt(sum(v * v for v in vector))
        if norm > 0:
            vector = [v / norm for v in vector]

        return vector


class RecordingProvider(EmbeddingProviderInterface):
    """
    Scriptable provider that records every request it receives.

    ``handler`` computes the response for each call; it may raise any
    ProviderCallError subclass to simulate failures. By default each text
    is embedded as ``[float(len(text))]``.
    """

    def __init__(
        self,
        handler: Optional[Callable[[list[str]], list[list[float]]]] = None,
    ):
        self._handler = handler or (lambda texts: [[float(len(t))] for t in texts])
        self.requests: list[dict] = []
        self.closed = False

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def embed(
        self, model: str, texts: list[str], input_type: Optional[str] = None
    ) -> list[list[float]]:
        self.requests.append({"model": model, "texts": list(texts), "input_type": input_type})
        return self._handler(list(texts))

    async def close(self) -> None:
        self.closed = True
