"""Abstract interfaces for embedding clients and remote providers."""

from abc import ABC, abstractmethod
from typing import Optional


class EmbeddingProviderInterface(ABC):
    """A remote embedding endpoint that embeds one request's texts."""

    @abstractmethod
    async def embed(
        self, model: str, texts: list[str], input_type: Optional[str] = None
    ) -> list[list[float]]:
        """
        Embed the given texts in a single remote call.

        Args:
            model: Provider model identifier
            texts: Texts to embed, already sized to the provider's limit
            input_type: Optional provider hint (e.g. "search_document")

        Returns:
            List of embedding vectors aligned with texts

        Raises:
            RetryableError: For transient failures
            NonRetryableError: For failures that must not be retried
            BatchSizeError: If the request is too large for the provider
        """
        pass

    async def close(self) -> None:
        """Release any network resources held by the provider."""
        return None


class EmbeddingClientInterface(ABC):
    """Abstract interface for embedding clients."""

    @abstractmethod
    async def embed_many(self, texts: list[str]) -> list[list[float]]:
        """
        Generate embeddings for any number of texts.

        Args:
            texts: List of text strings to embed

        Returns:
            List of embedding vectors, one per input text
        """
        pass

    @abstractmethod
    async def embed_one(self, text: str) -> list[float]:
        """Generate the embedding for a single text."""
        pass

    async def close(self) -> None:
        """Release resources held by the client."""
        return None
