"""Batched embedding client implementation."""

import logging
from typing import List, Optional

from batchembed.core.batching import chunk
from batchembed.core.config import BatchEmbedConfig, resolve_api_key

from .errors import AuthenticationError, BatchSizeError, NonRetryableError
from .interface import EmbeddingClientInterface, EmbeddingProviderInterface
from .providers import DEFAULT_API_URL, ProviderFactory, get_provider_factory
from .retry import RetryConfig, RetryingCaller

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "embed-english-light-v3.0"
# The provider accepts at most 96 texts per call
DEFAULT_BATCH_SIZE = 48


class BatchedEmbeddingClient(EmbeddingClientInterface):
    """
    Embedding client that splits input into provider-sized batches.

    Each batch is sent as one request through a RetryingCaller, batches
    are processed sequentially, and the results are concatenated in input
    order. The remote provider is built from the API key on first use and
    reused afterwards.

    Batch Fallback Behavior:
        When enabled (default), a BatchSizeError from the provider halves
        the batch size and the same position is retried. The reduced size
        applies to the rest of the call. If a batch of min_batch_size still
        fails, a NonRetryableError is raised and no embeddings are returned.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        batch_size: int = DEFAULT_BATCH_SIZE,
        input_type: Optional[str] = "search_document",
        retry_config: Optional[RetryConfig] = None,
        provider_factory: Optional[ProviderFactory] = None,
        caller: Optional[RetryingCaller] = None,
    ):
        """
        Initialize the embedding client.

        Args:
            api_key: API key for the provider
            model: Model name to use for embeddings
            batch_size: Maximum texts per API call
            input_type: Input type hint forwarded to the provider
            retry_config: Configuration for retry behavior
            provider_factory: Builds the remote provider from the API key
            caller: Retrying invoker; built from retry_config when omitted

        Raises:
            AuthenticationError: If no API key is given
            ValueError: If batch_size is less than 1 or the retry config is invalid
        """
        if not api_key:
            raise AuthenticationError(
                "Embedding API key not found. Pass api_key or set COHERE_API_KEY."
            )
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        self._api_key = api_key
        self._model = model
        self._batch_size = batch_size
        self._input_type = input_type
        self._caller = caller or RetryingCaller(retry_config)
        self._provider_factory = provider_factory or get_provider_factory("http")
        self._provider: Optional[EmbeddingProviderInterface] = None

    @property
    def model(self) -> str:
        return self._model

    @property
    def batch_size(self) -> int:
        """Return the configured batch size."""
        return self._batch_size

    def _get_provider(self) -> EmbeddingProviderInterface:
        """Create the provider on first use."""
        if self._provider is None:
            self._provider = self._provider_factory(self._api_key)
            logger.debug(f"Initialized embedding provider {type(self._provider).__name__}")
        return self._provider

    async def close(self) -> None:
        """Release the provider and its connections."""
        if self._provider is not None:
            await self._provider.close()
            self._provider = None

    async def __aenter__(self) -> "BatchedEmbeddingClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def embed_many(self, texts: List[str]) -> List[List[float]]:
        """
        Generate embeddings for any number of texts.

        Args:
            texts: List of text strings to embed

        Returns:
            List of embedding vectors in the same order as input texts

        Raises:
            ProviderCallError: If a batch fails after retries
            NonRetryableError: If a single item is too large for the provider
        """
        if not texts:
            return []

        return await self._embed_with_fallback(list(texts), self._batch_size)

    async def embed_one(self, text: str) -> List[float]:
        """Generate the embedding for one text with a single request."""
        embeddings = await self._embed_single_batch([text])
        return embeddings[0]

    async def _embed_with_fallback(
        self, texts: List[str], current_batch_size: int
    ) -> List[List[float]]:
        """
        Embed texts batch by batch, shrinking the batch on BatchSizeError.

        Args:
            texts: List of texts to embed
            current_batch_size: Batch size to start with

        Returns:
            List of embedding vectors in the same order as input texts
        """
        all_embeddings: List[List[float]] = []
        config = self._caller.config
        # RetryConfig fields can be reassigned after validation
        min_batch_size = max(1, config.min_batch_size)

        # i is the offset of the first text not yet embedded
        i = 0
        batches = chunk(texts, current_batch_size)
        while batches:
            batch = batches[0]

            try:
                batch_embeddings = await self._embed_single_batch(batch)
            except BatchSizeError as e:
                if not config.enable_batch_fallback:
                    raise NonRetryableError(
                        f"Request too large and batch fallback is disabled: {e}"
                    ) from e

                if current_batch_size <= min_batch_size:
                    logger.error(
                        f"Item at index {i} is too large for the provider, "
                        f"cannot reduce batch further (min_batch_size={min_batch_size})"
                    )
                    raise NonRetryableError(
                        f"Batch starting at index {i} is too large: {e}"
                    ) from e

                new_batch_size = max(min_batch_size, current_batch_size // 2)
                logger.warning(
                    f"Request too large, reducing batch size from "
                    f"{current_batch_size} to {new_batch_size}"
                )
                current_batch_size = new_batch_size
                batches = chunk(texts[i:], current_batch_size)
                continue

            all_embeddings.extend(batch_embeddings)
            logger.debug(f"Embedded texts {i}..{i + len(batch) - 1} of {len(texts)}")
            i += len(batch)
            batches = batches[1:]

        return all_embeddings

    async def _embed_single_batch(self, texts: List[str]) -> List[List[float]]:
        """Send one batch to the provider through the retrying caller."""
        provider = self._get_provider()
        return await self._caller.call(provider.embed, self._model, texts, self._input_type)


def create_embedding_client(
    api_key: Optional[str] = None,
    api_url: str = DEFAULT_API_URL,
    model: str = DEFAULT_MODEL,
    batch_size: int = DEFAULT_BATCH_SIZE,
    input_type: Optional[str] = "search_document",
    backend: str = "http",
    timeout: float = 30.0,
    max_retries: int = 3,
    enable_batch_fallback: bool = True,
    min_batch_size: int = 1,
) -> BatchedEmbeddingClient:
    """
    Factory function to create an embedding client.

    The API key falls back to the environment (COHERE_API_KEY, then
    BATCHEMBED_EMBEDDING_API_KEY) when not given.

    Args:
        api_key: API key for authentication
        api_url: Endpoint URL for the http backend
        model: Model name to use for embeddings
        batch_size: Maximum texts per API call
        input_type: Input type hint forwarded to the provider
        backend: "http" or "sdk"
        timeout: Request timeout in seconds
        max_retries: Maximum number of retry attempts
        enable_batch_fallback: Whether to reduce batch size on "too large" errors
        min_batch_size: Minimum batch size when reducing

    Returns:
        Configured BatchedEmbeddingClient instance

    Raises:
        AuthenticationError: If no API key can be resolved
    """
    retry_config = RetryConfig(
        max_retries=max_retries,
        enable_batch_fallback=enable_batch_fallback,
        min_batch_size=min_batch_size,
    )

    return BatchedEmbeddingClient(
        api_key=resolve_api_key(api_key),
        model=model,
        batch_size=batch_size,
        input_type=input_type,
        retry_config=retry_config,
        provider_factory=get_provider_factory(backend, api_url=api_url, timeout=timeout),
    )


def create_embedding_client_from_config(
    config: BatchEmbedConfig, api_key: Optional[str] = None
) -> BatchedEmbeddingClient:
    """
    Create an embedding client from a loaded BatchEmbedConfig.

    The key is resolved in the same order as create_embedding_client:
    explicit argument, COHERE_API_KEY, BATCHEMBED_EMBEDDING_API_KEY, and
    finally the api_key value from the config file.
    """
    retry = config.retry
    retry_config = RetryConfig(
        max_retries=retry.max_retries,
        base_delay=retry.base_delay,
        max_delay=retry.max_delay,
        exponential_base=retry.exponential_base,
        enable_batch_fallback=retry.enable_batch_fallback,
        min_batch_size=retry.min_batch_size,
    )

    embedding = config.embedding
    return BatchedEmbeddingClient(
        api_key=resolve_api_key(api_key) or embedding.api_key,
        model=embedding.model,
        batch_size=embedding.batch_size,
        input_type=embedding.input_type or None,
        retry_config=retry_config,
        provider_factory=get_provider_factory(
            embedding.backend, api_url=embedding.api_url, timeout=embedding.timeout
        ),
    )
