"""
Embedding client module for batchembed.

Provides an async client that splits texts into provider-sized batches,
calls the remote embedding endpoint once per batch with exponential
backoff retry, and returns the vectors in input order.
"""

from .client import (
    BatchedEmbeddingClient,
    create_embedding_client,
    create_embedding_client_from_config,
)
from .errors import (
    AuthenticationError,
    BatchSizeError,
    DependencyMissingError,
    EmbeddingClientError,
    NonRetryableError,
    ProviderCallError,
    RetryableError,
)
from .interface import EmbeddingClientInterface, EmbeddingProviderInterface
from .providers import (
    CohereHTTPProvider,
    CohereSDKProvider,
    get_provider_factory,
    import_cohere,
)
from .retry import RetryConfig, RetryingCaller, with_retry

__all__ = [
    "EmbeddingClientInterface",
    "EmbeddingProviderInterface",
    "BatchedEmbeddingClient",
    "create_embedding_client",
    "create_embedding_client_from_config",
    "CohereHTTPProvider",
    "CohereSDKProvider",
    "get_provider_factory",
    "import_cohere",
    "EmbeddingClientError",
    "AuthenticationError",
    "DependencyMissingError",
    "ProviderCallError",
    "RetryableError",
    "NonRetryableError",
    "BatchSizeError",
    "RetryConfig",
    "RetryingCaller",
    "with_retry",
]
