"""
Infrastructure Layer - Embedding client, remote providers, and test fakes.
"""

from batchembed.infrastructure.embedding import (
    AuthenticationError,
    BatchedEmbeddingClient,
    BatchSizeError,
    CohereHTTPProvider,
    CohereSDKProvider,
    DependencyMissingError,
    EmbeddingClientError,
    EmbeddingClientInterface,
    EmbeddingProviderInterface,
    NonRetryableError,
    ProviderCallError,
    RetryableError,
    RetryConfig,
    RetryingCaller,
    create_embedding_client,
    create_embedding_client_from_config,
)
from batchembed.infrastructure.fakes import (
    LocalEmbeddingProvider,
    RecordingProvider,
)

__all__ = [
    # Embedding client
    "EmbeddingClientInterface",
    "EmbeddingProviderInterface",
    "BatchedEmbeddingClient",
    "CohereHTTPProvider",
    "CohereSDKProvider",
    "EmbeddingClientError",
    "AuthenticationError",
    "DependencyMissingError",
    "ProviderCallError",
    "RetryableError",
    "NonRetryableError",
    "BatchSizeError",
    "RetryConfig",
    "RetryingCaller",
    "create_embedding_client",
    "create_embedding_client_from_config",
    # Fakes
    "LocalEmbeddingProvider",
    "RecordingProvider",
]
