"""
batchembed - batched text embeddings over a hosted embedding API.
"""

from batchembed.core import BatchEmbedConfig, chunk, load_config, resolve_api_key
from batchembed.infrastructure.embedding import (
    AuthenticationError,
    BatchedEmbeddingClient,
    DependencyMissingError,
    EmbeddingClientError,
    ProviderCallError,
    RetryConfig,
    create_embedding_client,
    create_embedding_client_from_config,
)

__version__ = "0.1.0"

__all__ = [
    "BatchEmbedConfig",
    "BatchedEmbeddingClient",
    "RetryConfig",
    "chunk",
    "load_config",
    "resolve_api_key",
    "create_embedding_client",
    "create_embedding_client_from_config",
    "EmbeddingClientError",
    "AuthenticationError",
    "DependencyMissingError",
    "ProviderCallError",
]
