"""
Core Layer - Configuration, logging setup, and batch partitioning.
"""

from batchembed.core.batching import chunk
from batchembed.core.config import (
    API_KEY_ENV_VARS,
    BatchEmbedConfig,
    EmbeddingConfig,
    LoggingConfig,
    RetrySettings,
    load_config,
    resolve_api_key,
)
from batchembed.core.logging_setup import configure_logging

__all__ = [
    # Batching
    "chunk",
    # Config
    "API_KEY_ENV_VARS",
    "BatchEmbedConfig",
    "EmbeddingConfig",
    "RetrySettings",
    "LoggingConfig",
    "load_config",
    "resolve_api_key",
    # Logging
    "configure_logging",
]
