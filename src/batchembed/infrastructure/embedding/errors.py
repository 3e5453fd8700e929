"""Exception types for embedding client."""


class EmbeddingClientError(Exception):
    """Base exception for embedding client errors."""

    pass


class AuthenticationError(EmbeddingClientError):
    """No API key could be resolved when the client was constructed."""

    pass


class DependencyMissingError(EmbeddingClientError):
    """An optional provider library is not installed."""

    pass


class ProviderCallError(EmbeddingClientError):
    """A remote embedding call failed.

    Raised directly when retries are exhausted; the subclasses below
    classify individual failures.
    """

    pass


class RetryableError(ProviderCallError):
    """Error that can be retried (rate limits, temporary failures)."""

    pass


class NonRetryableError(ProviderCallError):
    """Error that should not be retried (auth failures, invalid requests)."""

    pass


class BatchSizeError(ProviderCallError):
    """Error indicating the request carried too many texts or tokens.

    Raised when the provider answers with a 413 status code or a 400
    whose message names a text or token limit. The embedding client
    halves its batch size and retries the same position when batch
    fallback is enabled.
    """

    pass
