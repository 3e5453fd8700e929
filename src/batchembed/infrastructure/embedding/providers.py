"""Remote embedding providers.

CohereHTTPProvider talks to the REST endpoint with httpx and is always
available. CohereSDKProvider wraps the official ``cohere`` package, which is
an optional dependency imported on first use.
"""

import logging
from typing import Any, Callable, Optional

import httpx

from .errors import (
    BatchSizeError,
    DependencyMissingError,
    NonRetryableError,
    ProviderCallError,
    RetryableError,
)
from .interface import EmbeddingProviderInterface
from .response_parser import is_batch_limit_error, parse_embedding_response

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.cohere.com/v1/embed"

ProviderFactory = Callable[[str], EmbeddingProviderInterface]


def error_for_status(status_code: int, response_text: str, context: str) -> ProviderCallError:
    """
    Map a failed HTTP status to the matching ProviderCallError subclass.

    Args:
        status_code: HTTP status code of the failed call
        response_text: Response body text
        context: Request description appended to non-retryable messages

    Returns:
        The exception instance to raise
    """
    if is_batch_limit_error(status_code, response_text):
        return BatchSizeError(
            f"Request too large: {status_code} - {response_text} ({context})"
        )
    if status_code == 429:
        return RetryableError(f"Rate limited: {status_code} - {response_text}")
    if status_code in (500, 502, 503, 504):
        return RetryableError(f"Server error: {status_code} - {response_text}")
    if status_code in (401, 403):
        return NonRetryableError(
            f"Authentication failed: {status_code} - {response_text} ({context})"
        )
    return NonRetryableError(f"API error: {status_code} - {response_text} ({context})")


class CohereHTTPProvider(EmbeddingProviderInterface):
    """
    Embedding provider for Cohere's ``/v1/embed`` REST endpoint.

    The underlying httpx.AsyncClient is created on the first request and
    reused for connection pooling until close() is called.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
    ):
        """
        Initialize the provider.

        Args:
            api_key: API key sent as a bearer token
            api_url: Full URL of the embed endpoint
            timeout: Request timeout in seconds
        """
        self._api_key = api_key
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def embed(
        self, model: str, texts: list[str], input_type: Optional[str] = None
    ) -> list[list[float]]:
        """
        Make the API call to generate embeddings.

        Args:
            model: Model name
            texts: Batch of texts to embed
            input_type: Optional input type hint

        Returns:
            List of embedding vectors

        Raises:
            BatchSizeError: For request-too-large errors
            RetryableError: For rate limits and transient errors
            NonRetryableError: For auth failures and invalid requests
        """
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        payload: dict[str, Any] = {"model": model, "texts": texts}
        if input_type:
            payload["input_type"] = input_type

        client = await self._get_client()
        try:
            response = await client.post(self._api_url, headers=headers, json=payload)
        except httpx.TimeoutException as e:
            raise RetryableError(f"Request timeout: {e}") from e
        except httpx.ConnectError as e:
            raise RetryableError(f"Connection error: {e}") from e
        except httpx.RequestError as e:
            raise RetryableError(f"Request error: {e}") from e

        if response.status_code == 200:
            try:
                data = response.json()
            except ValueError as e:
                raise NonRetryableError(f"Invalid response format: {e}") from e
            return parse_embedding_response(data, len(texts))

        raise error_for_status(
            response.status_code,
            response.text,
            f"url={self._api_url}, model={model}, batch={len(texts)}",
        )


def import_cohere() -> Any:
    """
    Import the optional ``cohere`` package.

    Raises:
        DependencyMissingError: If the package is not installed
    """
    try:
        import cohere
    except ImportError as e:
        raise DependencyMissingError(
            'The "cohere" package is required for the sdk backend. '
            'Install it with: pip install "batchembed[cohere]"'
        ) from e
    return cohere


class CohereSDKProvider(EmbeddingProviderInterface):
    """Embedding provider backed by the official ``cohere`` async client."""

    def __init__(self, api_key: str, loader: Callable[[], Any] = import_cohere):
        self._api_key = api_key
        self._loader = loader
        self._client: Any = None
        self._api_error: type[Exception] = Exception

    def _get_client(self) -> Any:
        if self._client is None:
            cohere = self._loader()
            self._api_error = cohere.core.api_error.ApiError
            self._client = cohere.AsyncClient(api_key=self._api_key)
        return self._client

    async def close(self) -> None:
        self._client = None

    async def embed(
        self, model: str, texts: list[str], input_type: Optional[str] = None
    ) -> list[list[float]]:
        client = self._get_client()
        kwargs: dict[str, Any] = {"model": model, "texts": texts}
        if input_type:
            kwargs["input_type"] = input_type

        try:
            response = await client.embed(**kwargs)
        except httpx.RequestError as e:
            raise RetryableError(f"Request error: {e}") from e
        except self._api_error as e:
            status_code = getattr(e, "status_code", None) or 0
            raise error_for_status(
                status_code, str(getattr(e, "body", e)), f"model={model}, batch={len(texts)}"
            ) from e

        return parse_embedding_response({"embeddings": response.embeddings}, len(texts))


def http_provider_factory(
    api_url: str = DEFAULT_API_URL, timeout: float = 30.0
) -> ProviderFactory:
    """Build a factory producing CohereHTTPProvider instances for an API key."""

    def factory(api_key: str) -> EmbeddingProviderInterface:
        return CohereHTTPProvider(api_key=api_key, api_url=api_url, timeout=timeout)

    return factory


def get_provider_factory(
    backend: str = "http", api_url: str = DEFAULT_API_URL, timeout: float = 30.0
) -> ProviderFactory:
    """
    Return the provider factory for a configured backend name.

    Args:
        backend: "http" for the REST provider or "sdk" for the cohere package
        api_url: Endpoint URL, used by the http backend
        timeout: Request timeout, used by the http backend

    Raises:
        ValueError: If the backend name is unknown
    """
    if backend == "http":
        return http_provider_factory(api_url=api_url, timeout=timeout)
    if backend == "sdk":
        return CohereSDKProvider
    raise ValueError(f"Unknown embedding backend: {backend!r} (expected 'http' or 'sdk')")
