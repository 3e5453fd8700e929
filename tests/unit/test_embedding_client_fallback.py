import asyncio

import pytest

from batchembed.infrastructure.embedding import BatchedEmbeddingClient, RetryConfig
from batchembed.infrastructure.embedding.errors import BatchSizeError, NonRetryableError
from batchembed.infrastructure.fakes import RecordingProvider


def _client(provider, batch_size: int, **retry_kwargs) -> BatchedEmbeddingClient:
    return BatchedEmbeddingClient(
        api_key="test-key",
        batch_size=batch_size,
        retry_config=RetryConfig(max_retries=0, **retry_kwargs),
        provider_factory=lambda _key: provider,
    )


def test_fallback_halves_batch_and_keeps_order() -> None:
    def limit_three(texts):
        if len(texts) > 3:
            raise BatchSizeError("Request too large: 400 - texts must be at most 3")
        return [[float(t)] for t in texts]

    provider = RecordingProvider(limit_three)
    client = _client(provider, batch_size=8)
    texts = [str(i) for i in range(10)]

    embeddings = asyncio.run(client.embed_many(texts))

    assert embeddings == [[float(i)] for i in range(10)]
    sizes = [len(r["texts"]) for r in provider.requests]
    # 8 fails, 4 fails, then the reduced size of 2 applies to the rest
    assert sizes == [8, 4, 2, 2, 2, 2, 2]


def test_fallback_raises_when_single_item_too_large() -> None:
    def reject_oversized(texts):
        if "oversized" in texts:
            raise BatchSizeError("Token limit exceeded")
        return [[1.0] for _ in texts]

    client = _client(RecordingProvider(reject_oversized), batch_size=2, min_batch_size=1)

    with pytest.raises(NonRetryableError) as exc_info:
        asyncio.run(client.embed_many(["ok-1", "oversized", "ok-2"]))

    assert "index 1" in str(exc_info.value)


def test_fallback_still_raises_when_disabled() -> None:
    def reject(_texts):
        raise BatchSizeError("Token limit exceeded")

    provider = RecordingProvider(reject)
    client = _client(provider, batch_size=2, enable_batch_fallback=False)

    with pytest.raises(NonRetryableError) as exc_info:
        asyncio.run(client.embed_many(["oversized"]))

    assert "fallback is disabled" in str(exc_info.value).lower()
    assert provider.call_count == 1


def test_batch_size_error_is_not_retried() -> None:
    def reject(_texts):
        raise BatchSizeError("Request too large: 413")

    provider = RecordingProvider(reject)
    client = BatchedEmbeddingClient(
        api_key="test-key",
        batch_size=1,
        retry_config=RetryConfig(max_retries=5, base_delay=0.0),
        provider_factory=lambda _key: provider,
    )

    with pytest.raises(NonRetryableError):
        asyncio.run(client.embed_many(["a"]))

    assert provider.call_count == 1


@pytest.mark.parametrize("min_batch_size", [0, -2])
def test_min_batch_size_below_one_rejected(min_batch_size: int) -> None:
    with pytest.raises(ValueError, match="min_batch_size"):
        RetryConfig(max_retries=0, min_batch_size=min_batch_size)


def test_fallback_with_reassigned_min_batch_size_stays_provider_error() -> None:
    def reject(_texts):
        raise BatchSizeError("Request too large: 413")

    retry_config = RetryConfig(max_retries=0)
    retry_config.min_batch_size = 0
    client = BatchedEmbeddingClient(
        api_key="test-key",
        batch_size=1,
        retry_config=retry_config,
        provider_factory=lambda _key: RecordingProvider(reject),
    )

    with pytest.raises(NonRetryableError, match="index 0"):
        asyncio.run(client.embed_many(["a"]))
