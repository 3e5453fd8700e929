"""Response parsing logic for the embedding API."""

import logging
from typing import Any

from .errors import NonRetryableError

logger = logging.getLogger(__name__)


def parse_embedding_response(response_data: Any, expected_count: int) -> list[list[float]]:
    """
    Parse the API response and extract embeddings.

    Accepts both the plain shape ``{"embeddings": [[...], ...]}`` and the
    typed shape ``{"embeddings": {"float": [[...], ...]}}`` returned when
    embedding types are requested.

    Args:
        response_data: JSON response from the API
        expected_count: Expected number of embeddings

    Returns:
        List of embedding vectors

    Raises:
        NonRetryableError: If response format is invalid
    """
    try:
        embeddings = response_data["embeddings"]
        if isinstance(embeddings, dict):
            embeddings = embeddings["float"]

        if len(embeddings) != expected_count:
            raise NonRetryableError(
                f"Expected {expected_count} embeddings, got {len(embeddings)}"
            )

        vectors = [[float(value) for value in vector] for vector in embeddings]

        dimensions = {len(vector) for vector in vectors}
        if len(dimensions) > 1:
            logger.warning(f"Inconsistent embedding dimensions in response: {sorted(dimensions)}")

        return vectors

    except (KeyError, TypeError, ValueError) as e:
        raise NonRetryableError(f"Invalid response format: {e}") from e


def is_batch_limit_error(status_code: int, response_text: str) -> bool:
    """
    Check if the error response means the request was too large.

    Detects:
    - HTTP 413 status code (Request Entity Too Large)
    - HTTP 400 naming a token limit
    - HTTP 400 naming a limit on the number of texts per call

    Args:
        status_code: HTTP status code from the response
        response_text: Response body text

    Returns:
        True if a smaller batch could succeed, False otherwise
    """
    if status_code == 413:
        return True

    if status_code == 400:
        response_lower = response_text.lower()
        if "token" in response_lower:
            if any(pattern in response_lower for pattern in ["limit", "exceed", "maximum", "many"]):
                return True
        if "texts" in response_lower:
            if any(pattern in response_lower for pattern in ["at most", "too many", "maximum"]):
                return True

    return False
