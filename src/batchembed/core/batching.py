"""Batch partitioning utility."""

from typing import Sequence, TypeVar

T = TypeVar("T")


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    """
    Split items into consecutive batches of at most ``size`` elements.

    Every batch except possibly the last has exactly ``size`` elements.
    Concatenating the batches yields the original sequence.

    Args:
        items: Sequence to partition
        size: Maximum number of elements per batch

    Returns:
        List of batches in input order

    Raises:
        ValueError: If size is less than 1
    """
    if size < 1:
        raise ValueError("size must be at least 1")

    return [list(items[i : i + size]) for i in range(0, len(items), size)]
