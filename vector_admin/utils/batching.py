"""Fixed-size batching for backend insert calls."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TypeVar

_T = TypeVar("_T")


def to_chunks(items: Sequence[_T], size: int) -> Iterator[list[_T]]:
    """Yield consecutive slices of *items* holding at most *size* elements.

    The final slice may be shorter.  An empty sequence yields nothing.
    """
    if size <= 0:
        raise ValueError(f"batch size must be positive, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])
