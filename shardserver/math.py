"""Manhattan-metric helpers for integer grid vectors."""

from __future__ import annotations

from collections.abc import Sequence

__all__ = ["manhattan_magnitude", "manhattan_distance", "in_range"]


def manhattan_magnitude(vec: Sequence[int]) -> int:
    """Return the sum of the absolute values of the vector's components."""
    return sum(abs(component) for component in vec)


def manhattan_distance(a: Sequence[int], b: Sequence[int]) -> int:
    """Return the Manhattan distance between two vectors of the same dimension."""
    if len(a) != len(b):
        raise ValueError(
            f"vectors differ in dimension: {len(a)} and {len(b)}"
        )
    return sum(abs(x - y) for x, y in zip(a, b))


def in_range(a: Sequence[int], b: Sequence[int], range_: int) -> bool:
    """Return True when ``b`` lies within ``range_`` Manhattan steps of ``a``."""
    return manhattan_distance(a, b) <= range_