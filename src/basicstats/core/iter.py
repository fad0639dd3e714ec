"""Run-length grouping of contiguous equal values."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from itertools import groupby
from typing import TypeVar

__all__ = ["iter_with_counts"]

T = TypeVar("T")


def iter_with_counts(iterable: Iterable[T]) -> Iterator[tuple[T, int]]:
    r"""
    Group contiguous equal values into ``(value, count)`` pairs.

    Only adjacent repeats are merged; sort the input first to count every
    distinct value once.

    Examples
    --------
    >>> list(iter_with_counts([1, 3, 10, 10, 10, 9, 9, 10, 20]))
    [(1, 1), (3, 1), (10, 3), (9, 2), (10, 1), (20, 1)]
    """
    for value, group in groupby(iterable):
        yield value, sum(1 for _ in group)
