"""Adapter from a three-way comparison function to an orderable comparator."""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class CompareWrapper(Generic[T]):
    """Wrap ``compare(x, y) -> int`` so it can order items.

    Negative means *x* sorts first. The wrapper is callable like the function
    it wraps and exposes a ``key`` for ``sorted``/``list.sort``.
    """

    def __init__(self, compare: Callable[[T, T], int]) -> None:
        self._compare = compare
        self.key: Callable[[T], Any] = functools.cmp_to_key(compare)

    def compare(self, x: T, y: T) -> int:
        return self._compare(x, y)

    __call__ = compare

    def sort(self, items: Iterable[T]) -> list[T]:
        """Return *items* in priority order. The sort is stable."""
        return sorted(items, key=self.key)
