"""
Sorting utilities
=================

The timeline needs a *stable* ascending sort: conflicts that started on the
same day must keep the order they had in the input list. Merge sort gives us
that guarantee explicitly.
"""

from __future__ import annotations
from typing import Callable, List, Sequence, TypeVar

T = TypeVar("T")

def merge_sort(arr: Sequence[T], key: Callable[[T], object] = lambda x: x) -> List[T]:
    """Stable ascending merge sort; returns a new list."""
    if len(arr) <= 1:
        return list(arr)
    mid = len(arr) // 2
    return _merge(merge_sort(arr[:mid], key=key), merge_sort(arr[mid:], key=key), key=key)

def _merge(left: List[T], right: List[T], key: Callable[[T], object]) -> List[T]:
    out: List[T] = []
    i = j = 0
    while i < len(left) and j < len(right):
        # a right item only goes first when strictly smaller
        if key(right[j]) < key(left[i]):
            out.append(right[j]); j += 1
        else:
            out.append(left[i]); i += 1
    out.extend(left[i:])
    out.extend(right[j:])
    return out
