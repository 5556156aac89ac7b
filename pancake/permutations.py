"""
Functions for working with permutations of the integers [0, n) in word form.

A permutation x is represented by the array [x(0), ..., x(n-1)]. For pancake sorting the array is read
circularly in two ways at once:
- positions wrap, so index n - 1 sits next to index 0, and
- values wrap, so n - 1 and 0 are considered adjacent (see is_value_adjacent).

Functions here accept any sequence of ints (lists, tuples, numpy arrays) and return plain Python values.
"""
from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np
import numpy.typing as npt


def wrap(index: int, size: int) -> int:
    """
    Wrap index into the range [0, size), wrapping negative values around from the top. This is floored modulo,
    which is what Python's % already does for a positive size.

    >>> [wrap(i, 5) for i in [-6, -1, 0, 4, 5, 11]]
    [4, 4, 0, 4, 0, 1]
    """
    assert size > 0
    return index % size


def rank(values: Iterable[int]) -> npt.NDArray[np.int64]:
    """
    Replace each value by its rank in the sorted order of the values, giving a permutation of [0, n). Equal values
    take increasing ranks from left to right, so the result is a permutation even when values repeat.

    >>> tuple(int(x) for x in rank([7, 6, 4, 2, 6, 7, 8, 7]))
    (4, 2, 1, 0, 3, 5, 7, 6)
    >>> rank([]).shape
    (0,)
    """
    values = np.asarray(list(values), dtype=np.int64)

    # A stable sort keeps equal values in input order, which is exactly "the first unused rank among equal values".
    order = np.argsort(values, kind='stable')
    ranks = np.empty(len(values), dtype=np.int64)
    ranks[order] = np.arange(len(values), dtype=np.int64)
    return ranks


def is_permutation(word: Sequence[int]):
    """
    Check that word is a permutation of the integers [0, n) where n = len(word).

    >>> words = [(), (0, 1), (0, 2), (0, 0, 2), (2, 1, 0)]
    >>> [is_permutation(word) for word in words]
    [True, True, False, False, True]
    """
    # Sorting a permutation of [0, n) gives 0, 1, ..., n-1; anything out of range or repeated breaks that.
    return np.array_equal(np.sort(np.asarray(word, dtype=np.int64)), np.arange(len(word)))


def is_identity(perm: Sequence[int]):
    """Whether perm reads 0, 1, ..., n-1, i.e. the stack is sorted."""
    return np.array_equal(np.asarray(perm, dtype=np.int64), np.arange(len(perm)))


def is_value_adjacent(a: int, b: int, n: int) -> bool:
    """
    Whether the values a and b differ by one modulo n.

    >>> is_value_adjacent(0, 4, 5), is_value_adjacent(2, 3, 5), is_value_adjacent(1, 3, 5)
    (True, True, False)
    """
    return b == wrap(a + 1, n) or b == wrap(a - 1, n)


def count_adjacencies(perm: Sequence[int]) -> int:
    """
    Count the positions i (read circularly) where perm[i] and perm[i+1] differ by exactly one. Unlike
    is_value_adjacent this uses the plain difference, so a 0 next to an n - 1 does not count. A stack which
    reads 0, ..., n-1 up to rotation and reversal has exactly n - 1 of these.

    >>> count_adjacencies((2, 0, 1))
    2
    >>> count_adjacencies((0, 1, 2, 3)), count_adjacencies((0, 2, 1, 3)), count_adjacencies(())
    (3, 1, 0)
    """
    perm = np.asarray(perm, dtype=np.int64)
    return int(np.count_nonzero(np.abs(perm - np.roll(perm, -1)) == 1))
